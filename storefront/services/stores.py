import logging
from typing import Any, Iterable, Mapping, Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.core.database import get_db
from storefront.core.errors import (NotFoundError, StaleReadWarning,
                                    ValidationError)
from storefront.models import ScheduleWindow, Store
from storefront.services.availability import (AvailabilityResolver,
                                              AvailabilityResult)
from storefront.services.block import (BlockState, apply_block, block_state,
                                       clear_block)
from storefront.services.pause import (NO_PAUSE, PauseState, apply_pause,
                                       clear_pause, effective_pause)
from storefront.services.schedule import (Window, build_windows,
                                          serialize_windows)

logger = logging.getLogger(__name__)


class StoreRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, store_id: str) -> Store:
        store = self.db.get(Store, store_id)
        if store is None:
            raise NotFoundError(store_id)
        return store

    def all(self) -> list[Store]:
        return list(
            self.db.execute(
                select(Store)
                .options(selectinload(Store.windows))
                .order_by(Store.name, Store.id)
            ).scalars()
        )

    def put(self, store: Store) -> None:
        self.db.add(store)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete(self, store: Store) -> None:
        self.db.delete(store)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise


def _window_rows(windows: Iterable[Window]) -> list[ScheduleWindow]:
    return [
        ScheduleWindow(
            weekday=window.weekday,
            opens_at=window.opens_at,
            closes_at=window.closes_at,
            position=window.position,
        )
        for window in windows
    ]


class StoreControl:
    """Store registry and admin controls over pause and block state.

    Every mutation validates before touching the record, persists, drops
    the cached availability and returns the new sub-state.
    """

    def __init__(self, db: Session, resolver: AvailabilityResolver) -> None:
        self.repository = StoreRepository(db)
        self.resolver = resolver

    def create_store(
        self, name: str, schedule: Optional[Mapping[Any, Iterable]] = None
    ) -> Store:
        cleaned = name.strip() if isinstance(name, str) else ""
        if not cleaned:
            raise ValidationError("Store name is required")
        windows = build_windows(schedule) if schedule else []
        store = Store(
            name=cleaned,
            is_active=True,
            pause_active=False,
            blocked=False,
            block_reason="",
            is_financial_block=False,
            financial_value=0.0,
            financial_installments=0,
            windows=_window_rows(windows),
        )
        self.repository.put(store)
        logger.info("Created store %s (%s)", store.id, store.name)
        return store

    def get_store(self, store_id: str) -> Store:
        return self.repository.get(store_id)

    def describe_store(self, store_id: str) -> dict:
        store = self.repository.get(store_id)
        pause = effective_pause(store, self.resolver.now())
        return {
            "id": store.id,
            "name": store.name,
            "isActive": bool(store.is_active),
            "schedule": serialize_windows(store.windows),
            "pause": pause.to_dict(),
            "block": block_state(store).to_dict(),
        }

    def delete_store(self, store_id: str) -> None:
        store = self.repository.get(store_id)
        self.repository.delete(store)
        self.resolver.invalidate(store_id)
        logger.info("Deleted store %s", store_id)

    def set_schedule(
        self, store_id: str, schedule: Mapping[Any, Iterable]
    ) -> dict[str, list[dict]]:
        windows = build_windows(schedule)
        store = self.repository.get(store_id)
        store.windows = _window_rows(windows)
        self.repository.put(store)
        self.resolver.invalidate(store_id)
        logger.info(
            "Updated schedule of store %s (%d windows)", store_id, len(windows)
        )
        return serialize_windows(windows)

    def get_availability(self, store_id: str) -> AvailabilityResult:
        cached = self.resolver.cached(store_id)
        if cached is not None:
            return cached
        generation = self.resolver.generation()
        store = self.repository.get(store_id)
        return self._availability_for(store, generation=generation)

    def list_availability(self) -> list[AvailabilityResult]:
        now = self.resolver.now()
        generation = self.resolver.generation()
        results = []
        for store in self.repository.all():
            cached = self.resolver.cached(store.id)
            results.append(cached or self._availability_for(store, now, generation))
        return results

    def pause_store(
        self, store_id: str, minutes: Any, reason: Optional[str] = None
    ) -> PauseState:
        store = self.repository.get(store_id)
        pause = apply_pause(store, minutes, reason, self.resolver.now())
        self.repository.put(store)
        self.resolver.invalidate(store_id)
        logger.info(
            "Paused store %s until %s: %s",
            store_id,
            pause.expires_at.isoformat() if pause.expires_at else "resumed",
            pause.reason,
        )
        return pause

    def resume_store_pause(self, store_id: str) -> PauseState:
        store = self.repository.get(store_id)
        if clear_pause(store):
            self.repository.put(store)
            self.resolver.invalidate(store_id)
            logger.info("Resumed store %s", store_id)
        return NO_PAUSE

    def block_store(
        self,
        store_id: str,
        reason: Optional[str],
        is_financial_block: bool = False,
        financial_value: Any = None,
        financial_installments: Any = None,
    ) -> BlockState:
        store = self.repository.get(store_id)
        state = apply_block(
            store,
            reason,
            is_financial_block,
            financial_value,
            financial_installments,
        )
        self.repository.put(store)
        self.resolver.invalidate(store_id)
        logger.info("Blocked store %s: %s", store_id, state.reason)
        return state

    def unblock_store(self, store_id: str) -> BlockState:
        store = self.repository.get(store_id)
        if clear_block(store):
            self.repository.put(store)
            self.resolver.invalidate(store_id)
            logger.info("Unblocked store %s", store_id)
        return block_state(store)

    def _availability_for(
        self, store: Store, now=None, generation=None
    ) -> AvailabilityResult:
        result = self.resolver.resolve(store, now)
        if result.pause_expired:
            self._write_back_expiry(store)
        self.resolver.remember(result, generation)
        return result

    def _write_back_expiry(self, store: Store) -> None:
        store_id = store.id
        clear_pause(store)
        try:
            self.repository.put(store)
        except SQLAlchemyError as exc:
            logger.warning("%s", StaleReadWarning(store_id, exc))
        else:
            logger.info("Cleared expired pause of store %s", store_id)


def get_resolver(request: Request) -> AvailabilityResolver:
    return request.app.state.resolver


def get_store_control(
    db: Session = Depends(get_db),
    resolver: AvailabilityResolver = Depends(get_resolver),
) -> StoreControl:
    return StoreControl(db, resolver)
