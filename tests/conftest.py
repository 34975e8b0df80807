from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.core.config import ADMIN_PASSWORD
from storefront.core.database import get_db, init_db
from storefront.main import app
from storefront.models import ScheduleWindow, Store
from storefront.services.availability import AvailabilityResolver
from storefront.services.stores import StoreControl, get_resolver

TZ = ZoneInfo("America/Sao_Paulo")
# 2024-06-03 is a Monday
MONDAY = datetime(2024, 6, 3, tzinfo=TZ)


def at(day: datetime, hour: int, minute: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute)


class FixedClock:
    def __init__(self, moment: datetime) -> None:
        self.current = moment
        self.tz = moment.tzinfo

    def now(self) -> datetime:
        return self.current

    def set(self, moment: datetime) -> None:
        self.current = moment

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(at(MONDAY, 10))


@pytest.fixture
def make_store():
    def factory(windows=(), **fields):
        values = {
            "id": "store-1",
            "name": "Pizzaria Centro",
            "is_active": True,
            "pause_active": False,
            "blocked": False,
            "block_reason": "",
            "is_financial_block": False,
            "financial_value": 0.0,
            "financial_installments": 0,
        }
        values.update(fields)
        rows = [
            ScheduleWindow(
                weekday=weekday,
                opens_at=time.fromisoformat(opens_at),
                closes_at=time.fromisoformat(closes_at),
            )
            for weekday, opens_at, closes_at in windows
        ]
        return Store(windows=rows, **values)

    return factory


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def resolver(clock):
    return AvailabilityResolver(clock, cache_ttl=0)


@pytest.fixture
def control(db, resolver):
    return StoreControl(db, resolver)


@pytest.fixture
def client(session_factory, resolver):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    response = client.post("/admin/login", data={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
