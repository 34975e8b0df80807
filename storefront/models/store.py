import uuid
from datetime import datetime, time

from sqlalchemy import (Boolean, DateTime, Float, ForeignKey, Integer, String,
                        Text, Time)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.database import Base


def _new_store_id() -> str:
    return uuid.uuid4().hex


class Store(Base):
    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=_new_store_id
    )
    name: Mapped[str] = mapped_column(String(200))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    pause_active: Mapped[bool] = mapped_column(Boolean, default=False)
    pause_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    pause_minutes: Mapped[float | None] = mapped_column(Float, nullable=True)
    pause_started_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    pause_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    blocked: Mapped[bool] = mapped_column(Boolean, default=False)
    block_reason: Mapped[str] = mapped_column(Text, default="")
    is_financial_block: Mapped[bool] = mapped_column(Boolean, default=False)
    financial_value: Mapped[float] = mapped_column(Float, default=0)
    financial_installments: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    windows: Mapped[list["ScheduleWindow"]] = relationship(
        "ScheduleWindow",
        back_populates="store",
        cascade="all, delete-orphan",
        order_by="[ScheduleWindow.weekday, ScheduleWindow.position]",
    )


class ScheduleWindow(Base):
    __tablename__ = "schedule_windows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[str] = mapped_column(
        ForeignKey("stores.id", ondelete="CASCADE"), index=True
    )
    weekday: Mapped[int] = mapped_column(Integer)
    opens_at: Mapped[time] = mapped_column(Time)
    closes_at: Mapped[time] = mapped_column(Time)
    position: Mapped[int] = mapped_column(Integer, default=0)

    store: Mapped[Store] = relationship("Store", back_populates="windows")