from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WindowIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    opens_at: str = Field(alias="opensAt")
    closes_at: str = Field(alias="closesAt")


def windows_payload(
    schedule: Optional[dict[str, list[WindowIn]]]
) -> Optional[dict[str, list[tuple[str, str]]]]:
    if schedule is None:
        return None
    return {
        day: [(window.opens_at, window.closes_at) for window in windows]
        for day, windows in schedule.items()
    }


class StoreCreate(BaseModel):
    name: str
    schedule: Optional[dict[str, list[WindowIn]]] = None


class ScheduleUpdate(BaseModel):
    schedule: dict[str, list[WindowIn]]


class PauseRequest(BaseModel):
    minutes: float = 0
    reason: str = ""


class BlockRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reason: str = ""
    is_financial_block: bool = Field(False, alias="isFinancialBlock")
    financial_value: Optional[float] = Field(None, alias="financialValue")
    financial_installments: Optional[int] = Field(
        None, alias="financialInstallments"
    )
