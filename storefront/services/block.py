import math
from dataclasses import dataclass
from typing import Any, Optional

from storefront.core.errors import ValidationError


@dataclass(frozen=True)
class BlockState:
    blocked: bool = False
    reason: str = ""
    is_financial_block: bool = False
    financial_value: float = 0.0
    financial_installments: int = 0

    def to_dict(self) -> dict:
        return {
            "blocked": self.blocked,
            "reason": self.reason,
            "isFinancialBlock": self.is_financial_block,
            "financialValue": self.financial_value,
            "financialInstallments": self.financial_installments,
        }


def block_state(store) -> BlockState:
    if not store.blocked:
        return BlockState()
    return BlockState(
        blocked=True,
        reason=store.block_reason or "",
        is_financial_block=bool(store.is_financial_block),
        financial_value=float(store.financial_value or 0),
        financial_installments=int(store.financial_installments or 0),
    )


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def apply_block(
    store,
    reason: Optional[str],
    is_financial_block: bool = False,
    financial_value: Any = None,
    financial_installments: Any = None,
) -> BlockState:
    cleaned = reason.strip() if isinstance(reason, str) else ""
    if not cleaned:
        raise ValidationError("Block reason is required")
    if is_financial_block:
        if not _is_number(financial_value) or financial_value < 0:
            raise ValidationError(
                "Financial block needs a non-negative financialValue"
            )
        if (
            isinstance(financial_installments, bool)
            or not isinstance(financial_installments, int)
            or financial_installments < 1
        ):
            raise ValidationError(
                "Financial block needs financialInstallments of at least 1"
            )

    state = BlockState(
        blocked=True,
        reason=cleaned,
        is_financial_block=bool(is_financial_block),
        financial_value=float(financial_value) if is_financial_block else 0.0,
        financial_installments=(
            financial_installments if is_financial_block else 0
        ),
    )
    store.blocked = True
    store.block_reason = state.reason
    store.is_financial_block = state.is_financial_block
    store.financial_value = state.financial_value
    store.financial_installments = state.financial_installments
    store.is_active = False
    return state


def clear_block(store) -> bool:
    changed = bool(store.blocked) or store.is_active is False
    store.blocked = False
    store.block_reason = ""
    store.is_financial_block = False
    store.financial_value = 0.0
    store.financial_installments = 0
    store.is_active = True
    return changed
