"""
Stock availability decision.

Pure function over a snapshot the caller already fetched:
- StockPolicy (global on/off switch)
- StockMode (per product: QUANTITY or WEIGHT)
- InventoryRecord (None when the product/variant has no row)
- CommitmentRequest + ExistingCommitment (what is asked now / already in cart)

Nothing here touches the database; re-checking inside the transaction that
decrements stock is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from core.errors import InputError

# Reported as the available amount when stock management is off.
UNLIMITED_STOCK = 999999

Amount = Union[int, float, Decimal]


class StockMode(str, Enum):
    QUANTITY = "quantity"
    WEIGHT = "weight"


class Reason(str, Enum):
    OK = "ok"
    DISABLED = "disabled"
    NO_RECORD = "no_record"
    INSUFFICIENT = "insufficient"
    AT_MAXIMUM = "at_maximum"


@dataclass(frozen=True)
class StockPolicy:
    stock_management_enabled: bool = True


@dataclass(frozen=True)
class InventoryRecord:
    available_quantity: int = 0
    available_weight: Union[float, Decimal] = 0  # grams


@dataclass(frozen=True)
class CommitmentRequest:
    product_id: Optional[Union[UUID, str]]
    variant_id: Optional[Union[UUID, str]] = None
    quantity: Optional[int] = None
    weight: Optional[float] = None  # grams


@dataclass(frozen=True)
class ExistingCommitment:
    quantity: int = 0
    unit_count: int = 0
    per_unit_weight: Union[float, Decimal] = 0


NO_COMMITMENT = ExistingCommitment()


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    sufficient_for_total: bool
    headroom: Amount
    available_amount: Amount
    reason: Reason


def _grams(value: Amount) -> Decimal:
    # str() keeps 1.1 as 1.1 instead of its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _non_negative(name: str, value: Amount) -> Amount:
    if value < 0:
        raise InputError(f"{name} must be >= 0")
    return value


def requested_amount(mode: StockMode, request: CommitmentRequest) -> Amount:
    """Amount asked for by `request` in the unit of `mode`."""
    if mode == StockMode.QUANTITY:
        if request.weight is not None:
            raise InputError("requestedWeight is not valid for a quantity-managed product")
        if request.quantity is None:
            raise InputError("requestedQuantity is required for a quantity-managed product")
        return _non_negative("requestedQuantity", request.quantity)

    # WEIGHT: the scalar quantity stands in when no weight was sent
    amount = request.weight if request.weight is not None else request.quantity
    if amount is None:
        raise InputError("requestedWeight is required for a weight-managed product")
    return _non_negative("requestedWeight", _grams(amount))


def committed_amount(mode: StockMode, existing: ExistingCommitment) -> Amount:
    """Amount of the product already held by the requester."""
    if mode == StockMode.QUANTITY:
        return _non_negative("existingQuantity", existing.quantity)
    _non_negative("existingUnitCount", existing.unit_count)
    per_unit = _non_negative("perUnitWeight", _grams(existing.per_unit_weight))
    return existing.unit_count * per_unit


def available_amount(mode: StockMode, inventory: InventoryRecord) -> Amount:
    if mode == StockMode.QUANTITY:
        return inventory.available_quantity or 0
    return _grams(inventory.available_weight or 0)


def evaluate(
    policy: StockPolicy,
    mode: StockMode,
    inventory: Optional[InventoryRecord],
    request: CommitmentRequest,
    existing: ExistingCommitment = NO_COMMITMENT,
) -> AvailabilityResult:
    if request.product_id is None or request.product_id == "":
        raise InputError("productId is required")
    mode = StockMode(mode)
    requested = requested_amount(mode, request)
    committed = committed_amount(mode, existing)

    if not policy.stock_management_enabled:
        return AvailabilityResult(
            available=True,
            sufficient_for_total=True,
            headroom=UNLIMITED_STOCK,
            available_amount=UNLIMITED_STOCK,
            reason=Reason.DISABLED,
        )

    if inventory is None:
        return AvailabilityResult(
            available=False,
            sufficient_for_total=False,
            headroom=0,
            available_amount=0,
            reason=Reason.NO_RECORD,
        )

    on_hand = available_amount(mode, inventory)
    sufficient = committed + requested <= on_hand
    headroom = on_hand - committed

    if sufficient:
        reason = Reason.OK
    elif headroom > 0:
        reason = Reason.INSUFFICIENT
    else:
        reason = Reason.AT_MAXIMUM

    return AvailabilityResult(
        available=on_hand >= requested,
        sufficient_for_total=sufficient,
        headroom=headroom,
        available_amount=on_hand,
        reason=reason,
    )


def format_amount(amount: Amount) -> str:
    # 500.0 -> "500", Decimal("12.500") -> "12.5"
    if isinstance(amount, Decimal):
        if amount == amount.to_integral_value():
            return str(int(amount))
        return format(amount.normalize(), "f")
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def unit_suffix(mode: StockMode, weight_label: str = "g") -> str:
    return weight_label if StockMode(mode) == StockMode.WEIGHT else " units"


def describe(
    result: AvailabilityResult,
    *,
    committed: Amount = 0,
    unit: str = " units",
) -> str:
    """Human-readable message for a result, worded for the cart toast."""
    if result.reason == Reason.DISABLED:
        return "Stock management disabled"
    if result.reason == Reason.NO_RECORD:
        return "No inventory record found for this product"
    if not result.available:
        return f"Only {format_amount(result.available_amount)}{unit} available"
    if result.reason == Reason.INSUFFICIENT:
        return (
            f"Only {format_amount(result.headroom)}{unit} more can be added "
            f"({format_amount(result.available_amount)}{unit} total available, "
            f"{format_amount(committed)}{unit} already in cart)"
        )
    if result.reason == Reason.AT_MAXIMUM:
        return f"You already have the maximum available amount ({format_amount(committed)}{unit}) in your cart"
    return "Stock available"
