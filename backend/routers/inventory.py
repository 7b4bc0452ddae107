import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InputError, ProductNotFound
from core.stock import (
    CommitmentRequest,
    ExistingCommitment,
    StockMode,
    committed_amount,
    describe,
    evaluate,
    requested_amount,
    unit_suffix,
)
from db.database import get_async_session
from db.inventory.lookup import load_stock_snapshot
from schemas.inventory import InventoryCheckOut, InventoryCheckRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _json_amount(amount):
    return float(amount) if isinstance(amount, Decimal) else amount


@router.post("/check", response_model=InventoryCheckOut)
async def check_inventory(
    payload: InventoryCheckRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Can `requested*` be added on top of what the requester already holds?

    - quantity-managed products take requestedQuantity (+ existingQuantity)
    - weight-managed products take requestedWeight, or requestedQuantity as a fallback
      (+ existingUnitCount x perUnitWeight)
    """
    if not payload.product_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product ID is required")

    try:
        snapshot = await load_stock_snapshot(db, payload.product_id, payload.variant_id)

        request = CommitmentRequest(
            product_id=payload.product_id,
            variant_id=payload.variant_id,
            quantity=payload.requested_quantity,
            weight=payload.requested_weight,
        )
        existing = ExistingCommitment(
            quantity=payload.existing_quantity,
            unit_count=payload.existing_unit_count,
            per_unit_weight=payload.per_unit_weight,
        )
        result = evaluate(snapshot.policy, snapshot.mode, snapshot.inventory, request, existing)
        requested = requested_amount(snapshot.mode, request)
        committed = committed_amount(snapshot.mode, existing)
    except InputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProductNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except Exception:
        logger.exception("[inventory] check failed for product %s", payload.product_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to check inventory")

    unit = unit_suffix(snapshot.mode, snapshot.weight_label)
    return InventoryCheckOut(
        available=result.available,
        sufficient_for_total=result.sufficient_for_total,
        headroom=_json_amount(result.headroom),
        available_amount=_json_amount(result.available_amount),
        reason=result.reason.value,
        stock_management_enabled=snapshot.policy.stock_management_enabled,
        stock_management_type=snapshot.mode.value,
        requested_amount=_json_amount(requested),
        unit=unit.strip() if snapshot.mode == StockMode.QUANTITY else unit,
        message=describe(result, committed=committed, unit=unit),
    )
