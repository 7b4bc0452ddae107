import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import InputError, ProductNotFound
from core.stock import CommitmentRequest, StockMode, evaluate, format_amount
from db.database import get_async_session
from db.inventory.lookup import load_stock_snapshot
from schemas.checkout import CheckoutLine, CheckoutStockOut, CheckoutStockRequest

logger = logging.getLogger(__name__)

router = APIRouter()


async def _line_error(db: AsyncSession, line: CheckoutLine) -> Optional[str]:
    """Error text for one cart line, or None when it can be fulfilled as is."""
    name = line.name or (str(line.product_id) if line.product_id else "Unknown product")
    weighted = (line.stock_management_type or "").strip().lower() == StockMode.WEIGHT.value
    weight_label = settings.default_weight_label
    available = 0
    try:
        if not line.product_id:
            raise InputError("productId is required")
        snapshot = await load_stock_snapshot(db, line.product_id, line.variant_id)
        name = line.name or snapshot.product.name
        weighted = snapshot.mode == StockMode.WEIGHT
        weight_label = snapshot.weight_label
        request = CommitmentRequest(
            product_id=line.product_id,
            variant_id=line.variant_id,
            quantity=None if weighted else line.quantity,
            weight=(line.numeric_value or line.quantity) if weighted else None,
        )
        # Each line is checked on its own: nothing else is committed yet
        result = evaluate(snapshot.policy, snapshot.mode, snapshot.inventory, request)
        if result.available:
            return None
        available = result.available_amount
    except (InputError, ProductNotFound) as e:
        # Rejected lines (gone from the catalogue, malformed) have nothing available
        logger.warning("[checkout] %s rejected: %s", name, e)
    except Exception:
        logger.exception("[checkout] stock validation failed for %s", name)
        await db.rollback()
        return f"{name}: Unable to verify stock availability."

    if weighted:
        in_cart = line.numeric_value or line.quantity
        return (
            f"{name}: Insufficient stock. You have {format_amount(in_cart)}{weight_label} in cart "
            f"but only {format_amount(available)}{weight_label} available."
        )
    return (
        f"{name}: Insufficient stock. You have {line.quantity} in cart "
        f"but only {format_amount(available)} available."
    )


@router.post("/validate-stock", response_model=CheckoutStockOut)
async def validate_checkout_stock(
    payload: CheckoutStockRequest,
    db: AsyncSession = Depends(get_async_session),
):
    """Re-check every cart line before the checkout form can be submitted."""
    errors = []
    for line in payload.items:
        err = await _line_error(db, line)
        if err:
            errors.append(err)
    if errors:
        logger.info("[checkout] %d of %d line(s) failed stock validation", len(errors), len(payload.items))
    return CheckoutStockOut(valid=not errors, errors=errors)
