import logging
from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import LookupFailure
from db.database import get_async_session
from db.inventory.lookup import load_stock_policy, load_weight_label

logger = logging.getLogger(__name__)

router = APIRouter()

WEIGHT_UNITS = ("g", "kg", "lb", "oz")


@router.get("/weight-label", response_model=Dict)
async def get_weight_label(db: AsyncSession = Depends(get_async_session)):
    """Unit label shown next to weights (g | kg | lb | oz)."""
    try:
        label = await load_weight_label(db)
    except LookupFailure:
        logger.exception("[settings] weight label lookup failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Failed to fetch weight label setting",
                "weightLabel": settings.default_weight_label,
            },
        )
    if label not in WEIGHT_UNITS:
        logger.warning("[settings] unknown weight label %r, using %r", label, settings.default_weight_label)
        label = settings.default_weight_label
    return {"success": True, "weightLabel": label}


@router.get("/stock-management", response_model=Dict)
async def get_stock_management(db: AsyncSession = Depends(get_async_session)):
    try:
        policy = await load_stock_policy(db)
    except LookupFailure:
        logger.exception("[settings] stock management lookup failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to fetch stock management setting"},
        )
    return {"success": True, "stockManagementEnabled": policy.stock_management_enabled}
