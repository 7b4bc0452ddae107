import logging
from decimal import Decimal
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import LookupFailure, ProductNotFound
from core.stock import InventoryRecord, StockMode, StockPolicy
from db.inventory.record import ProductInventory
from db.product import Product
from db.setting import STOCK_MANAGEMENT_ENABLED, WEIGHT_LABEL, Setting

logger = logging.getLogger(__name__)


@dataclass
class StockSnapshot:
    product: Product
    mode: StockMode
    inventory: Optional[InventoryRecord]
    policy: StockPolicy
    weight_label: str


def stock_mode_of(product: Product) -> StockMode:
    # Anything other than 'weight' is tracked by unit count
    if (product.stock_management_type or "").strip().lower() == StockMode.WEIGHT.value:
        return StockMode.WEIGHT
    return StockMode.QUANTITY


async def _setting_value(db: AsyncSession, key: str) -> Optional[str]:
    res = await db.execute(select(Setting.value).where(Setting.key == key).limit(1))
    return res.scalar_one_or_none()


async def load_stock_policy(db: AsyncSession) -> StockPolicy:
    try:
        value = await _setting_value(db, STOCK_MANAGEMENT_ENABLED)
    except SQLAlchemyError as e:
        raise LookupFailure("Failed to load stock management setting") from e
    if value is None:
        return StockPolicy(stock_management_enabled=settings.stock_management_default)
    return StockPolicy(stock_management_enabled=value.strip().lower() == "true")


async def load_weight_label(db: AsyncSession) -> str:
    try:
        value = await _setting_value(db, WEIGHT_LABEL)
    except SQLAlchemyError as e:
        raise LookupFailure("Failed to load weight label setting") from e
    return (value or "").strip() or settings.default_weight_label


async def load_inventory_record(
    db: AsyncSession, product_id: UUID, variant_id: Optional[UUID] = None
) -> Optional[InventoryRecord]:
    """
    Inventory row for (product, variant).

    Without a variant id the product-level row (variant_id IS NULL) is preferred,
    then the most recently updated variant row.
    """
    stmt = select(ProductInventory).where(ProductInventory.product_id == product_id)
    if variant_id:
        stmt = stmt.where(ProductInventory.variant_id == variant_id)
    else:
        stmt = stmt.order_by(
            ProductInventory.variant_id.is_(None).desc(),
            ProductInventory.updated_at.desc(),
        )
    try:
        res = await db.execute(stmt.limit(1))
    except SQLAlchemyError as e:
        raise LookupFailure(f"Failed to load inventory for product {product_id}") from e
    row = res.scalar_one_or_none()
    if row is None:
        return None
    return InventoryRecord(
        available_quantity=int(row.available_quantity or 0),
        available_weight=Decimal(row.available_weight or 0),
    )


async def load_stock_snapshot(
    db: AsyncSession, product_id: UUID, variant_id: Optional[UUID] = None
) -> StockSnapshot:
    try:
        res = await db.execute(select(Product).where(Product.id == product_id))
    except SQLAlchemyError as e:
        raise LookupFailure(f"Failed to load product {product_id}") from e
    product = res.scalar_one_or_none()
    if not product or product.is_active is False:
        raise ProductNotFound(product_id)

    mode = stock_mode_of(product)
    snapshot = StockSnapshot(
        product=product,
        mode=mode,
        inventory=await load_inventory_record(db, product_id, variant_id),
        policy=await load_stock_policy(db),
        weight_label=settings.default_weight_label,
    )
    if mode == StockMode.WEIGHT:
        snapshot.weight_label = await load_weight_label(db)
    logger.debug(
        "stock snapshot product=%s variant=%s mode=%s record=%s enabled=%s",
        product_id, variant_id, mode.value, snapshot.inventory, snapshot.policy.stock_management_enabled,
    )
    return snapshot
