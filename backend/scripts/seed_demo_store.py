"""
Seed a few demo products, inventory rows and store settings.

Run locally:
  cd backend && python scripts/seed_demo_store.py [--stock-management on|off]

It uses the same DATABASE_* env vars as the backend (dotenv supported by core.config).
Idempotent: products are matched by name, settings by key.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import func, select  # noqa: E402

from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.inventory.record import ProductInventory  # noqa: E402
from db.product import Product  # noqa: E402
from db.setting import STOCK_MANAGEMENT_ENABLED, WEIGHT_LABEL, Setting  # noqa: E402


@dataclass(frozen=True)
class SeedProduct:
    name: str
    price: float
    stock_management_type: str = "quantity"
    available_quantity: int = 0
    available_weight: float = 0.0


SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct(name="Sourdough Loaf", price=6.5, available_quantity=12),
    SeedProduct(name="Free Range Eggs (12)", price=4.2, available_quantity=30),
    SeedProduct(name="Aged Cheddar", price=2.9, stock_management_type="weight", available_weight=2500),
    SeedProduct(name="Roasted Coffee Beans", price=1.8, stock_management_type="weight", available_weight=1000),
]


async def _upsert_setting(db, key: str, value: str) -> None:
    res = await db.execute(select(Setting).where(Setting.key == key))
    row: Optional[Setting] = res.scalar_one_or_none()
    if row:
        row.value = value
    else:
        db.add(Setting(key=key, value=value))


async def main(stock_management: bool) -> None:
    await create_db_and_tables()
    async with async_session_maker() as db:
        created = 0
        for sp in SEED_PRODUCTS:
            res = await db.execute(select(Product).where(func.lower(Product.name) == sp.name.lower()))
            if res.scalar_one_or_none():
                continue
            product = Product(name=sp.name, price=sp.price, stock_management_type=sp.stock_management_type)
            db.add(product)
            await db.flush()
            db.add(
                ProductInventory(
                    product_id=product.id,
                    available_quantity=sp.available_quantity,
                    available_weight=sp.available_weight,
                )
            )
            created += 1

        await _upsert_setting(db, STOCK_MANAGEMENT_ENABLED, "true" if stock_management else "false")
        await _upsert_setting(db, WEIGHT_LABEL, "g")
        await db.commit()

    print(f"Seeded products: {created} new, stock management {'on' if stock_management else 'off'}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--stock-management", choices=["on", "off"], default="on")
    args = parser.parse_args()
    asyncio.run(main(args.stock_management == "on"))
