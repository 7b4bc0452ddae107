"""Shared fixtures: a throwaway SQLite database per test and an API client bound to it."""

import asyncio
import os
import uuid
from typing import Optional

# The app's module-level engine must not need a Postgres driver under test
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from db.database import Base, get_async_session  # noqa: E402
from db.inventory.record import ProductInventory  # noqa: E402
from db.product import Product, ProductVariant  # noqa: E402
from db.setting import STOCK_MANAGEMENT_ENABLED, Setting  # noqa: E402
from db.users import GlobalMagicLink  # noqa: E402
from main import app  # noqa: E402


class StoreSeeder:
    """Writes rows through its own session, outside the request loop."""

    def __init__(self, session_maker):
        self.session_maker = session_maker

    def _run(self, coro):
        return asyncio.run(coro)

    def product(
        self,
        name: str = "Widget",
        mode: str = "quantity",
        *,
        quantity: Optional[int] = None,
        weight: Optional[float] = None,
        with_record: bool = True,
        is_active: bool = True,
    ) -> uuid.UUID:
        async def _add():
            async with self.session_maker() as db:
                p = Product(name=name, price=9.99, stock_management_type=mode, is_active=is_active)
                db.add(p)
                await db.flush()
                if with_record:
                    db.add(
                        ProductInventory(
                            product_id=p.id,
                            available_quantity=quantity or 0,
                            available_weight=weight or 0,
                        )
                    )
                await db.commit()
                return p.id

        return self._run(_add())

    def variant(
        self,
        product_id: uuid.UUID,
        name: str,
        *,
        quantity: int = 0,
        weight: float = 0,
    ) -> uuid.UUID:
        async def _add():
            async with self.session_maker() as db:
                v = ProductVariant(product_id=product_id, name=name)
                db.add(v)
                await db.flush()
                db.add(
                    ProductInventory(
                        product_id=product_id,
                        variant_id=v.id,
                        available_quantity=quantity,
                        available_weight=weight,
                    )
                )
                await db.commit()
                return v.id

        return self._run(_add())

    def record(self, product_id: uuid.UUID, *, quantity: int = 0, weight: float = 0) -> None:
        """Product-level inventory row (no variant)."""

        async def _add():
            async with self.session_maker() as db:
                db.add(ProductInventory(product_id=product_id, available_quantity=quantity, available_weight=weight))
                await db.commit()

        self._run(_add())

    def magic_link(self, token: str, *, enabled: bool = True) -> uuid.UUID:
        async def _add():
            async with self.session_maker() as db:
                link = GlobalMagicLink(token=token, is_enabled=enabled)
                db.add(link)
                await db.commit()
                return link.id

        return self._run(_add())

    def rows(self, model) -> list:
        async def _all():
            async with self.session_maker() as db:
                res = await db.execute(select(model))
                return list(res.scalars().all())

        return self._run(_all())

    def setting(self, key: str, value: str) -> None:
        async def _set():
            async with self.session_maker() as db:
                existing = await db.get(Setting, key)
                if existing:
                    existing.value = value
                else:
                    db.add(Setting(key=key, value=value))
                await db.commit()

        self._run(_set())


class BrokenSession:
    """Stands in for an AsyncSession whose database is unreachable."""

    def __init__(self):
        self.error = OperationalError("SELECT 1", {}, Exception("connection refused"))
        self.rollbacks = 0

    async def execute(self, *args, **kwargs):
        raise self.error

    async def rollback(self):
        self.rollbacks += 1


@pytest.fixture
def session_maker(tmp_path):
    # NullPool: seeding and requests run on different event loops
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", poolclass=NullPool)

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def unconfigured_store(session_maker):
    """Seeder for a store with no settings rows at all."""
    return StoreSeeder(session_maker)


@pytest.fixture
def store(session_maker):
    seeder = StoreSeeder(session_maker)
    seeder.setting(STOCK_MANAGEMENT_ENABLED, "true")
    return seeder


@pytest.fixture
def client(session_maker):
    async def _session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_session():
    return BrokenSession()


@pytest.fixture
def broken_client(broken_session):
    async def _session():
        yield broken_session

    app.dependency_overrides[get_async_session] = _session
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
