from datetime import date
from decimal import Decimal
from typing import Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401
from src.depends import enable_sqlite_foreign_keys, get_session
from src.domain.product import Product


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database file per test"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path}/test.db"

    engine = create_async_engine(test_db_url, echo=False, future=True)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def add_product(
    session: AsyncSession,
    name: str = "Paracetamol 500mg",
    barcode: str = "8901234567890",
    available_quantity: int = 10,
    minimum_quantity: int = 0,
    selling_price: Decimal = Decimal("100.00"),
    expiry_date: Optional[date] = None,
    category: Optional[str] = None,
    manufacturer: Optional[str] = None,
) -> str:
    """Persist a product and return its id"""
    product = Product(
        name=name,
        barcode=barcode,
        batch_number="B2024-07",
        expiry_date=expiry_date,
        available_quantity=available_quantity,
        minimum_quantity=minimum_quantity,
        selling_price=selling_price,
        category=category,
        manufacturer=manufacturer,
    )
    session.add(product)
    await session.commit()
    return product.id


async def quantity_of(session: AsyncSession, product_id: str) -> int:
    """Available quantity as stored, bypassing the identity map"""
    result = await session.execute(
        select(Product.available_quantity).where(Product.id == product_id)
    )
    return result.scalar_one()
