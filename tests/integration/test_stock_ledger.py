"""Integration tests for StockLedger against SQLite"""

import pytest

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.app.services.stock_ledger import StockLedger
from src.domain.errors import InsufficientStock, ProductNotFound
from src.domain.product import Product
from tests.integration.conftest import add_product, quantity_of


@pytest.mark.asyncio
class TestStockLedgerIntegration:
    async def test_conditional_decrement(self, db_session: AsyncSession):
        """
        Given: Product with 3 available
        When: 3 are reserved, then 1 more
        Then: First succeeds at 0, second fails and stock stays at 0
        """
        # Arrange
        product_id = await add_product(db_session, available_quantity=3)
        ledger = StockLedger(SqlAlchemyProductRepository(db_session))

        # Act
        remaining = await ledger.reserve(product_id, 3)

        # Assert
        assert remaining == 0
        with pytest.raises(InsufficientStock) as exc_info:
            await ledger.reserve(product_id, 1)
        assert exc_info.value.available == 0
        assert await quantity_of(db_session, product_id) == 0

    async def test_reserve_unknown_product(self, db_session: AsyncSession):
        ledger = StockLedger(SqlAlchemyProductRepository(db_session))

        with pytest.raises(ProductNotFound):
            await ledger.reserve("missing", 1)

    async def test_release_is_not_a_restock(self, db_session: AsyncSession):
        # Arrange
        product_id = await add_product(db_session, available_quantity=2)
        ledger = StockLedger(SqlAlchemyProductRepository(db_session))

        # Act
        await ledger.release(product_id, 5)
        await db_session.commit()

        # Assert
        result = await db_session.execute(
            select(Product.available_quantity, Product.last_restocked_at).where(Product.id == product_id)
        )
        quantity, restocked_at = result.one()
        assert quantity == 7
        assert restocked_at is None

    async def test_restock_stamps_time(self, db_session: AsyncSession):
        product_id = await add_product(db_session, available_quantity=2)
        ledger = StockLedger(SqlAlchemyProductRepository(db_session))

        await ledger.restock(product_id, 8)
        await db_session.commit()

        result = await db_session.execute(
            select(Product.available_quantity, Product.last_restocked_at).where(Product.id == product_id)
        )
        quantity, restocked_at = result.one()
        assert quantity == 10
        assert restocked_at is not None

    async def test_reserve_many_prechecks_all_products(self, db_session: AsyncSession):
        # Arrange
        first_id = await add_product(db_session, name="A", barcode="111", available_quantity=10)
        second_id = await add_product(db_session, name="B", barcode="222", available_quantity=1)
        ledger = StockLedger(SqlAlchemyProductRepository(db_session))

        # Act
        with pytest.raises(InsufficientStock):
            await ledger.reserve_many({first_id: 2, second_id: 5})

        # Assert
        assert await quantity_of(db_session, first_id) == 10
        assert await quantity_of(db_session, second_id) == 1
