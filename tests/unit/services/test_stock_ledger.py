"""Unit tests for StockLedger

Tests cover:
- Conditional reserve (never below zero, nothing changed on failure)
- Release clamping and restock stamping
- reserve_many validation order and compensation
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, call

from src.app.services.stock_ledger import StockLedger, check_availability
from src.domain.errors import InsufficientStock, InvoiceValidationError, ProductNotFound
from src.domain.product import Product


def make_product(product_id="prod_1", available=10, name="Paracetamol 500mg"):
    return Product(
        id=product_id,
        name=name,
        barcode=f"bc_{product_id}",
        available_quantity=available,
    )


@pytest.fixture
def mock_product_repo():
    """Mock product repository"""
    repo = MagicMock()
    repo.set_quantity = AsyncMock()
    return repo


@pytest.fixture
def ledger(mock_product_repo):
    return StockLedger(mock_product_repo)


@pytest.mark.asyncio
class TestReserve:
    async def test_reserve_returns_new_balance(self, ledger, mock_product_repo):
        """
        Given: Product with 10 available
        When: 3 are reserved
        Then: Conditional decrement is issued and 7 is returned
        """
        # Arrange
        mock_product_repo.decrement_quantity = AsyncMock(return_value=7)

        # Act
        remaining = await ledger.reserve("prod_1", 3)

        # Assert
        assert remaining == 7
        mock_product_repo.decrement_quantity.assert_called_once_with("prod_1", 3)

    async def test_reserve_more_than_available_raises(self, ledger, mock_product_repo):
        """
        Given: Product with 10 available
        When: 15 are reserved
        Then: InsufficientStock carries requested and available quantities
        """
        # Arrange
        mock_product_repo.decrement_quantity = AsyncMock(return_value=None)
        mock_product_repo.get_by_id = AsyncMock(return_value=make_product(available=10))

        # Act
        with pytest.raises(InsufficientStock) as exc_info:
            await ledger.reserve("prod_1", 15)

        # Assert
        assert exc_info.value.requested == 15
        assert exc_info.value.available == 10
        assert "Available: 10, Required: 15" in exc_info.value.message
        mock_product_repo.set_quantity.assert_not_called()

    async def test_reserve_unknown_product_raises(self, ledger, mock_product_repo):
        mock_product_repo.decrement_quantity = AsyncMock(return_value=None)
        mock_product_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(ProductNotFound):
            await ledger.reserve("missing", 1)

    async def test_reserve_zero_is_rejected(self, ledger, mock_product_repo):
        mock_product_repo.decrement_quantity = AsyncMock()

        with pytest.raises(InvoiceValidationError):
            await ledger.reserve("prod_1", 0)

        mock_product_repo.decrement_quantity.assert_not_called()


@pytest.mark.asyncio
class TestReleaseAndRestock:
    async def test_release_increments_without_restock_stamp(self, ledger, mock_product_repo):
        # Arrange
        mock_product_repo.get_by_id = AsyncMock(return_value=make_product(available=5))

        # Act
        new_quantity = await ledger.release("prod_1", 3)

        # Assert
        assert new_quantity == 8
        mock_product_repo.get_by_id.assert_called_once_with("prod_1", for_update=True)
        mock_product_repo.set_quantity.assert_called_once_with("prod_1", 8)

    async def test_release_unknown_product_raises(self, ledger, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(ProductNotFound):
            await ledger.release("missing", 1)

    async def test_restock_stamps_last_restocked(self, ledger, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=make_product(available=5))

        new_quantity = await ledger.restock("prod_1", 20)

        assert new_quantity == 25
        args, kwargs = mock_product_repo.set_quantity.call_args
        assert args == ("prod_1", 25)
        assert kwargs["restocked_at"] is not None

    async def test_set_quantity_overwrites(self, ledger, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=make_product(available=5))

        assert await ledger.set_quantity("prod_1", 42) == 42
        mock_product_repo.set_quantity.assert_called_once_with("prod_1", 42)

    async def test_set_negative_quantity_is_rejected(self, ledger, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock()

        with pytest.raises(InvoiceValidationError):
            await ledger.set_quantity("prod_1", -1)

        mock_product_repo.get_by_id.assert_not_called()


@pytest.mark.asyncio
class TestReserveMany:
    async def test_reserves_in_product_id_order(self, ledger, mock_product_repo):
        """
        Given: Two products requested out of id order
        When: reserve_many is called
        Then: Products are locked and decremented in ascending id order
        """
        # Arrange
        mock_product_repo.get_many_by_ids = AsyncMock(
            return_value=[make_product("a", 10), make_product("b", 10)]
        )
        mock_product_repo.decrement_quantity = AsyncMock(side_effect=[8, 5])

        # Act
        remaining = await ledger.reserve_many({"b": 5, "a": 2})

        # Assert
        assert remaining == {"a": 8, "b": 5}
        mock_product_repo.get_many_by_ids.assert_called_once_with(["a", "b"], for_update=True)
        assert mock_product_repo.decrement_quantity.call_args_list == [call("a", 2), call("b", 5)]

    async def test_insufficient_stock_detected_before_any_decrement(self, ledger, mock_product_repo):
        """
        Given: First product has enough stock, second does not
        When: reserve_many is called
        Then: InsufficientStock is raised and nothing is decremented
        """
        # Arrange
        mock_product_repo.get_many_by_ids = AsyncMock(
            return_value=[make_product("a", 10), make_product("b", 1)]
        )
        mock_product_repo.decrement_quantity = AsyncMock()

        # Act
        with pytest.raises(InsufficientStock) as exc_info:
            await ledger.reserve_many({"a": 2, "b": 5})

        # Assert
        assert exc_info.value.product_id == "b"
        mock_product_repo.decrement_quantity.assert_not_called()

    async def test_missing_product_detected_before_any_decrement(self, ledger, mock_product_repo):
        mock_product_repo.get_many_by_ids = AsyncMock(return_value=[make_product("a", 10)])
        mock_product_repo.decrement_quantity = AsyncMock()

        with pytest.raises(ProductNotFound) as exc_info:
            await ledger.reserve_many({"a": 1, "b": 1})

        assert exc_info.value.product_id == "b"
        mock_product_repo.decrement_quantity.assert_not_called()

    async def test_failed_decrement_releases_earlier_reservations(self, ledger, mock_product_repo):
        """
        Given: Stock of the second product is taken by a concurrent writer
        When: Its conditional decrement fails
        Then: The first product's reservation is released before the error propagates
        """
        # Arrange
        mock_product_repo.get_many_by_ids = AsyncMock(
            return_value=[make_product("a", 10), make_product("b", 10)]
        )
        mock_product_repo.decrement_quantity = AsyncMock(side_effect=[8, None])
        mock_product_repo.get_by_id = AsyncMock(
            side_effect=lambda product_id, for_update=False: make_product(
                product_id, 0 if product_id == "b" else 8
            )
        )

        # Act
        with pytest.raises(InsufficientStock):
            await ledger.reserve_many({"a": 2, "b": 5})

        # Assert
        mock_product_repo.set_quantity.assert_called_once_with("a", 10)


class TestCheckAvailability:
    def test_passes_when_all_covered(self):
        check_availability({"a": make_product("a", 3)}, {"a": 3})

    def test_raises_for_first_short_product(self):
        products = {"a": make_product("a", 1), "b": make_product("b", 1)}

        with pytest.raises(InsufficientStock) as exc_info:
            check_availability(products, {"b": 2, "a": 2})

        assert exc_info.value.product_id == "a"
