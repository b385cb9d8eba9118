"""Unit tests for product listing, editing and deactivation"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.inventory.dtos import ListProductsQueryDTO, UpdateProductCommandDTO
from src.app.use_cases.inventory.list_products import ListCategories, ListProducts
from src.app.use_cases.inventory.update_product import DeactivateProduct, UpdateProduct
from src.domain.product import Product


def make_product(**kwargs):
    defaults = dict(
        id="prod_1",
        name="Paracetamol 500mg",
        barcode="8901234567890",
        available_quantity=10,
        selling_price=Decimal("2.00"),
    )
    defaults.update(kwargs)
    return Product(**defaults)


@pytest.fixture
def product():
    return make_product()


@pytest.fixture
def mock_product_repo(product):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=product)
    repo.get_by_barcode = AsyncMock(return_value=None)
    repo.update = AsyncMock(side_effect=lambda p: p)
    return repo


@pytest.mark.asyncio
class TestListProducts:
    async def test_pages_and_filters(self, mock_product_repo, product):
        """
        Given: 25 matching products
        When: Page 3 of 10 is requested with a search and a category
        Then: The repository gets offset 20 and the page count is 3
        """
        # Arrange
        mock_product_repo.search = AsyncMock(return_value=([product], 25))

        # Act
        result = await ListProducts(mock_product_repo).execute(
            ListProductsQueryDTO(search="para", category="Analgesics", page=3, limit=10)
        )

        # Assert
        assert result.is_ok()
        assert result.value.total == 25
        assert result.value.pages == 3
        assert [p.product_id for p in result.value.products] == ["prod_1"]
        mock_product_repo.search.assert_called_once_with(
            search="para",
            category="Analgesics",
            low_stock=False,
            expiring_between=None,
            limit=10,
            offset=20,
        )

    async def test_expiring_soon_uses_alert_window(self, mock_product_repo):
        mock_product_repo.search = AsyncMock(return_value=([], 0))

        result = await ListProducts(mock_product_repo, expiry_alert_days=30).execute(
            ListProductsQueryDTO(expiring_soon=True, low_stock=True), today=date(2025, 1, 1)
        )

        assert result.value.pages == 0
        kwargs = mock_product_repo.search.call_args.kwargs
        assert kwargs["low_stock"] is True
        assert kwargs["expiring_between"] == (date(2025, 1, 1), date(2025, 1, 31))


@pytest.mark.asyncio
class TestListCategories:
    async def test_returns_repository_categories(self, mock_product_repo):
        mock_product_repo.list_categories = AsyncMock(return_value=["Analgesics", "Antihistamines"])

        result = await ListCategories(mock_product_repo).execute()

        assert result.value == ["Analgesics", "Antihistamines"]


@pytest.mark.asyncio
class TestUpdateProduct:
    async def test_changes_only_sent_fields(self, mock_uow, mock_product_repo):
        """
        Given: Product priced 2.00 with 10 in stock
        When: Only selling_price and category are sent
        Then: Those change, name and stock stay as they were
        """
        # Arrange
        command = UpdateProductCommandDTO(
            product_id="prod_1", selling_price=Decimal("2.50"), category="Analgesics"
        )

        # Act
        result = await UpdateProduct(mock_uow, mock_product_repo).execute(command)

        # Assert
        assert result.is_ok()
        assert result.value.selling_price == Decimal("2.50")
        assert result.value.category == "Analgesics"
        assert result.value.name == "Paracetamol 500mg"
        assert result.value.available_quantity == 10
        mock_product_repo.get_by_barcode.assert_not_called()
        mock_uow.commit.assert_called_once()

    async def test_barcode_taken_by_another_product(self, mock_uow, mock_product_repo):
        # Arrange
        mock_product_repo.get_by_barcode = AsyncMock(
            return_value=make_product(id="prod_2", barcode="5000000000001")
        )

        # Act
        result = await UpdateProduct(mock_uow, mock_product_repo).execute(
            UpdateProductCommandDTO(product_id="prod_1", barcode="5000000000001")
        )

        # Assert
        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details == {"barcode": "5000000000001", "product_id": "prod_2"}
        mock_product_repo.update.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_explicit_null_on_required_field(self, mock_uow, mock_product_repo):
        result = await UpdateProduct(mock_uow, mock_product_repo).execute(
            UpdateProductCommandDTO(product_id="prod_1", name=None)
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details == {"fields": ["name"]}

    async def test_missing_product(self, mock_uow, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=None)

        result = await UpdateProduct(mock_uow, mock_product_repo).execute(
            UpdateProductCommandDTO(product_id="missing", name="Other")
        )

        assert result.is_err()
        assert result.error.code == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
class TestDeactivateProduct:
    async def test_soft_deletes(self, mock_uow, mock_product_repo):
        result = await DeactivateProduct(mock_uow, mock_product_repo).execute("prod_1")

        assert result.is_ok()
        assert result.value.is_active is False
        mock_product_repo.update.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_already_inactive_is_unchanged(self, mock_uow, mock_product_repo, product):
        product.is_active = False

        result = await DeactivateProduct(mock_uow, mock_product_repo).execute("prod_1")

        assert result.is_ok()
        mock_product_repo.update.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_missing_product(self, mock_uow, mock_product_repo):
        mock_product_repo.get_by_id = AsyncMock(return_value=None)

        result = await DeactivateProduct(mock_uow, mock_product_repo).execute("missing")

        assert result.is_err()
        assert result.error.code == "PRODUCT_NOT_FOUND"
        mock_uow.rollback.assert_called_once()
