"""Unit tests for UpdateInvoice use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.dtos import InvoiceItemCommandDTO, UpdateInvoiceCommandDTO
from src.app.use_cases.invoicing.update_invoice import UpdateInvoice
from src.domain.errors import InsufficientStock
from src.domain.invoice import Invoice, PaymentMethod, PaymentStatus
from src.domain.invoice_item import InvoiceItem
from src.domain.product import Product


@pytest.fixture
def product():
    return Product(id="prod_1", name="Paracetamol 500mg", barcode="8901234567890", available_quantity=5)


@pytest.fixture
def pending_invoice():
    return Invoice(
        id="inv_1",
        invoice_number="INV000001",
        customer_name="Asha Verma",
        subtotal=Decimal("500"),
        total_amount=Decimal("500"),
        payment_status=PaymentStatus.PENDING,
        payment_method=PaymentMethod.CHEQUE,
    )


@pytest.fixture
def current_items(product):
    return [InvoiceItem.for_product("inv_1", product, 5, Decimal("100"))]


@pytest.fixture
def mock_invoice_repo(pending_invoice):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=pending_invoice)
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    return repo


@pytest.fixture
def mock_invoice_item_repo(current_items):
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=current_items)
    repo.delete_by_invoice_id = AsyncMock(return_value=len(current_items))
    repo.create_many = AsyncMock(side_effect=lambda items: items)
    return repo


@pytest.fixture
def mock_stock_ledger(product):
    ledger = MagicMock()
    ledger.load_products = AsyncMock(return_value={"prod_1": product})
    ledger.release_many = AsyncMock(return_value={"prod_1": 10})
    ledger.reserve_many = AsyncMock(return_value={"prod_1": 7})
    return ledger


def make_use_case(mock_uow, invoice_repo, item_repo, ledger, reactivate_cancelled=True):
    return UpdateInvoice(
        uow=mock_uow,
        invoice_repo=invoice_repo,
        invoice_item_repo=item_repo,
        stock_ledger=ledger,
        reactivate_cancelled=reactivate_cancelled,
    )


def make_command(quantity=3, **kwargs):
    data = dict(
        invoice_id="inv_1",
        customer_name="Asha Verma",
        payment_method="cheque",
        items=[InvoiceItemCommandDTO(product_id="prod_1", quantity=quantity, unit_price=Decimal("100"))],
    )
    data.update(kwargs)
    return UpdateInvoiceCommandDTO(**data)


@pytest.mark.asyncio
class TestUpdatePendingInvoice:
    async def test_moves_stock_from_old_to_new_items(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger
    ):
        """
        Given: Pending invoice with 5 units of a product
        When: It is edited to 3 units
        Then: 5 are released, old items deleted, 3 reserved and totals recomputed
        """
        # Arrange
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command(quantity=3))

        # Assert
        assert result.is_ok()
        assert result.value.subtotal == Decimal("300")
        assert result.value.total_amount == Decimal("300")
        assert result.value.payment_status == "pending"
        assert result.value.items[0].quantity == 3

        mock_invoice_repo.get_by_id.assert_called_once_with("inv_1", for_update=True)
        mock_stock_ledger.release_many.assert_called_once_with({"prod_1": 5})
        mock_invoice_item_repo.delete_by_invoice_id.assert_called_once_with("inv_1")
        mock_stock_ledger.reserve_many.assert_called_once_with({"prod_1": 3})
        mock_uow.commit.assert_called_once()

    async def test_edit_to_cash_marks_paid(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger
    ):
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        result = await use_case.execute(make_command(payment_method="cash"))

        assert result.is_ok()
        assert result.value.payment_status == "paid"
        assert result.value.paid_amount == Decimal("300")

    async def test_insufficient_stock_rolls_back(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger
    ):
        # Arrange
        mock_stock_ledger.reserve_many = AsyncMock(
            side_effect=InsufficientStock("prod_1", requested=50, available=10)
        )
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command(quantity=50))

        # Assert
        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        mock_invoice_repo.update.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestUpdateInvoiceGuards:
    async def test_paid_invoice_is_immutable(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger, pending_invoice
    ):
        """
        Given: Paid invoice
        When: An edit is attempted
        Then: INVOICE_IMMUTABLE and no stock movement
        """
        # Arrange
        pending_invoice.payment_status = PaymentStatus.PAID
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command())

        # Assert
        assert result.is_err()
        assert result.error.code == "INVOICE_IMMUTABLE"
        assert "Cannot edit paid invoices" in result.error.message
        mock_stock_ledger.release_many.assert_not_called()
        mock_stock_ledger.reserve_many.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_missing_invoice(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        result = await use_case.execute(make_command())

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_FOUND"

    async def test_cancelled_invoice_is_reactivated_without_double_release(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger, pending_invoice
    ):
        """
        Given: Cancelled invoice whose stock was released on cancel
        When: It is edited with reactivation enabled
        Then: Old items are not released again, new items are reserved, invoice is active
        """
        # Arrange
        pending_invoice.payment_status = PaymentStatus.CANCELLED
        pending_invoice.is_active = False
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command(quantity=2))

        # Assert
        assert result.is_ok()
        assert result.value.is_active is True
        assert result.value.payment_status == "pending"
        mock_stock_ledger.release_many.assert_not_called()
        mock_invoice_item_repo.delete_by_invoice_id.assert_called_once_with("inv_1")
        mock_stock_ledger.reserve_many.assert_called_once_with({"prod_1": 2})

    async def test_cancelled_invoice_rejected_when_reactivation_disabled(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger, pending_invoice
    ):
        pending_invoice.payment_status = PaymentStatus.CANCELLED
        use_case = make_use_case(
            mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger,
            reactivate_cancelled=False,
        )

        result = await use_case.execute(make_command())

        assert result.is_err()
        assert result.error.code == "INVOICE_IMMUTABLE"
        mock_stock_ledger.reserve_many.assert_not_called()


@pytest.mark.asyncio
class TestUpdateInvoiceStockFlag:
    async def test_status_only_cancellation_releases_on_edit(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger, pending_invoice
    ):
        """
        Given: Invoice marked cancelled by a status update, stock still held
        When: It is edited
        Then: The held stock is released before the new lines are reserved
        """
        # Arrange
        pending_invoice.payment_status = PaymentStatus.CANCELLED
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command(quantity=3))

        # Assert
        assert result.is_ok()
        mock_stock_ledger.release_many.assert_called_once_with({"prod_1": 5})
        mock_stock_ledger.reserve_many.assert_called_once_with({"prod_1": 3})

    async def test_inactive_pending_invoice_skips_release(
        self, mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger, pending_invoice
    ):
        """
        Given: Cancelled invoice whose status was overwritten back to pending
        When: It is edited
        Then: Its already returned stock is not released a second time
        """
        # Arrange
        pending_invoice.is_active = False
        use_case = make_use_case(mock_uow, mock_invoice_repo, mock_invoice_item_repo, mock_stock_ledger)

        # Act
        result = await use_case.execute(make_command(quantity=3))

        # Assert
        assert result.is_ok()
        assert result.value.is_active is True
        mock_stock_ledger.release_many.assert_not_called()
        mock_stock_ledger.reserve_many.assert_called_once_with({"prod_1": 3})
