"""Unit tests for GetInvoice, ListInvoices and GenerateInvoicePdf use cases"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.invoicing.dtos import ListInvoicesQueryDTO
from src.app.use_cases.invoicing.generate_invoice_pdf import GenerateInvoicePdf
from src.app.use_cases.invoicing.get_invoice import GetInvoice
from src.app.use_cases.invoicing.list_invoices import ListInvoices
from src.domain.invoice import Invoice, PaymentStatus


def make_invoice(number="INV000001", invoice_id="inv_1"):
    return Invoice(
        id=invoice_id,
        invoice_number=number,
        customer_name="Asha Verma",
        subtotal=Decimal("100"),
        total_amount=Decimal("100"),
    )


@pytest.fixture
def mock_invoice_repo():
    return MagicMock()


@pytest.fixture
def mock_invoice_item_repo():
    repo = MagicMock()
    repo.get_by_invoice_id = AsyncMock(return_value=[])
    return repo


@pytest.mark.asyncio
class TestGetInvoice:
    async def test_returns_invoice(self, mock_invoice_repo, mock_invoice_item_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())

        result = await GetInvoice(mock_invoice_repo, mock_invoice_item_repo).execute("inv_1")

        assert result.is_ok()
        assert result.value.invoice_number == "INV000001"
        mock_invoice_item_repo.get_by_invoice_id.assert_called_once_with("inv_1")

    async def test_not_found(self, mock_invoice_repo, mock_invoice_item_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetInvoice(mock_invoice_repo, mock_invoice_item_repo).execute("missing")

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_FOUND"


@pytest.mark.asyncio
class TestListInvoices:
    async def test_pagination(self, mock_invoice_repo):
        """
        Given: 25 matching invoices
        When: Page 2 with limit 10 is requested
        Then: Offset 10 is passed and 3 pages are reported
        """
        # Arrange
        mock_invoice_repo.search = AsyncMock(
            return_value=([make_invoice(f"INV0000{i}", f"inv_{i}") for i in range(10)], 25)
        )

        # Act
        result = await ListInvoices(mock_invoice_repo).execute(
            ListInvoicesQueryDTO(page=2, limit=10, payment_status="pending", search="asha")
        )

        # Assert
        assert result.is_ok()
        assert result.value.total == 25
        assert result.value.pages == 3
        assert len(result.value.invoices) == 10
        kwargs = mock_invoice_repo.search.call_args.kwargs
        assert kwargs["offset"] == 10
        assert kwargs["limit"] == 10
        assert kwargs["payment_status"] == PaymentStatus.PENDING
        assert kwargs["search"] == "asha"

    async def test_empty(self, mock_invoice_repo):
        mock_invoice_repo.search = AsyncMock(return_value=([], 0))

        result = await ListInvoices(mock_invoice_repo).execute(ListInvoicesQueryDTO())

        assert result.is_ok()
        assert result.value.total == 0
        assert result.value.pages == 0


@pytest.mark.asyncio
class TestGenerateInvoicePdf:
    async def test_renders_through_pdf_service(self, mock_invoice_repo, mock_invoice_item_repo):
        # Arrange
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        pdf_service = MagicMock()
        pdf_service.generate_invoice = MagicMock(return_value=b"%PDF-1.4 fake")
        use_case = GenerateInvoicePdf(
            mock_invoice_repo, mock_invoice_item_repo, pdf_service, company_name="Care Pharmacy"
        )

        # Act
        result = await use_case.execute("inv_1")

        # Assert
        assert result.is_ok()
        assert result.value.content == b"%PDF-1.4 fake"
        assert result.value.filename == "invoice-INV000001.pdf"
        assert pdf_service.generate_invoice.call_args.kwargs["company_name"] == "Care Pharmacy"

    async def test_not_found(self, mock_invoice_repo, mock_invoice_item_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=None)
        pdf_service = MagicMock()

        result = await GenerateInvoicePdf(
            mock_invoice_repo, mock_invoice_item_repo, pdf_service
        ).execute("missing")

        assert result.is_err()
        assert result.error.code == "INVOICE_NOT_FOUND"
        pdf_service.generate_invoice.assert_not_called()

    async def test_render_failure(self, mock_invoice_repo, mock_invoice_item_repo):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice())
        pdf_service = MagicMock()
        pdf_service.generate_invoice = MagicMock(side_effect=RuntimeError("font missing"))

        result = await GenerateInvoicePdf(
            mock_invoice_repo, mock_invoice_item_repo, pdf_service
        ).execute("inv_1")

        assert result.is_err()
        assert result.error.code == "GENERATE_PDF_FAILED"
