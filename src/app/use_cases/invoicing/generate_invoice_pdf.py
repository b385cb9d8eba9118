"""GenerateInvoicePdf Use Case

Renders a stored invoice as a printable PDF document.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.services.pdf_service import PdfService
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceNotFound
from .dtos import InvoicePdfDTO

logger = logging.getLogger(__name__)


class GenerateInvoicePdf:
    """
    Use Case: Render invoice PDF

    Flow:
    1. Load the invoice and its items
    2. Render through the PdfService
    3. Return the document bytes with a download filename
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        pdf_service: PdfService,
        company_name: str = "MEDICAL INVENTORY SYSTEM",
        company_address: str = "",
        currency_symbol: str = "Rs.",
    ):
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.pdf_service = pdf_service
        self.company_name = company_name
        self.company_address = company_address
        self.currency_symbol = currency_symbol

    async def execute(self, invoice_id: str) -> Result[InvoicePdfDTO]:
        """
        Execute PDF generation

        Args:
            invoice_id: Invoice identifier

        Returns:
            Result[InvoicePdfDTO]: PDF bytes or INVOICE_NOT_FOUND / GENERATE_PDF_FAILED
        """
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            return Return.err(error_from(InvoiceNotFound(invoice_id)))

        items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)

        try:
            content = self.pdf_service.generate_invoice(
                invoice=invoice,
                items=items,
                company_name=self.company_name,
                company_address=self.company_address,
                currency_symbol=self.currency_symbol,
            )
        except Exception as e:
            logger.error(f"PDF generation failed for invoice {invoice.invoice_number}: {e}")
            return Return.err(
                Error(
                    code="GENERATE_PDF_FAILED",
                    message="Failed to generate invoice PDF",
                    reason=str(e),
                )
            )

        return Return.ok(
            InvoicePdfDTO(
                invoice_number=invoice.invoice_number,
                filename=f"invoice-{invoice.invoice_number}.pdf",
                content=content,
            )
        )
