"""DeleteInvoice Use Case

Removes an unpaid invoice for good, returning any stock it still holds.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceImmutable, InvoiceNotFound, InvoicingError
from .dtos import DeletedInvoiceDTO
from .line_items import requested_quantities

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice

    Business Rules:
    1. Paid invoices cannot be deleted; cancel them instead
    2. Items of an active invoice go back into stock first
    3. An inactive invoice already returned its stock, so nothing is released
    4. Items are deleted before the header
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        stock_ledger: StockLedger,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.stock_ledger = stock_ledger

    async def execute(self, invoice_id: str) -> Result[DeletedInvoiceDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
            if invoice is None:
                raise InvoiceNotFound(invoice_id)

            if invoice.is_paid:
                raise InvoiceImmutable(
                    invoice.id,
                    invoice.payment_status.value,
                    message="Cannot delete paid invoices. Please cancel the invoice instead.",
                )

            invoice_number = invoice.invoice_number
            items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)

            released = 0
            if items and invoice.is_active:
                await self.stock_ledger.release_many(requested_quantities(items))
                released = len(items)

            await self.invoice_item_repo.delete_by_invoice_id(invoice.id)
            await self.invoice_repo.delete(invoice)

            await self.uow.commit()

            logger.info(f"Deleted invoice {invoice_number}, released {released} item(s)")
            return Return.ok(
                DeletedInvoiceDTO(
                    invoice_id=invoice_id,
                    invoice_number=invoice_number,
                    released_items=released,
                )
            )

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice deletion rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Invoice deletion failed: {e}")
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
