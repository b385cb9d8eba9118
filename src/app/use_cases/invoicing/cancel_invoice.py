"""CancelInvoice Use Case

Cancels an invoice and returns its stock.
"""

import logging
from datetime import datetime
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceNotFound, InvoicingError
from src.domain.invoice import PaymentStatus
from .dtos import InvoiceResponseDTO, build_invoice_response
from .line_items import requested_quantities

logger = logging.getLogger(__name__)


class CancelInvoice:
    """
    Use Case: Cancel an invoice

    Business Rules:
    1. Every item quantity goes back into stock
    2. The invoice becomes cancelled and inactive
    3. is_active is False exactly when the stock has been returned; only
       active invoices release, whatever their payment_status says
    4. Cancelling a cancelled, inactive invoice changes nothing
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

    async def execute(self, invoice_id: str) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
            if invoice is None:
                raise InvoiceNotFound(invoice_id)

            items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)

            stock_released = not invoice.is_active
            if invoice.is_cancelled and stock_released:
                logger.info(f"Invoice {invoice.invoice_number} is already cancelled")
                return Return.ok(build_invoice_response(invoice, items))

            if items and not stock_released:
                await self.stock_ledger.release_many(requested_quantities(items))

            invoice.payment_status = PaymentStatus.CANCELLED
            invoice.is_active = False
            invoice.updated_at = datetime.utcnow()
            cancelled_invoice = await self.invoice_repo.update(invoice)

            await self.uow.commit()

            logger.info(f"Cancelled invoice {cancelled_invoice.invoice_number}, released {len(items)} item(s)")
            return Return.ok(build_invoice_response(cancelled_invoice, items))

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice cancellation rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Invoice cancellation failed: {e}")
            return Return.err(
                Error(
                    code="CANCEL_INVOICE_FAILED",
                    message="Failed to cancel invoice",
                    reason=str(e),
                )
            )
