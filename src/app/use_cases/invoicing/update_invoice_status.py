"""UpdateInvoiceStatus Use Case

Administrative overwrite of the payment status.
"""

import logging
from datetime import datetime
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceNotFound, InvoicingError
from src.domain.invoice import PaymentStatus
from .dtos import UpdateInvoiceStatusCommandDTO, InvoiceResponseDTO, build_invoice_response

logger = logging.getLogger(__name__)


class UpdateInvoiceStatus:
    """
    Use Case: Overwrite payment status and optionally the paid amount

    No stock is moved and paid/total consistency is not checked. Setting
    ``cancelled`` here does not release stock; use CancelInvoice for that.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if invoice is None:
                raise InvoiceNotFound(command.invoice_id)

            previous_status = invoice.payment_status
            invoice.payment_status = command.payment_status
            if command.paid_amount is not None:
                invoice.paid_amount = command.paid_amount
            invoice.updated_at = datetime.utcnow()

            updated_invoice = await self.invoice_repo.update(invoice)
            items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)

            await self.uow.commit()

            if command.payment_status == PaymentStatus.CANCELLED:
                logger.warning(
                    f"Invoice {updated_invoice.invoice_number} marked cancelled by status update; "
                    f"stock was not released"
                )
            logger.info(
                f"Invoice {updated_invoice.invoice_number} status "
                f"{PaymentStatus(previous_status).value} -> {command.payment_status.value}"
            )
            return Return.ok(build_invoice_response(updated_invoice, items))

        except InvoicingError as e:
            await self.uow.rollback()
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Invoice status update failed: {e}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_STATUS_FAILED",
                    message="Failed to update invoice status",
                    reason=str(e),
                )
            )
