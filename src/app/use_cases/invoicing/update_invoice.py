"""UpdateInvoice Use Case

Replaces the header and items of an unpaid invoice, moving stock from the
old lines to the new ones.
"""

import logging
from datetime import datetime
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceImmutable, InvoiceNotFound, InvoicingError
from .dtos import UpdateInvoiceCommandDTO, InvoiceResponseDTO, build_invoice_response
from .line_items import price_lines, requested_quantities, subtotal_of

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Edit an invoice

    Business Rules:
    1. Paid invoices cannot be edited
    2. A cancelled invoice is reactivated by an edit when reactivate_cancelled
       is set, and rejected otherwise
    3. Stock of the current items is released before the new items are
       reserved, unless it was already returned by CancelInvoice
       (is_active is False). payment_status alone never decides this,
       since UpdateInvoiceStatus can overwrite it freely
    4. Totals and payment state are recomputed exactly as on create

    Flow:
    1. Load and lock the invoice
    2. Check that its status allows editing
    3. Price the new lines (no mutation yet)
    4. Apply header changes and recompute totals
    5. Release the current items and delete them
    6. Reserve stock for the new lines and persist them
    7. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        stock_ledger: StockLedger,
        reactivate_cancelled: bool = True,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.stock_ledger = stock_ledger
        self.reactivate_cancelled = reactivate_cancelled

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice edit

        Args:
            command: UpdateInvoiceCommandDTO with invoice_id, header fields and items

        Returns:
            Result[InvoiceResponseDTO]: Success with the edited invoice or error
        """
        try:
            # Step 1: Load and lock invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if invoice is None:
                raise InvoiceNotFound(command.invoice_id)

            # Step 2: Status checks
            if invoice.is_paid:
                raise InvoiceImmutable(invoice.id, invoice.payment_status.value)

            was_cancelled = invoice.is_cancelled
            stock_released = not invoice.is_active
            if was_cancelled and not self.reactivate_cancelled:
                raise InvoiceImmutable(
                    invoice.id,
                    invoice.payment_status.value,
                    message="Cannot edit cancelled invoices.",
                )

            # Step 3: Price new lines
            lines = await price_lines(self.stock_ledger, command.items)

            # Step 4: Header changes and totals
            invoice.customer_id = command.customer_id
            invoice.customer_name = command.customer_name
            invoice.customer_phone = command.customer_phone
            invoice.customer_email = command.customer_email
            invoice.customer_address = command.customer_address
            if command.invoice_date is not None:
                invoice.invoice_date = command.invoice_date
            invoice.due_date = command.due_date
            invoice.discount_amount = command.discount_amount
            invoice.discount_percentage = command.discount_percentage
            invoice.tax_amount = command.tax_amount
            invoice.tax_percentage = command.tax_percentage
            invoice.payment_method = command.payment_method
            invoice.notes = command.notes
            invoice.apply_totals(subtotal_of(lines), command.paid_amount)
            invoice.is_active = True
            invoice.updated_at = datetime.utcnow()

            # Step 5: Release and delete current items
            current_items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)
            if current_items and not stock_released:
                await self.stock_ledger.release_many(requested_quantities(current_items))
            await self.invoice_item_repo.delete_by_invoice_id(invoice.id)

            # Step 6: Reserve and persist new items
            await self.stock_ledger.reserve_many(requested_quantities(command.items))
            items = await self.invoice_item_repo.create_many(
                [line.to_item(invoice.id) for line in lines]
            )
            updated_invoice = await self.invoice_repo.update(invoice)

            # Step 7: Commit transaction
            await self.uow.commit()

            if stock_released:
                logger.info(f"Reactivated cancelled invoice {updated_invoice.invoice_number}")
            logger.info(
                f"Updated invoice {updated_invoice.invoice_number} "
                f"total={updated_invoice.total_amount} status={updated_invoice.payment_status.value}"
            )
            return Return.ok(build_invoice_response(updated_invoice, items))

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice update rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Invoice update failed: {e}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
