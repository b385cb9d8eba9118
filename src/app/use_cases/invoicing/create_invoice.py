"""CreateInvoice Use Case

Issues a new invoice and reserves the stock of every line.
"""

import logging
from datetime import datetime
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.services.invoice_numbering import InvoiceNumberGenerator
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoicingError
from src.domain.invoice import Invoice
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO, build_invoice_response
from .line_items import price_lines, requested_quantities, subtotal_of

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice with its items

    Business Rules:
    1. Every product must exist and cover the summed quantity of its lines
    2. line total = quantity * unit_price - discount_amount (>= 0)
    3. total = subtotal - discount_amount + tax_amount (>= 0)
    4. Counter payments (cash, card, upi, netbanking) settle in full unless
       a paid amount is given
    5. Nothing is reserved and no number is consumed if any rule fails

    Flow:
    1. Assign the next invoice number
    2. Price every line (no mutation yet)
    3. Build the header and compute totals and payment state
    4. Reserve stock for all lines
    5. Persist header and items
    6. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
        stock_ledger: StockLedger,
        number_generator: InvoiceNumberGenerator,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo
        self.stock_ledger = stock_ledger
        self.number_generator = number_generator

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with customer, totals and items

        Returns:
            Result[InvoiceResponseDTO]: Success with the persisted invoice or error
        """
        try:
            # Step 1: Assign invoice number
            invoice_number = await self.number_generator.next_number()

            # Step 2: Price every line
            lines = await price_lines(self.stock_ledger, command.items)

            # Step 3: Build header and totals
            invoice = Invoice(
                invoice_number=invoice_number,
                customer_id=command.customer_id,
                customer_name=command.customer_name,
                customer_phone=command.customer_phone,
                customer_email=command.customer_email,
                customer_address=command.customer_address,
                invoice_date=command.invoice_date or datetime.utcnow(),
                due_date=command.due_date,
                discount_amount=command.discount_amount,
                discount_percentage=command.discount_percentage,
                tax_amount=command.tax_amount,
                tax_percentage=command.tax_percentage,
                payment_method=command.payment_method,
                notes=command.notes,
            )
            invoice.apply_totals(subtotal_of(lines), command.paid_amount)

            # Step 4: Reserve stock
            await self.stock_ledger.reserve_many(requested_quantities(command.items))

            # Step 5: Persist header and items
            created_invoice = await self.invoice_repo.create(invoice)
            items = await self.invoice_item_repo.create_many(
                [line.to_item(created_invoice.id) for line in lines]
            )

            # Step 6: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created invoice {created_invoice.invoice_number} "
                f"total={created_invoice.total_amount} status={created_invoice.payment_status.value}"
            )
            return Return.ok(build_invoice_response(created_invoice, items))

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice creation rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Invoice creation failed: {e}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
