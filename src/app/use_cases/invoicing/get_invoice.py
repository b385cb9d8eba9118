"""GetInvoice Use Case"""

from src.libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceNotFound
from .dtos import InvoiceResponseDTO, build_invoice_response


class GetInvoice:
    """Use Case: Retrieve one invoice with its items"""

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_item_repo: InvoiceItemRepository,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_item_repo = invoice_item_repo

    async def execute(self, invoice_id: str) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            return Return.err(error_from(InvoiceNotFound(invoice_id)))

        items = await self.invoice_item_repo.get_by_invoice_id(invoice.id)
        return Return.ok(build_invoice_response(invoice, items))
