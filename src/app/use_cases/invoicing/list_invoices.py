"""
List Invoices Use Case

Retrieves invoices matching optional filters with page based pagination.
"""
import math
from src.libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import InvoiceListResponseDTO, ListInvoicesQueryDTO, build_invoice_response


class ListInvoices:
    """
    Use case: Browse invoices

    Invoices are ordered by created_at DESC (most recent first). Items are
    not loaded; use GetInvoice for a single invoice with its lines.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        """
        Initialize with invoice repository.

        Args:
            invoice_repo: InvoiceRepository instance
        """
        self.invoice_repo = invoice_repo

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[InvoiceListResponseDTO]:
        """
        List invoices matching the query.

        Args:
            query: Filters (customer, status, date range, search) and page/limit

        Returns:
            Result[InvoiceListResponseDTO]: One page of invoices plus totals
        """
        invoices, total = await self.invoice_repo.search(
            customer_id=query.customer_id,
            payment_status=query.payment_status,
            start_date=query.start_date,
            end_date=query.end_date,
            search=query.search,
            limit=query.limit,
            offset=(query.page - 1) * query.limit,
        )

        return Return.ok(
            InvoiceListResponseDTO(
                invoices=[build_invoice_response(invoice) for invoice in invoices],
                total=total,
                page=query.page,
                limit=query.limit,
                pages=math.ceil(total / query.limit) if total else 0,
            )
        )
