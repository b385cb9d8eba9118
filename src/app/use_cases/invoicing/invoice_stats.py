"""Invoice statistics use cases

Dashboard figures: a status and revenue summary, the latest invoices and
the best selling products.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List
from src.libs.result import Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_item_repository import InvoiceItemRepository
from src.domain.invoice import PaymentStatus
from .dtos import (
    InvoiceResponseDTO,
    InvoiceStatsQueryDTO,
    InvoiceSummaryDTO,
    TopProductDTO,
    build_invoice_response,
)

CENT = Decimal("0.01")


class GetInvoiceSummary:
    """
    Use case: Invoice summary

    Counts cover every invoice in the window. Revenue and the average only
    cover active invoices.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, query: InvoiceStatsQueryDTO) -> Result[InvoiceSummaryDTO]:
        counts = await self.invoice_repo.count_by_status(query.start_date, query.end_date)
        revenue, active_count = await self.invoice_repo.total_revenue(query.start_date, query.end_date)

        total = sum(counts.values())
        paid = counts.get(PaymentStatus.PAID, 0)

        average = revenue / active_count if active_count else Decimal("0")
        payment_rate = Decimal(paid * 100) / total if total else Decimal("0")

        return Return.ok(
            InvoiceSummaryDTO(
                total_invoices=total,
                total_revenue=revenue.quantize(CENT, ROUND_HALF_UP),
                average_invoice_value=average.quantize(CENT, ROUND_HALF_UP),
                paid_invoices=paid,
                partial_invoices=counts.get(PaymentStatus.PARTIAL, 0),
                pending_invoices=counts.get(PaymentStatus.PENDING, 0),
                cancelled_invoices=counts.get(PaymentStatus.CANCELLED, 0),
                payment_rate=payment_rate.quantize(CENT, ROUND_HALF_UP),
            )
        )


class ListRecentInvoices:
    """Use case: Newest invoices, without items"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, limit: int = 10) -> Result[List[InvoiceResponseDTO]]:
        invoices, _ = await self.invoice_repo.search(limit=limit, offset=0)
        return Return.ok([build_invoice_response(invoice) for invoice in invoices])


class ListTopProducts:
    """
    Use case: Best selling products

    Quantities and revenue come from the item snapshots of active invoices,
    highest quantity first.
    """

    def __init__(self, invoice_item_repo: InvoiceItemRepository):
        self.invoice_item_repo = invoice_item_repo

    async def execute(self, query: InvoiceStatsQueryDTO) -> Result[List[TopProductDTO]]:
        rows = await self.invoice_item_repo.top_products(
            start_date=query.start_date,
            end_date=query.end_date,
            limit=query.limit,
        )
        return Return.ok(
            [
                TopProductDTO(
                    product_id=row.product_id,
                    product_name=row.product_name,
                    product_barcode=row.product_barcode,
                    total_quantity=row.total_quantity,
                    total_revenue=row.total_revenue,
                )
                for row in rows
            ]
        )
