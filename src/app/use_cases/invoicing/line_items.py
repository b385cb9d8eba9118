"""Line item pricing shared by CreateInvoice and UpdateInvoice

Pricing never mutates anything. Reservation happens afterwards, in one
call to the stock ledger, so a rejected invoice leaves stock untouched.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Sequence
from src.app.services.stock_ledger import StockLedger
from src.domain.invoice_item import InvoiceItem, calculate_line_total
from src.domain.product import Product
from .dtos import InvoiceItemCommandDTO


@dataclass
class PricedLine:
    position: int
    product: Product
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    discount_percentage: Decimal
    total_amount: Decimal

    def to_item(self, invoice_id: str) -> InvoiceItem:
        return InvoiceItem.for_product(
            invoice_id=invoice_id,
            product=self.product,
            quantity=self.quantity,
            unit_price=self.unit_price,
            discount_amount=self.discount_amount,
            discount_percentage=self.discount_percentage,
            position=self.position,
        )


def requested_quantities(items: Sequence) -> Dict[str, int]:
    """Total quantity per product across all lines"""
    totals: Dict[str, int] = {}
    for item in items:
        totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


async def price_lines(
    stock_ledger: StockLedger,
    items: Sequence[InvoiceItemCommandDTO],
) -> List[PricedLine]:
    """
    Look up every product and price every line

    Raises:
        ProductNotFound: A line references an unknown product
        InvoiceValidationError: A line total would be negative
    """
    products = await stock_ledger.load_products(
        (item.product_id for item in items), for_update=True
    )

    return [
        PricedLine(
            position=position,
            product=products[item.product_id],
            quantity=item.quantity,
            unit_price=Decimal(item.unit_price),
            discount_amount=Decimal(item.discount_amount),
            discount_percentage=Decimal(item.discount_percentage),
            total_amount=calculate_line_total(
                item.quantity, Decimal(item.unit_price), Decimal(item.discount_amount)
            ),
        )
        for position, item in enumerate(items)
    ]


def subtotal_of(lines: Sequence[PricedLine]) -> Decimal:
    return sum((line.total_amount for line in lines), Decimal("0"))
