"""Invoice Item Domain Entity

One priced line of an invoice with a point-in-time product snapshot.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, generate_uuid
from src.domain.errors import InvoiceValidationError
from src.domain.product import Product


class InvoiceItem(BaseModel, table=True):
    """
    Invoice Item - Individual line within an invoice

    Domain Rules:
    - Each item belongs to exactly one invoice
    - quantity >= 1
    - total_amount = quantity * unit_price - discount_amount, never negative
    - product_name, product_barcode, batch_number and expiry_date are copied
      from the product at sale time and never follow later product edits
    """

    __tablename__ = "invoice_items"
    __table_args__ = (
        CheckConstraint('quantity >= 1', name='quantity_positive'),
        CheckConstraint('total_amount >= 0', name='line_total_non_negative'),
        Index('ix_invoice_items_invoice_id', 'invoice_id'),
        Index('ix_invoice_items_product_id', 'product_id'),
        Index('ix_invoice_items_product_barcode', 'product_barcode'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    product_id: str = Field(
        sa_column=Column(String(36), ForeignKey("products.id"), nullable=False),
        description="Foreign key to Product"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Order of the line within the invoice"
    )

    product_name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    product_barcode: str = Field(
        sa_column=Column(String(50), nullable=False),
    )

    batch_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    expiry_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
    )

    discount_percentage: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Informational only"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Line total (quantity * unit_price - discount_amount)"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def for_product(
        cls,
        invoice_id: str,
        product: Product,
        quantity: int,
        unit_price: Decimal,
        discount_amount: Decimal = Decimal("0"),
        discount_percentage: Decimal = Decimal("0"),
        position: int = 0,
    ) -> "InvoiceItem":
        """Build a priced line carrying a snapshot of ``product``"""
        return cls(
            invoice_id=invoice_id,
            product_id=product.id,
            position=position,
            product_name=product.name,
            product_barcode=product.barcode,
            batch_number=product.batch_number,
            expiry_date=product.expiry_date,
            quantity=quantity,
            unit_price=unit_price,
            discount_amount=discount_amount,
            discount_percentage=discount_percentage,
            total_amount=calculate_line_total(quantity, unit_price, discount_amount),
        )


def calculate_line_total(quantity: int, unit_price: Decimal, discount_amount: Decimal) -> Decimal:
    if quantity < 1:
        raise InvoiceValidationError(
            f"Item quantity must be at least 1, got {quantity}",
            details={"quantity": quantity},
        )
    line_total = Decimal(quantity) * Decimal(unit_price) - Decimal(discount_amount)
    if line_total < 0:
        raise InvoiceValidationError(
            f"Item discount {discount_amount} exceeds line amount {Decimal(quantity) * Decimal(unit_price)}",
            reason="discount_amount > quantity * unit_price",
            details={
                "quantity": quantity,
                "unit_price": str(unit_price),
                "discount_amount": str(discount_amount),
            },
        )
    return line_total
