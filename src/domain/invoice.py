"""Invoice Domain Entity

Invoice header with customer snapshot, totals and payment state.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid
from src.domain.errors import InvoiceValidationError

ZERO = Decimal("0")


class PaymentStatus(str, Enum):
    """Invoice payment status"""
    PENDING = "pending"
    PARTIAL = "partial"      # Only ever set manually
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    NETBANKING = "netbanking"
    CHEQUE = "cheque"
    CREDIT = "credit"


# Settled at the counter: treated as fully paid when no paid amount is given
IMMEDIATE_SETTLEMENT_METHODS = frozenset({
    PaymentMethod.CASH,
    PaymentMethod.CARD,
    PaymentMethod.UPI,
    PaymentMethod.NETBANKING,
})


class Invoice(BaseModel, table=True):
    """
    Invoice - Sale of products to a customer

    Domain Rules:
    - invoice_number is unique and strictly increasing
    - total_amount = subtotal - discount_amount + tax_amount, never negative
    - subtotal is the sum of the line totals of its items
    - Customer fields are a snapshot, not a live reference
    - Paid invoices cannot be edited; cancelled invoices are inactive
    """

    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='total_amount_non_negative'),
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
        Index('ix_invoices_customer_id', 'customer_id'),
        Index('ix_invoices_invoice_date', 'invoice_date'),
        Index('ix_invoices_payment_status', 'payment_status'),
        Index('ix_invoices_created_at', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique invoice identifier (UUID)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Unique invoice number (e.g., INV000042)"
    )

    customer_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), nullable=True),
        description="Optional reference to a registered customer"
    )

    customer_name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    customer_phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
    )

    customer_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    customer_address: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    invoice_date: datetime = Field(default_factory=datetime.utcnow)

    due_date: Optional[datetime] = Field(default=None)

    subtotal: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Sum of item line totals"
    )

    discount_amount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Invoice level discount (authoritative)"
    )

    discount_percentage: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Informational only, not reconciled with discount_amount"
    )

    tax_amount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Tax (authoritative)"
    )

    tax_percentage: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Informational only, not reconciled with tax_amount"
    )

    total_amount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="subtotal - discount_amount + tax_amount"
    )

    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)

    payment_method: Optional[PaymentMethod] = Field(default=None)

    paid_amount: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_cancelled(self) -> bool:
        return self.payment_status == PaymentStatus.CANCELLED

    @property
    def balance_due(self) -> Decimal:
        return max(ZERO, Decimal(self.total_amount) - Decimal(self.paid_amount))

    def apply_totals(
        self,
        subtotal: Decimal,
        paid_amount: Optional[Decimal] = None,
    ) -> None:
        """Recompute totals and payment state from a fresh subtotal"""
        self.subtotal = subtotal
        self.total_amount = calculate_total(subtotal, self.discount_amount, self.tax_amount)
        self.paid_amount, self.payment_status = settle_payment(
            self.total_amount, paid_amount, self.payment_method
        )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0a6f3c1e-2b8e-4a7d-9b0d-2f8c1f1e2d3c",
                "invoice_number": "INV000042",
                "customer_name": "Asha Verma",
                "subtotal": "300.00",
                "discount_amount": "0.00",
                "tax_amount": "0.00",
                "total_amount": "300.00",
                "payment_status": "paid",
                "payment_method": "cash",
                "paid_amount": "300.00",
                "is_active": True,
            }
        }


def calculate_total(subtotal: Decimal, discount_amount: Decimal, tax_amount: Decimal) -> Decimal:
    total = Decimal(subtotal) - Decimal(discount_amount) + Decimal(tax_amount)
    if total < ZERO:
        raise InvoiceValidationError(
            f"Invoice total cannot be negative (subtotal={subtotal}, "
            f"discount={discount_amount}, tax={tax_amount})",
            reason="discount_amount exceeds subtotal + tax_amount",
            details={
                "subtotal": str(subtotal),
                "discount_amount": str(discount_amount),
                "tax_amount": str(tax_amount),
            },
        )
    return total


def settle_payment(
    total_amount: Decimal,
    paid_amount: Optional[Decimal],
    payment_method: Optional[PaymentMethod],
) -> Tuple[Decimal, PaymentStatus]:
    """
    Resolve the paid amount and payment status of a freshly priced invoice

    A positive paid amount given by the caller wins. Otherwise counter
    payments (cash, card, upi, netbanking) settle the full total and
    everything else starts unpaid. The status is binary: paid when the
    paid amount covers the total, pending otherwise.
    """
    method = PaymentMethod(payment_method) if payment_method else None

    if paid_amount is not None and paid_amount > ZERO:
        final_paid = Decimal(paid_amount)
    elif method in IMMEDIATE_SETTLEMENT_METHODS:
        final_paid = Decimal(total_amount)
    else:
        final_paid = ZERO

    status = PaymentStatus.PAID if final_paid >= total_amount else PaymentStatus.PENDING
    return final_paid, status
