"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.invoice import Invoice, PaymentMethod, PaymentStatus
from src.domain.invoice_item import InvoiceItem


class InvoiceItemCommandDTO(BaseModel):
    """One requested line of an invoice"""

    product_id: str = Field(
        ...,
        description="Product identifier"
    )

    quantity: int = Field(
        ...,
        ge=1,
        description="Units sold (>= 1)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        description="Price per unit"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Discount applied to the whole line"
    )

    discount_percentage: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Informational only"
    )


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case. Discount and tax amounts are
    authoritative; the percentages are stored as metadata.
    """

    customer_id: Optional[str] = Field(
        default=None,
        description="Optional registered customer id"
    )

    customer_name: str = Field(
        ...,
        min_length=1,
        description="Customer name printed on the invoice"
    )

    customer_phone: Optional[str] = Field(default=None)

    customer_email: Optional[str] = Field(default=None)

    customer_address: Optional[str] = Field(default=None)

    invoice_date: Optional[datetime] = Field(
        default=None,
        description="Defaults to now"
    )

    due_date: Optional[datetime] = Field(default=None)

    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)

    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)

    tax_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    payment_method: Optional[PaymentMethod] = Field(
        default=None,
        description="cash, card, upi and netbanking settle the invoice in full"
    )

    paid_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Amount already paid; overrides the payment method default when > 0"
    )

    notes: Optional[str] = Field(default=None)

    items: List[InvoiceItemCommandDTO] = Field(
        ...,
        min_length=1,
        description="Invoice lines (at least one)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_name": "Asha Verma",
                "customer_phone": "+91 98765 43210",
                "payment_method": "cash",
                "items": [
                    {
                        "product_id": "5f0c1c4e-8d7a-4f39-9d43-3f0e2b8f1a11",
                        "quantity": 3,
                        "unit_price": "100.00",
                    }
                ],
            }
        }


class UpdateInvoiceCommandDTO(CreateInvoiceCommandDTO):
    """
    Command DTO for editing an invoice

    Replaces the header fields and the full list of items.
    """

    invoice_id: str = Field(
        ...,
        description="Invoice to edit"
    )


class UpdateInvoiceStatusCommandDTO(BaseModel):
    """Direct overwrite of payment status (no stock side effects)"""

    invoice_id: str = Field(..., description="Invoice identifier")

    payment_status: PaymentStatus = Field(..., description="New payment status")

    paid_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="New paid amount; left unchanged when omitted"
    )


class ListInvoicesQueryDTO(BaseModel):
    """Filters and pagination for ListInvoices"""

    customer_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = Field(
        default=None,
        description="Matches invoice number or customer name"
    )
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class InvoiceItemDTO(BaseModel):
    """Persisted invoice line"""

    id: str
    product_id: str
    position: int
    product_name: str
    product_barcode: str
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    discount_percentage: Decimal
    total_amount: Decimal


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    The invoice header with its items in line order.
    """

    invoice_id: str = Field(..., description="Invoice ID")
    invoice_number: str = Field(..., description="Invoice number (e.g., INV000042)")
    customer_id: Optional[str] = None
    customer_name: str
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    invoice_date: datetime
    due_date: Optional[datetime] = None
    subtotal: Decimal
    discount_amount: Decimal
    discount_percentage: Decimal
    tax_amount: Decimal
    tax_percentage: Decimal
    total_amount: Decimal
    payment_status: str = Field(..., description="pending, partial, paid or cancelled")
    payment_method: Optional[str] = None
    paid_amount: Decimal
    balance_due: Decimal
    notes: Optional[str] = None
    is_active: bool
    items: List[InvoiceItemDTO] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": "0a6f3c1e-2b8e-4a7d-9b0d-2f8c1f1e2d3c",
                "invoice_number": "INV000042",
                "customer_name": "Asha Verma",
                "subtotal": "300.00",
                "discount_amount": "0.00",
                "tax_amount": "0.00",
                "total_amount": "300.00",
                "payment_status": "paid",
                "payment_method": "cash",
                "paid_amount": "300.00",
                "balance_due": "0.00",
                "is_active": True,
                "items": [
                    {
                        "product_name": "Paracetamol 500mg",
                        "quantity": 3,
                        "unit_price": "100.00",
                        "total_amount": "300.00",
                    }
                ],
            }
        }


class InvoiceListResponseDTO(BaseModel):
    """Page of invoices (items not included)"""

    invoices: List[InvoiceResponseDTO]
    total: int = Field(..., description="Total invoices matching the filters")
    page: int
    limit: int
    pages: int = Field(..., description="Total number of pages")


class InvoicePdfDTO(BaseModel):
    """Rendered invoice document"""

    invoice_number: str
    filename: str
    content: bytes


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return value.value if hasattr(value, "value") else value


def build_invoice_response(
    invoice: Invoice,
    items: Optional[List[InvoiceItem]] = None,
) -> InvoiceResponseDTO:
    """Map an invoice and its items onto the response DTO"""
    return InvoiceResponseDTO(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        customer_id=invoice.customer_id,
        customer_name=invoice.customer_name,
        customer_phone=invoice.customer_phone,
        customer_email=invoice.customer_email,
        customer_address=invoice.customer_address,
        invoice_date=invoice.invoice_date,
        due_date=invoice.due_date,
        subtotal=invoice.subtotal,
        discount_amount=invoice.discount_amount,
        discount_percentage=invoice.discount_percentage,
        tax_amount=invoice.tax_amount,
        tax_percentage=invoice.tax_percentage,
        total_amount=invoice.total_amount,
        payment_status=_enum_value(invoice.payment_status),
        payment_method=_enum_value(invoice.payment_method),
        paid_amount=invoice.paid_amount,
        balance_due=invoice.balance_due,
        notes=invoice.notes,
        is_active=invoice.is_active,
        items=[
            InvoiceItemDTO(
                id=item.id,
                product_id=item.product_id,
                position=item.position,
                product_name=item.product_name,
                product_barcode=item.product_barcode,
                batch_number=item.batch_number,
                expiry_date=item.expiry_date,
                quantity=item.quantity,
                unit_price=item.unit_price,
                discount_amount=item.discount_amount,
                discount_percentage=item.discount_percentage,
                total_amount=item.total_amount,
            )
            for item in sorted(items or [], key=lambda i: i.position)
        ],
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


class DeletedInvoiceDTO(BaseModel):
    """Outcome of deleting an invoice"""

    invoice_id: str
    invoice_number: str
    released_items: int = Field(
        ...,
        description="Number of items whose stock went back to inventory (0 if already returned)"
    )


class InvoiceStatsQueryDTO(BaseModel):
    """Date window and size for invoice statistics"""

    start_date: Optional[datetime] = Field(
        default=None,
        description="Invoice date lower bound (used with end_date)"
    )
    end_date: Optional[datetime] = Field(
        default=None,
        description="Invoice date upper bound (used with start_date)"
    )
    limit: int = Field(default=10, ge=1, le=100)


class InvoiceSummaryDTO(BaseModel):
    """
    Invoice counts and revenue

    Revenue and the average only cover active invoices; cancelled invoices
    whose stock was returned are counted but earn nothing.
    """

    total_invoices: int
    total_revenue: Decimal
    average_invoice_value: Decimal
    paid_invoices: int
    partial_invoices: int
    pending_invoices: int
    cancelled_invoices: int
    payment_rate: Decimal = Field(..., description="Paid invoices as a percentage of all invoices")


class TopProductDTO(BaseModel):
    """Units and revenue of one product"""

    product_id: str
    product_name: str
    product_barcode: str
    total_quantity: int
    total_revenue: Decimal
