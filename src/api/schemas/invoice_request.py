"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.invoice import PaymentMethod, PaymentStatus


def _check_money(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and v.as_tuple().exponent < -2:
        raise ValueError("Amount must have at most 2 decimal places")
    return v


class InvoiceItemRequestSchema(BaseModel):
    """One invoice line"""

    product_id: str = Field(..., min_length=1, description="Product identifier")

    quantity: int = Field(..., ge=1, description="Units sold (>= 1)")

    unit_price: Decimal = Field(..., ge=0, description="Price per unit")

    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)

    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    @field_validator("unit_price", "discount_amount")
    @classmethod
    def validate_money(cls, v):
        return _check_money(v)


class InvoiceRequestSchema(BaseModel):
    """
    Request schema for creating or editing an invoice

    Used for POST /invoices and PUT /invoices/{invoice_id}.
    """

    customer_id: Optional[str] = Field(default=None)

    customer_name: str = Field(
        ...,
        min_length=1,
        description="Customer name (required, non-empty)"
    )

    customer_phone: Optional[str] = Field(default=None, max_length=20)

    customer_email: Optional[str] = Field(default=None, max_length=255)

    customer_address: Optional[str] = Field(default=None)

    invoice_date: Optional[datetime] = Field(default=None)

    due_date: Optional[datetime] = Field(default=None)

    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)

    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    tax_amount: Decimal = Field(default=Decimal("0"), ge=0)

    tax_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    payment_method: Optional[PaymentMethod] = Field(default=None)

    paid_amount: Optional[Decimal] = Field(default=None, ge=0)

    notes: Optional[str] = Field(default=None)

    items: List[InvoiceItemRequestSchema] = Field(
        ...,
        min_length=1,
        description="At least one item is required"
    )

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v):
        """Reject blank names"""
        if not v.strip():
            raise ValueError("Customer name is required")
        return v.strip()

    @field_validator("discount_amount", "tax_amount", "paid_amount")
    @classmethod
    def validate_money(cls, v):
        return _check_money(v)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_name": "Asha Verma",
                "customer_phone": "+91 98765 43210",
                "payment_method": "cash",
                "discount_amount": "0.00",
                "tax_amount": "0.00",
                "items": [
                    {
                        "product_id": "5f0c1c4e-8d7a-4f39-9d43-3f0e2b8f1a11",
                        "quantity": 3,
                        "unit_price": "100.00"
                    }
                ]
            }
        }


class InvoiceStatusRequestSchema(BaseModel):
    """
    Request schema for PATCH /invoices/{invoice_id}/status
    """

    payment_status: PaymentStatus = Field(..., description="pending, partial, paid or cancelled")

    paid_amount: Optional[Decimal] = Field(default=None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "payment_status": "partial",
                "paid_amount": "150.00"
            }
        }
