from .base import BaseModel, generate_uuid
from .product import Product, ProductUnit
from .invoice import (
    Invoice,
    PaymentStatus,
    PaymentMethod,
    IMMEDIATE_SETTLEMENT_METHODS,
    calculate_total,
    settle_payment,
)
from .invoice_item import InvoiceItem, calculate_line_total
from .errors import (
    InvoicingError,
    InvoiceValidationError,
    ProductNotFound,
    InsufficientStock,
    InvoiceNotFound,
    InvoiceImmutable,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Product",
    "ProductUnit",
    "Invoice",
    "PaymentStatus",
    "PaymentMethod",
    "IMMEDIATE_SETTLEMENT_METHODS",
    "calculate_total",
    "settle_payment",
    "InvoiceItem",
    "calculate_line_total",
    "InvoicingError",
    "InvoiceValidationError",
    "ProductNotFound",
    "InsufficientStock",
    "InvoiceNotFound",
    "InvoiceImmutable",
]
