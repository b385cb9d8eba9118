"""Domain errors for invoicing and stock keeping

Each error carries a stable ``code`` that use cases copy into the
``Error`` they return, and that the API maps to an HTTP status.
"""

from typing import Any, Dict, Optional


class InvoicingError(Exception):
    code = "INVOICING_ERROR"

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.details = details or {}


class InvoiceValidationError(InvoicingError):
    """Malformed input detected before any mutation"""
    code = "VALIDATION_ERROR"


class ProductNotFound(InvoicingError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        super().__init__(
            f"Product not found: {product_id}",
            reason="Referenced product does not exist",
            details={"product_id": product_id},
        )
        self.product_id = product_id


class InsufficientStock(InvoicingError):
    code = "INSUFFICIENT_STOCK"

    def __init__(
        self,
        product_id: str,
        requested: int,
        available: int,
        product_name: Optional[str] = None,
    ):
        label = product_name or product_id
        super().__init__(
            f"Insufficient stock for {label}. Available: {available}, Required: {requested}",
            reason=f"available={available}, requested={requested}",
            details={
                "product_id": product_id,
                "product_name": product_name,
                "requested": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvoiceNotFound(InvoicingError):
    code = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: str):
        super().__init__(
            f"Invoice with ID {invoice_id} not found",
            reason="Invoice does not exist",
            details={"invoice_id": invoice_id},
        )
        self.invoice_id = invoice_id


class InvoiceImmutable(InvoicingError):
    """Edit attempted on an invoice whose status forbids it"""
    code = "INVOICE_IMMUTABLE"

    def __init__(self, invoice_id: str, status: str, message: Optional[str] = None):
        super().__init__(
            message or f"Cannot edit {status} invoices. Please cancel the invoice first.",
            reason=f"payment_status={status}",
            details={"invoice_id": invoice_id, "payment_status": status},
        )
        self.invoice_id = invoice_id
        self.status = status
