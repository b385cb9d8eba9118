from .product_repository import ProductRepository
from .invoice_repository import InvoiceRepository
from .invoice_item_repository import InvoiceItemRepository

__all__ = [
    "ProductRepository",
    "InvoiceRepository",
    "InvoiceItemRepository",
]
