from .unit_of_work import UnitOfWork
from .stock_ledger import StockLedger
from .invoice_numbering import InvoiceNumberGenerator, next_invoice_number
from .pdf_service import PdfService

__all__ = [
    "UnitOfWork",
    "StockLedger",
    "InvoiceNumberGenerator",
    "next_invoice_number",
    "PdfService",
]
