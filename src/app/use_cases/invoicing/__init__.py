"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .cancel_invoice import CancelInvoice
from .update_invoice_status import UpdateInvoiceStatus
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .generate_invoice_pdf import GenerateInvoicePdf
from .delete_invoice import DeleteInvoice
from .invoice_stats import GetInvoiceSummary, ListRecentInvoices, ListTopProducts
from .dtos import (
    InvoiceItemCommandDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    UpdateInvoiceStatusCommandDTO,
    ListInvoicesQueryDTO,
    InvoiceItemDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
    InvoicePdfDTO,
    DeletedInvoiceDTO,
    InvoiceStatsQueryDTO,
    InvoiceSummaryDTO,
    TopProductDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "CancelInvoice",
    "UpdateInvoiceStatus",
    "GetInvoice",
    "ListInvoices",
    "GenerateInvoicePdf",
    "DeleteInvoice",
    "GetInvoiceSummary",
    "ListRecentInvoices",
    "ListTopProducts",
    "InvoiceItemCommandDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "UpdateInvoiceStatusCommandDTO",
    "ListInvoicesQueryDTO",
    "InvoiceItemDTO",
    "InvoiceResponseDTO",
    "InvoiceListResponseDTO",
    "InvoicePdfDTO",
    "DeletedInvoiceDTO",
    "InvoiceStatsQueryDTO",
    "InvoiceSummaryDTO",
    "TopProductDTO",
]
