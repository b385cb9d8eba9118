"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem


class PdfService(ABC):
    """
    Service interface for PDF generation

    Renders a printable sales invoice.
    """

    @abstractmethod
    def generate_invoice(
        self,
        invoice: Invoice,
        items: List[InvoiceItem],
        company_name: str = "MEDICAL INVENTORY SYSTEM",
        company_address: str = "",
        currency_symbol: str = "Rs.",
    ) -> bytes:
        """
        Generate an invoice PDF

        Args:
            invoice: Invoice header with customer snapshot and totals
            items: Invoice items in line order
            company_name: Company name printed in the header
            company_address: Company address printed under the name
            currency_symbol: Prefix for money amounts

        Returns:
            PDF document as bytes
        """
        pass
