"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from src.domain.invoice import Invoice, PaymentStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice headers. Items live in InvoiceItemRepository.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def get_latest_invoice_number(self) -> Optional[str]:
        """
        Invoice number of the most recently created invoice

        Returns:
            Invoice number, or None if no invoice exists
        """
        pass

    @abstractmethod
    async def search(
        self,
        customer_id: Optional[str] = None,
        payment_status: Optional[PaymentStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Invoice], int]:
        """
        Retrieve invoices matching the filters, newest first

        Args:
            customer_id: Optional filter by customer
            payment_status: Optional filter by status
            start_date: Invoice date lower bound (used with end_date)
            end_date: Invoice date upper bound (used with start_date)
            search: Case-insensitive match on invoice number or customer name
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            Tuple of (list of invoices, total count)
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        """
        Delete an invoice header

        Items must already be gone (see InvoiceItemRepository.delete_by_invoice_id).
        """
        pass

    @abstractmethod
    async def count_by_status(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[PaymentStatus, int]:
        """
        Number of invoices per payment status

        Args:
            start_date: Invoice date lower bound (used with end_date)
            end_date: Invoice date upper bound (used with start_date)

        Returns:
            Mapping of status to count; statuses without invoices are absent
        """
        pass

    @abstractmethod
    async def total_revenue(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[Decimal, int]:
        """
        Sum of total_amount over active invoices

        Returns:
            Tuple of (revenue, number of active invoices summed)
        """
        pass
