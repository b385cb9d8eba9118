"""Invoice Item Repository Interface

Defines the contract for invoice item persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from src.domain.invoice_item import InvoiceItem


@dataclass
class ProductSales:
    """Units and revenue of one product, summed over invoice items"""

    product_id: str
    product_name: str
    product_barcode: str
    total_quantity: int
    total_revenue: Decimal


class InvoiceItemRepository(ABC):
    """
    Repository interface for InvoiceItem persistence
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        """
        Retrieve all items of an invoice in line order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceItem ordered by position
        """
        pass

    @abstractmethod
    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Persist a batch of items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items
        """
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: str) -> int:
        """
        Delete every item of an invoice

        Returns:
            Number of deleted rows
        """
        pass

    @abstractmethod
    async def top_products(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 10,
    ) -> List[ProductSales]:
        """
        Best selling products by quantity over active invoices

        Args:
            start_date: Invoice date lower bound (used with end_date)
            end_date: Invoice date upper bound (used with start_date)
            limit: Maximum number of products

        Returns:
            ProductSales rows, highest quantity first
        """
        pass
