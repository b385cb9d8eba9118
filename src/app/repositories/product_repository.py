"""Product Repository Interface

Defines the contract for product persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from src.domain.product import Product


class ProductRepository(ABC):
    """
    Repository interface for Product persistence

    Quantity mutations are atomic at the row level so that concurrent
    invoices cannot oversell a product.
    """

    @abstractmethod
    async def get_by_id(self, product_id: str, for_update: bool = False) -> Optional[Product]:
        """
        Retrieve product by ID

        Args:
            product_id: Product identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Product if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_many_by_ids(
        self, product_ids: Iterable[str], for_update: bool = False
    ) -> List[Product]:
        """
        Retrieve several products, locking them in ascending id order

        Args:
            product_ids: Product identifiers
            for_update: If True, lock the rows with SELECT FOR UPDATE

        Returns:
            Products found (missing ids are simply absent)
        """
        pass

    @abstractmethod
    async def get_by_barcode(self, barcode: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """
        Create a new product

        Args:
            product: Product entity to persist

        Returns:
            Created Product
        """
        pass

    @abstractmethod
    async def decrement_quantity(self, product_id: str, quantity: int) -> Optional[int]:
        """
        Atomically subtract ``quantity`` if enough stock is available

        Equivalent to
        ``UPDATE products SET available_quantity = available_quantity - :n
        WHERE id = :id AND available_quantity >= :n``.

        Args:
            product_id: Product identifier
            quantity: Quantity to subtract (> 0)

        Returns:
            New available quantity, or None if the product is missing or
            has less than ``quantity`` available (nothing is changed)
        """
        pass

    @abstractmethod
    async def set_quantity(
        self,
        product_id: str,
        quantity: int,
        restocked_at: Optional[datetime] = None,
    ) -> None:
        """
        Overwrite the available quantity

        Args:
            product_id: Product identifier
            quantity: New available quantity (>= 0)
            restocked_at: If given, stamped as the last restock time

        Note:
            Should be called within a transaction with the row already locked
        """
        pass

    @abstractmethod
    async def list_low_stock(self) -> List[Product]:
        """Active products at or below their minimum quantity"""
        pass

    @abstractmethod
    async def list_expiring(self, start: date, end: date) -> List[Product]:
        """Active products whose expiry date falls within [start, end]"""
        pass

    @abstractmethod
    async def update(self, product: Product) -> Product:
        """
        Persist changes to an existing product

        Args:
            product: Product entity with updated values

        Returns:
            Updated Product
        """
        pass

    @abstractmethod
    async def search(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        low_stock: bool = False,
        expiring_between: Optional[Tuple[date, date]] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """
        Active products matching the filters, newest first

        Args:
            search: Case-insensitive match on name, barcode or manufacturer
            category: Exact category
            low_stock: Only products at or below their minimum quantity
            expiring_between: Only products expiring within (start, end)
            limit: Maximum number of products to return
            offset: Offset for pagination

        Returns:
            Tuple of (list of products, total count)
        """
        pass

    @abstractmethod
    async def list_categories(self) -> List[str]:
        """Distinct categories of active products, sorted"""
        pass
