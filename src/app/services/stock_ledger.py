"""Stock Ledger

Single entry point for every change to a product's available quantity.

Rules:
- Available quantity never goes below zero
- A reservation either takes the full requested quantity or nothing
- Releases are clamped at zero and are not restocks
- Only explicit inbound stock (restock) stamps last_restocked_at
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Mapping, Tuple
from src.app.repositories.product_repository import ProductRepository
from src.domain.errors import InsufficientStock, InvoiceValidationError, ProductNotFound
from src.domain.product import Product

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Reserve, release, restock and set product quantities

    Must run inside the caller's Unit of Work. The ledger never commits;
    a rollback of the surrounding transaction undoes every change it made.
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def reserve(self, product_id: str, quantity: int) -> int:
        """
        Take ``quantity`` units out of stock

        Args:
            product_id: Product identifier
            quantity: Units to take (>= 1)

        Returns:
            New available quantity

        Raises:
            ProductNotFound: Product does not exist
            InsufficientStock: Less than ``quantity`` available (nothing changed)
        """
        _ensure_positive(quantity)

        remaining = await self.product_repo.decrement_quantity(product_id, quantity)
        if remaining is None:
            product = await self.product_repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            raise InsufficientStock(
                product_id=product_id,
                requested=quantity,
                available=product.available_quantity,
                product_name=product.name,
            )

        logger.debug(f"Reserved {quantity} of product {product_id}, {remaining} left")
        return remaining

    async def release(self, product_id: str, quantity: int) -> int:
        """
        Put ``quantity`` units back into stock

        Used when invoice items are removed or an invoice is cancelled.
        Does not touch last_restocked_at.

        Returns:
            New available quantity
        """
        _ensure_positive(quantity)

        product = await self._get_locked(product_id)
        new_quantity = max(0, product.available_quantity + quantity)
        await self.product_repo.set_quantity(product_id, new_quantity)

        logger.debug(f"Released {quantity} of product {product_id}, {new_quantity} available")
        return new_quantity

    async def restock(self, product_id: str, quantity: int) -> int:
        """Inbound stock: increment and stamp last_restocked_at"""
        _ensure_positive(quantity)

        product = await self._get_locked(product_id)
        new_quantity = product.available_quantity + quantity
        await self.product_repo.set_quantity(
            product_id, new_quantity, restocked_at=datetime.utcnow()
        )

        logger.info(f"Restocked product {product_id} with {quantity}, {new_quantity} available")
        return new_quantity

    async def set_quantity(self, product_id: str, quantity: int) -> int:
        """Overwrite the available quantity (stock-take correction)"""
        if quantity < 0:
            raise InvoiceValidationError(
                f"Quantity cannot be negative, got {quantity}",
                details={"product_id": product_id, "quantity": quantity},
            )

        product = await self._get_locked(product_id)
        await self.product_repo.set_quantity(product_id, quantity)

        logger.info(
            f"Set product {product_id} quantity from {product.available_quantity} to {quantity}"
        )
        return quantity

    async def reserve_many(self, quantities: Mapping[str, int]) -> Dict[str, int]:
        """
        Reserve several products as one step

        Products are locked in ascending id order. Every quantity is checked
        against availability before the first decrement. If a decrement still
        fails (a concurrent writer got there first), the reservations already
        taken are released before the error propagates.

        Args:
            quantities: Mapping of product id to total quantity requested

        Returns:
            Mapping of product id to new available quantity

        Raises:
            ProductNotFound: Any product does not exist
            InsufficientStock: Any product has less than requested
        """
        ordered = OrderedDict(sorted(quantities.items()))
        for quantity in ordered.values():
            _ensure_positive(quantity)

        products = await self.load_products(ordered.keys(), for_update=True)
        check_availability(products, ordered)

        reserved: List[Tuple[str, int]] = []
        remaining: Dict[str, int] = {}
        try:
            for product_id, quantity in ordered.items():
                remaining[product_id] = await self.reserve(product_id, quantity)
                reserved.append((product_id, quantity))
        except Exception:
            for product_id, quantity in reversed(reserved):
                await self.release(product_id, quantity)
            logger.warning(f"Rolled back {len(reserved)} reservation(s) after a failed reserve")
            raise

        return remaining

    async def release_many(self, quantities: Mapping[str, int]) -> Dict[str, int]:
        """Release several products in ascending id order"""
        released: Dict[str, int] = {}
        for product_id, quantity in sorted(quantities.items()):
            released[product_id] = await self.release(product_id, quantity)
        return released

    async def load_products(self, product_ids, for_update: bool = False) -> Dict[str, Product]:
        """
        Load products by id

        Raises:
            ProductNotFound: For the first id (in ascending order) that does not exist
        """
        ids = sorted(set(product_ids))
        products = await self.product_repo.get_many_by_ids(ids, for_update=for_update)
        by_id = {product.id: product for product in products}
        for product_id in ids:
            if product_id not in by_id:
                raise ProductNotFound(product_id)
        return by_id

    async def _get_locked(self, product_id: str) -> Product:
        product = await self.product_repo.get_by_id(product_id, for_update=True)
        if product is None:
            raise ProductNotFound(product_id)
        return product


def check_availability(products: Mapping[str, Product], quantities: Mapping[str, int]) -> None:
    """
    Raise InsufficientStock for the first product that cannot cover its quantity

    Args:
        products: Products by id
        quantities: Requested quantity by product id
    """
    for product_id, quantity in sorted(quantities.items()):
        product = products[product_id]
        if quantity > product.available_quantity:
            raise InsufficientStock(
                product_id=product_id,
                requested=quantity,
                available=product.available_quantity,
                product_name=product.name,
            )


def _ensure_positive(quantity: int) -> None:
    if quantity < 1:
        raise InvoiceValidationError(
            f"Quantity must be at least 1, got {quantity}",
            details={"quantity": quantity},
        )
