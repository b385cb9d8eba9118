"""SQLAlchemy implementation of ProductRepository

Provides persistence for Product entities with pessimistic locking and an
atomic conditional decrement, so concurrent invoices cannot oversell.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import or_, update
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):
    """
    SQLAlchemy implementation of ProductRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Conditional UPDATE for reservations
    - Locked rows are re-read from the database, never served stale
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: str, for_update: bool = False) -> Optional[Product]:
        """
        Retrieve product by ID with optional row-level locking

        Args:
            product_id: Product identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Product if found, None otherwise
        """
        stmt = (
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many_by_ids(
        self, product_ids: Iterable[str], for_update: bool = False
    ) -> List[Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return []

        stmt = (
            select(Product)
            .where(Product.id.in_(ids))
            .order_by(Product.id)
            .execution_options(populate_existing=True)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_barcode(self, barcode: str) -> Optional[Product]:
        stmt = select(Product).where(Product.barcode == barcode)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, product: Product) -> Product:
        """
        Create a new product

        Args:
            product: Product entity to persist

        Returns:
            Created Product
        """
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def decrement_quantity(self, product_id: str, quantity: int) -> Optional[int]:
        """
        Conditionally subtract ``quantity`` from available stock

        Args:
            product_id: Product identifier
            quantity: Quantity to subtract

        Returns:
            New available quantity, or None when no row matched
            (missing product or not enough stock)
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .where(Product.available_quantity >= quantity)
            .values(
                available_quantity=Product.available_quantity - quantity,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None

        remaining = await self.session.execute(
            select(Product.available_quantity).where(Product.id == product_id)
        )
        return remaining.scalar_one()

    async def set_quantity(
        self,
        product_id: str,
        quantity: int,
        restocked_at: Optional[datetime] = None,
    ) -> None:
        """
        Overwrite available quantity and updated_at timestamp

        Args:
            product_id: Product identifier
            quantity: New available quantity
            restocked_at: Optional restock timestamp

        Note:
            Should be called within a transaction with the product already locked
        """
        product = await self.get_by_id(product_id, for_update=False)
        if product:
            product.available_quantity = quantity
            if restocked_at is not None:
                product.last_restocked_at = restocked_at
            product.updated_at = datetime.utcnow()
            self.session.add(product)
            await self.session.flush()

    async def list_low_stock(self) -> List[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .where(Product.available_quantity <= Product.minimum_quantity)
            .order_by(Product.available_quantity, Product.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_expiring(self, start: date, end: date) -> List[Product]:
        stmt = (
            select(Product)
            .where(Product.is_active == True)  # noqa: E712
            .where(Product.expiry_date.is_not(None))
            .where(Product.expiry_date >= start)
            .where(Product.expiry_date <= end)
            .order_by(Product.expiry_date, Product.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, product: Product) -> Product:
        product.updated_at = datetime.utcnow()
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

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
        Active products matching the filters

        Args:
            search: Case-insensitive match on name, barcode or manufacturer
            category: Exact category
            low_stock: available_quantity <= minimum_quantity
            expiring_between: expiry_date within (start, end), inclusive
            limit: Maximum number of products to return
            offset: Offset for pagination

        Returns:
            Tuple of (list of products, total count)
        """
        conditions = [Product.is_active == True]  # noqa: E712

        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(Product.barcode).like(pattern),
                    func.lower(Product.manufacturer).like(pattern),
                )
            )

        if category:
            conditions.append(Product.category == category)

        if low_stock:
            conditions.append(Product.available_quantity <= Product.minimum_quantity)

        if expiring_between is not None:
            start, end = expiring_between
            conditions.append(Product.expiry_date.is_not(None))
            conditions.append(Product.expiry_date >= start)
            conditions.append(Product.expiry_date <= end)

        count_stmt = select(func.count()).select_from(Product).where(*conditions)
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.name)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_categories(self) -> List[str]:
        stmt = (
            select(Product.category)
            .where(Product.is_active == True)  # noqa: E712
            .where(Product.category.is_not(None))
            .distinct()
            .order_by(Product.category)
        )
        result = await self.session.execute(stmt)
        return [category for category in result.scalars().all() if category]
