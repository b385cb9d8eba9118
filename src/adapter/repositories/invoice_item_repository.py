"""SQLAlchemy Invoice Item Repository Implementation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_item_repository import InvoiceItemRepository, ProductSales
from src.domain.invoice import Invoice
from src.domain.invoice_item import InvoiceItem


class SqlAlchemyInvoiceItemRepository(InvoiceItemRepository):
    """SQLAlchemy implementation of InvoiceItemRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: str) -> List[InvoiceItem]:
        statement = (
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.position)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create_many(self, items: List[InvoiceItem]) -> List[InvoiceItem]:
        """
        Persist a batch of items

        Args:
            items: InvoiceItem entities to persist

        Returns:
            Created items, refreshed from the database
        """
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items

    async def delete_by_invoice_id(self, invoice_id: str) -> int:
        statement = (
            delete(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount

    async def top_products(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 10,
    ) -> List[ProductSales]:
        total_quantity = func.sum(InvoiceItem.quantity).label("total_quantity")
        total_revenue = func.sum(InvoiceItem.total_amount).label("total_revenue")

        statement = (
            select(
                InvoiceItem.product_id,
                InvoiceItem.product_name,
                InvoiceItem.product_barcode,
                total_quantity,
                total_revenue,
            )
            .join(Invoice, Invoice.id == InvoiceItem.invoice_id)
            .where(Invoice.is_active == True)  # noqa: E712
        )
        if start_date and end_date:
            statement = statement.where(Invoice.invoice_date >= start_date).where(
                Invoice.invoice_date <= end_date
            )

        statement = (
            statement
            .group_by(InvoiceItem.product_id, InvoiceItem.product_name, InvoiceItem.product_barcode)
            .order_by(total_quantity.desc(), InvoiceItem.product_name)
            .limit(limit)
        )

        result = await self.session.execute(statement)
        return [
            ProductSales(
                product_id=row.product_id,
                product_name=row.product_name,
                product_barcode=row.product_barcode,
                total_quantity=int(row.total_quantity),
                total_revenue=Decimal(str(row.total_revenue)),
            )
            for row in result.all()
        ]
