"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Dict, Optional, List, Tuple
from datetime import datetime
from decimal import Decimal
from sqlalchemy import or_
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice, PaymentStatus


def _date_range(start_date: Optional[datetime], end_date: Optional[datetime]) -> list:
    """invoice_date bounds, applied only when both ends are given"""
    if start_date and end_date:
        return [Invoice.invoice_date >= start_date, Invoice.invoice_date <= end_date]
    return []


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_latest_invoice_number(self) -> Optional[str]:
        """
        Invoice number of the most recently created invoice

        Ties on created_at are broken by the invoice number itself.

        Returns:
            Invoice number, or None if there are no invoices yet
        """
        statement = (
            select(Invoice.invoice_number)
            .order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

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
        Retrieve invoices matching the filters

        Args:
            customer_id: Optional filter by customer
            payment_status: Optional filter by status
            start_date: Lower bound on invoice_date (applied with end_date)
            end_date: Upper bound on invoice_date (applied with start_date)
            search: Case-insensitive match on invoice number or customer name
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            Tuple of (list of invoices, total count)
        """
        conditions = []

        if customer_id:
            conditions.append(Invoice.customer_id == customer_id)

        if payment_status:
            conditions.append(Invoice.payment_status == payment_status)

        conditions.extend(_date_range(start_date, end_date))

        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Invoice.invoice_number).like(pattern),
                    func.lower(Invoice.customer_name).like(pattern),
                )
            )

        count_statement = select(func.count()).select_from(Invoice).where(*conditions)
        count_result = await self.session.execute(count_statement)
        total = count_result.scalar_one()

        statement = (
            select(Invoice)
            .where(*conditions)
            .order_by(Invoice.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()

    async def count_by_status(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[PaymentStatus, int]:
        statement = (
            select(Invoice.payment_status, func.count())
            .where(*_date_range(start_date, end_date))
            .group_by(Invoice.payment_status)
        )
        result = await self.session.execute(statement)
        return {PaymentStatus(status): count for status, count in result.all()}

    async def total_revenue(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[Decimal, int]:
        """
        Sum of total_amount over active invoices

        Invoices whose stock was returned by a cancellation are left out.
        """
        statement = (
            select(func.coalesce(func.sum(Invoice.total_amount), 0), func.count())
            .where(Invoice.is_active == True)  # noqa: E712
            .where(*_date_range(start_date, end_date))
        )
        result = await self.session.execute(statement)
        revenue, count = result.one()
        return Decimal(str(revenue)), count
