"""ListStockAlerts Use Case

Low stock and expiring products for the reorder dashboard.
"""

from datetime import date, timedelta
from typing import Optional
from src.libs.result import Result, Return
from src.app.repositories.product_repository import ProductRepository
from .dtos import StockAlertsResponseDTO, build_product_response


class ListStockAlerts:
    """
    Use case: Stock alerts

    - low stock: active products with available_quantity <= minimum_quantity
    - expiring soon: active products expiring between today and today + days
    """

    def __init__(self, product_repo: ProductRepository, default_days: int = 30):
        self.product_repo = product_repo
        self.default_days = default_days

    async def execute(
        self, days: Optional[int] = None, today: Optional[date] = None
    ) -> Result[StockAlertsResponseDTO]:
        days = self.default_days if days is None else days
        today = today or date.today()

        low_stock = await self.product_repo.list_low_stock()
        expiring = await self.product_repo.list_expiring(today, today + timedelta(days=days))

        return Return.ok(
            StockAlertsResponseDTO(
                low_stock=[build_product_response(p) for p in low_stock],
                expiring_soon=[build_product_response(p) for p in expiring],
                days=days,
            )
        )
