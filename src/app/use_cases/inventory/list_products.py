"""ListProducts Use Case

Browses the active catalogue with search, filters and page based pagination.
"""

import math
from datetime import date, timedelta
from typing import List, Optional
from src.libs.result import Result, Return
from src.app.repositories.product_repository import ProductRepository
from .dtos import ListProductsQueryDTO, ProductListResponseDTO, build_product_response


class ListProducts:
    """
    Use case: Browse products

    Deactivated products never appear. `expiring_soon` uses the same window
    as the stock alerts.
    """

    def __init__(self, product_repo: ProductRepository, expiry_alert_days: int = 30):
        self.product_repo = product_repo
        self.expiry_alert_days = expiry_alert_days

    async def execute(
        self, query: ListProductsQueryDTO, today: Optional[date] = None
    ) -> Result[ProductListResponseDTO]:
        today = today or date.today()
        expiring_between = None
        if query.expiring_soon:
            expiring_between = (today, today + timedelta(days=self.expiry_alert_days))

        products, total = await self.product_repo.search(
            search=query.search,
            category=query.category,
            low_stock=query.low_stock,
            expiring_between=expiring_between,
            limit=query.limit,
            offset=(query.page - 1) * query.limit,
        )

        return Return.ok(
            ProductListResponseDTO(
                products=[build_product_response(product) for product in products],
                total=total,
                page=query.page,
                limit=query.limit,
                pages=math.ceil(total / query.limit) if total else 0,
            )
        )


class ListCategories:
    """Use case: Categories in use by active products"""

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self) -> Result[List[str]]:
        return Return.ok(await self.product_repo.list_categories())
