"""GetProduct Use Case"""

from src.libs.result import Result, Return
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import ProductNotFound
from .dtos import ProductResponseDTO, build_product_response


class GetProduct:
    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    async def execute(self, product_id: str) -> Result[ProductResponseDTO]:
        product = await self.product_repo.get_by_id(product_id)
        if product is None:
            return Return.err(error_from(ProductNotFound(product_id)))
        return Return.ok(build_product_response(product))
