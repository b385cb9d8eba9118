"""CreateProduct Use Case

Registers a catalogue product with its opening stock.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceValidationError
from src.domain.product import Product
from .dtos import CreateProductCommandDTO, ProductResponseDTO, build_product_response

logger = logging.getLogger(__name__)


class CreateProduct:
    """
    Use Case: Register a product

    Business Rules:
    1. Barcodes are unique
    2. Opening stock counts as a restock when > 0
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, command: CreateProductCommandDTO) -> Result[ProductResponseDTO]:
        try:
            existing = await self.product_repo.get_by_barcode(command.barcode)
            if existing is not None:
                return Return.err(
                    error_from(
                        InvoiceValidationError(
                            f"Product with barcode {command.barcode} already exists",
                            reason="Duplicate barcode",
                            details={"barcode": command.barcode, "product_id": existing.id},
                        )
                    )
                )

            product = Product(**command.model_dump())
            if product.available_quantity > 0:
                product.last_restocked_at = product.created_at

            created_product = await self.product_repo.create(product)
            await self.uow.commit()

            logger.info(f"Registered product {created_product.name} ({created_product.barcode})")
            return Return.ok(build_product_response(created_product))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Product registration failed: {e}")
            return Return.err(
                Error(
                    code="CREATE_PRODUCT_FAILED",
                    message="Failed to create product",
                    reason=str(e),
                )
            )
