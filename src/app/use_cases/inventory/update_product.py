"""UpdateProduct and DeactivateProduct Use Cases

Edits catalogue details and retires products. Products are never deleted
because invoice items keep a foreign key to them.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoiceValidationError, InvoicingError, ProductNotFound
from .dtos import ProductResponseDTO, UpdateProductCommandDTO, build_product_response

logger = logging.getLogger(__name__)

# Columns that are NOT NULL, so an explicit null from the client is rejected
REQUIRED_FIELDS = ("name", "barcode", "minimum_quantity", "unit_price", "selling_price", "unit")


class UpdateProduct:
    """
    Use Case: Edit a product

    Business Rules:
    1. Only the fields present in the command change
    2. A new barcode must not belong to another product
    3. available_quantity is not editable here; use AdjustStock
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, command: UpdateProductCommandDTO) -> Result[ProductResponseDTO]:
        try:
            product = await self.product_repo.get_by_id(command.product_id, for_update=True)
            if product is None:
                raise ProductNotFound(command.product_id)

            changes = command.model_dump(exclude_unset=True, exclude={"product_id"})

            cleared = [field for field in REQUIRED_FIELDS if field in changes and changes[field] is None]
            if cleared:
                raise InvoiceValidationError(
                    f"{', '.join(cleared)} cannot be empty",
                    details={"fields": cleared},
                )

            new_barcode = changes.get("barcode")
            if new_barcode and new_barcode != product.barcode:
                existing = await self.product_repo.get_by_barcode(new_barcode)
                if existing is not None and existing.id != product.id:
                    raise InvoiceValidationError(
                        f"Product with barcode {new_barcode} already exists",
                        reason="Duplicate barcode",
                        details={"barcode": new_barcode, "product_id": existing.id},
                    )

            for field, value in changes.items():
                setattr(product, field, value)

            updated_product = await self.product_repo.update(product)
            await self.uow.commit()

            logger.info(f"Updated product {updated_product.name} ({updated_product.barcode})")
            return Return.ok(build_product_response(updated_product))

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Product update rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Product update failed: {e}")
            return Return.err(
                Error(
                    code="UPDATE_PRODUCT_FAILED",
                    message="Failed to update product",
                    reason=str(e),
                )
            )


class DeactivateProduct:
    """
    Use Case: Retire a product (soft delete)

    The row stays so that existing invoice items still resolve. Inactive
    products drop out of listings and stock alerts. Deactivating twice is
    harmless.
    """

    def __init__(self, uow: UnitOfWork, product_repo: ProductRepository):
        self.uow = uow
        self.product_repo = product_repo

    async def execute(self, product_id: str) -> Result[ProductResponseDTO]:
        try:
            product = await self.product_repo.get_by_id(product_id, for_update=True)
            if product is None:
                raise ProductNotFound(product_id)

            if not product.is_active:
                return Return.ok(build_product_response(product))

            product.is_active = False
            deactivated = await self.product_repo.update(product)
            await self.uow.commit()

            logger.info(f"Deactivated product {deactivated.name} ({deactivated.barcode})")
            return Return.ok(build_product_response(deactivated))

        except InvoicingError as e:
            await self.uow.rollback()
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Product deactivation failed: {e}")
            return Return.err(
                Error(
                    code="DEACTIVATE_PRODUCT_FAILED",
                    message="Failed to deactivate product",
                    reason=str(e),
                )
            )
