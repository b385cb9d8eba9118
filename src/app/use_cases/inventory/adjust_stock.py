"""AdjustStock Use Case

Manual stock movements outside of invoicing.
"""

import logging
from src.libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.stock_ledger import StockLedger
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.errors import error_from
from src.domain.errors import InvoicingError, ProductNotFound
from .dtos import AdjustStockCommandDTO, ProductResponseDTO, StockOperation, build_product_response

logger = logging.getLogger(__name__)


class AdjustStock:
    """
    Use Case: Adjust a product's available quantity

    Operations:
    - add: inbound stock, stamps last_restocked_at
    - subtract: fails with INSUFFICIENT_STOCK rather than going below zero
    - set: absolute overwrite (stock-take)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        product_repo: ProductRepository,
        stock_ledger: StockLedger,
    ):
        self.uow = uow
        self.product_repo = product_repo
        self.stock_ledger = stock_ledger

    async def execute(self, command: AdjustStockCommandDTO) -> Result[ProductResponseDTO]:
        try:
            if command.operation == StockOperation.ADD:
                await self.stock_ledger.restock(command.product_id, command.quantity)
            elif command.operation == StockOperation.SUBTRACT:
                await self.stock_ledger.reserve(command.product_id, command.quantity)
            else:
                await self.stock_ledger.set_quantity(command.product_id, command.quantity)

            product = await self.product_repo.get_by_id(command.product_id)
            if product is None:
                raise ProductNotFound(command.product_id)

            await self.uow.commit()

            logger.info(
                f"Stock {command.operation.value} {command.quantity} on product "
                f"{product.id}, {product.available_quantity} available"
            )
            return Return.ok(build_product_response(product))

        except InvoicingError as e:
            await self.uow.rollback()
            logger.warning(f"Stock adjustment rejected: {e.code} {e.message}")
            return Return.err(error_from(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Stock adjustment failed: {e}")
            return Return.err(
                Error(
                    code="ADJUST_STOCK_FAILED",
                    message="Failed to adjust stock",
                    reason=str(e),
                )
            )
