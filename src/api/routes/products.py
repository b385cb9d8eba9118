"""Product API Routes

Product catalogue: registration, listing, editing, deactivation,
stock adjustment and stock alerts.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.stock_ledger import StockLedger
from src.app.use_cases.inventory import (
    AdjustStock,
    CreateProduct,
    DeactivateProduct,
    GetProduct,
    ListCategories,
    ListProducts,
    ListStockAlerts,
    UpdateProduct,
)
from src.app.use_cases.inventory.dtos import (
    AdjustStockCommandDTO,
    CreateProductCommandDTO,
    ListProductsQueryDTO,
    ProductListResponseDTO,
    ProductResponseDTO,
    StockAlertsResponseDTO,
    UpdateProductCommandDTO,
)
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.schemas.product_request import (
    ProductRequestSchema,
    ProductUpdateRequestSchema,
    StockAdjustmentRequestSchema,
)
from src.depends import get_session

router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "",
    response_model=ProductResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Barcode already registered",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "Product with barcode 8901234567890 already exists"
                        }
                    }
                }
            }
        }
    }
)
async def create_product(
    request: ProductRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """Register a product with its opening stock."""
    use_case = CreateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(CreateProductCommandDTO(**request.model_dump()))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=ProductListResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_products(
    search: Optional[str] = Query(default=None, description="Name, barcode or manufacturer"),
    category: Optional[str] = Query(default=None),
    low_stock: bool = Query(default=False),
    expiring_soon: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    """
    List active products, newest first.

    **Query parameters:**
    - `search`: matches name, barcode or manufacturer
    - `category`: exact category
    - `low_stock`: only products at or below their minimum quantity
    - `expiring_soon`: only products expiring within the alert window
    - `page`, `limit`: pagination
    """
    use_case = ListProducts(
        SqlAlchemyProductRepository(session),
        expiry_alert_days=ApplicationConfig.STOCK_EXPIRY_ALERT_DAYS,
    )
    result = await use_case.execute(
        ListProductsQueryDTO(
            search=search,
            category=category,
            low_stock=low_stock,
            expiring_soon=expiring_soon,
            page=page,
            limit=limit,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/categories",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
)
async def list_categories(
    session: AsyncSession = Depends(get_session)
):
    """Categories used by active products, sorted."""
    result = await ListCategories(SqlAlchemyProductRepository(session)).execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/alerts",
    response_model=StockAlertsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_stock_alerts(
    days: Optional[int] = Query(default=None, ge=0, le=365, description="Expiry window in days"),
    session: AsyncSession = Depends(get_session)
):
    """
    Low stock and expiring-soon products.

    **Query parameters:**
    - `days` (optional): expiry window, defaults to the configured value
    """
    use_case = ListStockAlerts(
        SqlAlchemyProductRepository(session),
        default_days=ApplicationConfig.STOCK_EXPIRY_ALERT_DAYS,
    )
    result = await use_case.execute(days=days)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{product_id}",
    response_model=ProductResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Product not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRODUCT_NOT_FOUND",
                            "message": "Product not found: 5f0c1c4e-8d7a-4f39-9d43-3f0e2b8f1a11"
                        }
                    }
                }
            }
        }
    }
)
async def get_product(
    product_id: str,
    session: AsyncSession = Depends(get_session)
):
    result = await GetProduct(SqlAlchemyProductRepository(session)).execute(product_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{product_id}",
    response_model=ProductResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Barcode already registered, or a required field set to null"},
        404: {"description": "Product not found"},
    }
)
async def update_product(
    product_id: str,
    request: ProductUpdateRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit product details.

    Only the fields sent are changed. Stock levels go through
    `PATCH /products/{product_id}/quantity`.
    """
    use_case = UpdateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(
        UpdateProductCommandDTO(product_id=product_id, **request.model_dump(exclude_unset=True))
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{product_id}",
    response_model=ProductResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Product not found"}}
)
async def delete_product(
    product_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Deactivate a product.

    The product is kept because invoice items reference it; it no longer
    shows up in listings or stock alerts.
    """
    use_case = DeactivateProduct(SqlAlchemyUnitOfWork(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(product_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{product_id}/quantity",
    response_model=ProductResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Product not found"},
        409: {
            "description": "Subtract larger than available stock",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_STOCK",
                            "message": "Insufficient stock for Paracetamol 500mg. Available: 3, Required: 5"
                        }
                    }
                }
            }
        }
    }
)
async def adjust_stock(
    product_id: str,
    request: StockAdjustmentRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Adjust available quantity.

    - `add`: inbound stock (updates last restock time)
    - `subtract`: outbound stock, never below zero
    - `set`: stock-take overwrite

    `operation` defaults to `set`, so a request that omits it replaces the
    stock level with `quantity` instead of adding to it.
    """
    product_repo = SqlAlchemyProductRepository(session)
    use_case = AdjustStock(SqlAlchemyUnitOfWork(session), product_repo, StockLedger(product_repo))
    result = await use_case.execute(
        AdjustStockCommandDTO(
            product_id=product_id,
            quantity=request.quantity,
            operation=request.operation,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
