"""Inventory use cases"""
from .create_product import CreateProduct
from .get_product import GetProduct
from .list_products import ListProducts, ListCategories
from .update_product import UpdateProduct, DeactivateProduct
from .adjust_stock import AdjustStock
from .list_stock_alerts import ListStockAlerts
from .dtos import (
    StockOperation,
    CreateProductCommandDTO,
    UpdateProductCommandDTO,
    AdjustStockCommandDTO,
    ListProductsQueryDTO,
    ProductResponseDTO,
    ProductListResponseDTO,
    StockAlertsResponseDTO,
)

__all__ = [
    "CreateProduct",
    "GetProduct",
    "ListProducts",
    "ListCategories",
    "UpdateProduct",
    "DeactivateProduct",
    "AdjustStock",
    "ListStockAlerts",
    "StockOperation",
    "CreateProductCommandDTO",
    "UpdateProductCommandDTO",
    "AdjustStockCommandDTO",
    "ListProductsQueryDTO",
    "ProductResponseDTO",
    "ProductListResponseDTO",
    "StockAlertsResponseDTO",
]
