"""Data Transfer Objects for Inventory Use Cases"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.product import Product, ProductUnit


class StockOperation(str, Enum):
    """Manual stock adjustment kinds"""
    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"


class CreateProductCommandDTO(BaseModel):
    """
    Command DTO for registering a product

    Used as input to CreateProduct use case.
    """

    name: str = Field(..., min_length=1, description="Product name")
    barcode: str = Field(..., min_length=1, description="Unique barcode")
    description: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    available_quantity: int = Field(default=0, ge=0, description="Opening stock")
    minimum_quantity: int = Field(default=0, ge=0, description="Low-stock threshold")
    maximum_quantity: Optional[int] = Field(default=None, ge=0)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    unit: ProductUnit = ProductUnit.PCS
    location: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Paracetamol 500mg",
                "barcode": "8901234567890",
                "batch_number": "B2024-07",
                "expiry_date": "2026-12-31",
                "available_quantity": 120,
                "minimum_quantity": 20,
                "selling_price": "2.00",
                "unit": "strip",
            }
        }


class AdjustStockCommandDTO(BaseModel):
    """Manual stock adjustment"""

    product_id: str = Field(..., description="Product identifier")
    quantity: int = Field(..., ge=0, description="Units to add, subtract or set")
    operation: StockOperation = Field(
        default=StockOperation.SET,
        description="add (restock), subtract or set"
    )


class UpdateProductCommandDTO(BaseModel):
    """
    Command DTO for editing product details

    Only fields the client actually sent are applied. Stock levels change
    through AdjustStock, never here.
    """

    product_id: str = Field(..., description="Product identifier")
    name: Optional[str] = Field(default=None, min_length=1)
    barcode: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    minimum_quantity: Optional[int] = Field(default=None, ge=0)
    maximum_quantity: Optional[int] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[ProductUnit] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class ListProductsQueryDTO(BaseModel):
    """Filters and pagination for ListProducts"""

    search: Optional[str] = Field(
        default=None,
        description="Matches name, barcode or manufacturer"
    )
    category: Optional[str] = None
    low_stock: bool = False
    expiring_soon: bool = False
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class ProductResponseDTO(BaseModel):
    """Response DTO for product operations"""

    product_id: str
    name: str
    barcode: str
    description: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    available_quantity: int
    minimum_quantity: int
    maximum_quantity: Optional[int] = None
    unit_price: Decimal
    selling_price: Decimal
    unit: str
    location: Optional[str] = None
    is_active: bool
    is_low_stock: bool
    last_restocked_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ProductListResponseDTO(BaseModel):
    """Page of active products"""

    products: List[ProductResponseDTO]
    total: int = Field(..., description="Total products matching the filters")
    page: int
    limit: int
    pages: int = Field(..., description="Total number of pages")


class StockAlertsResponseDTO(BaseModel):
    """Products that need attention"""

    low_stock: List[ProductResponseDTO] = Field(
        default_factory=list,
        description="Products at or below their minimum quantity"
    )
    expiring_soon: List[ProductResponseDTO] = Field(
        default_factory=list,
        description="Products expiring within the alert window"
    )
    days: int = Field(..., description="Alert window in days")


def build_product_response(product: Product) -> ProductResponseDTO:
    return ProductResponseDTO(
        product_id=product.id,
        name=product.name,
        barcode=product.barcode,
        description=product.description,
        category=product.category,
        manufacturer=product.manufacturer,
        batch_number=product.batch_number,
        expiry_date=product.expiry_date,
        available_quantity=product.available_quantity,
        minimum_quantity=product.minimum_quantity,
        maximum_quantity=product.maximum_quantity,
        unit_price=product.unit_price,
        selling_price=product.selling_price,
        unit=product.unit.value if hasattr(product.unit, "value") else product.unit,
        location=product.location,
        is_active=product.is_active,
        is_low_stock=product.is_low_stock(),
        last_restocked_at=product.last_restocked_at,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )
