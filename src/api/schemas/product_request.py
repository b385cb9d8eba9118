"""Request schemas for Product API"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from src.app.use_cases.inventory.dtos import StockOperation
from src.domain.product import ProductUnit


class ProductRequestSchema(BaseModel):
    """
    Request schema for registering a product

    Used for POST /products endpoint.
    """

    name: str = Field(..., min_length=1, max_length=255)
    barcode: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    manufacturer: Optional[str] = Field(default=None, max_length=255)
    batch_number: Optional[str] = Field(default=None, max_length=50)
    expiry_date: Optional[date] = None
    available_quantity: int = Field(default=0, ge=0)
    minimum_quantity: int = Field(default=0, ge=0)
    maximum_quantity: Optional[int] = Field(default=None, ge=0)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    unit: ProductUnit = ProductUnit.PCS
    location: Optional[str] = Field(default=None, max_length=100)
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
                "unit": "strip"
            }
        }


class ProductUpdateRequestSchema(BaseModel):
    """
    Request schema for PUT /products/{product_id}

    Every field is optional; omitted fields keep their value.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    barcode: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    manufacturer: Optional[str] = Field(default=None, max_length=255)
    batch_number: Optional[str] = Field(default=None, max_length=50)
    expiry_date: Optional[date] = None
    minimum_quantity: Optional[int] = Field(default=None, ge=0)
    maximum_quantity: Optional[int] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    unit: Optional[ProductUnit] = None
    location: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "selling_price": "2.50",
                "category": "Analgesics"
            }
        }


class StockAdjustmentRequestSchema(BaseModel):
    """
    Request schema for PATCH /products/{product_id}/quantity
    """

    quantity: int = Field(..., ge=0)
    operation: StockOperation = Field(
        default=StockOperation.SET,
        description="Omitting it overwrites the stock level with quantity"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "quantity": 50,
                "operation": "add"
            }
        }
