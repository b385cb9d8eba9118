"""Product Domain Entity

Catalogue entry with on-hand stock. Invoicing references products by id
and only ever changes ``available_quantity`` through the StockLedger.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, Integer, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid


class ProductUnit(str, Enum):
    """Dispensing units"""
    PCS = "pcs"
    BOX = "box"
    BOTTLE = "bottle"
    STRIP = "strip"
    TABLET = "tablet"
    CAPSULE = "capsule"
    ML = "ml"
    MG = "mg"
    G = "g"
    KG = "kg"


class Product(BaseModel, table=True):
    """
    Product - Catalogue item with available stock

    Domain Rules:
    - barcode is unique
    - available_quantity is never negative
    - last_restocked_at changes only on explicit inbound stock
      (a release caused by an invoice edit or cancel is not a restock)
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint('available_quantity >= 0', name='available_quantity_non_negative'),
        CheckConstraint('minimum_quantity >= 0', name='minimum_quantity_non_negative'),
        Index('ix_products_barcode', 'barcode', unique=True),
        Index('ix_products_name', 'name'),
        Index('ix_products_expiry_date', 'expiry_date'),
        Index('ix_products_available_quantity', 'available_quantity'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Unique product identifier (UUID)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Product name"
    )

    barcode: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Unique barcode"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    category: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    manufacturer: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    batch_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Batch / lot number"
    )

    expiry_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Expiry date of the current batch"
    )

    available_quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="On-hand quantity (>= 0)"
    )

    minimum_quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Low-stock threshold"
    )

    maximum_quantity: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
    )

    unit_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Purchase price per unit"
    )

    selling_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Selling price per unit"
    )

    unit: ProductUnit = Field(
        default=ProductUnit.PCS,
        description="Dispensing unit"
    )

    location: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Shelf / rack location"
    )

    is_active: bool = Field(default=True)

    last_restocked_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last inbound stock adjustment"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def is_low_stock(self) -> bool:
        return self.available_quantity <= self.minimum_quantity

    def is_expired(self, today: Optional[date] = None) -> bool:
        if self.expiry_date is None:
            return False
        return self.expiry_date < (today or date.today())

    def is_expiring_soon(self, days: int = 30, today: Optional[date] = None) -> bool:
        """True if the product expires within ``days`` but has not expired yet"""
        if self.expiry_date is None:
            return False
        today = today or date.today()
        return today <= self.expiry_date <= today + timedelta(days=days)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "5f0c1c4e-8d7a-4f39-9d43-3f0e2b8f1a11",
                "name": "Paracetamol 500mg",
                "barcode": "8901234567890",
                "batch_number": "B2024-07",
                "expiry_date": "2026-12-31",
                "available_quantity": 120,
                "minimum_quantity": 20,
                "unit_price": "1.20",
                "selling_price": "2.00",
                "unit": "strip",
            }
        }
