"""
Schemas Pydantic per i Prodotti
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.schemas.common import CategorySummary, PaginatedResponse


class MeasurementUnit(str, Enum):
    """Unità di misura ammesse."""
    INCH = "in"
    CM = "cm"
    MM = "mm"


class MeasurementRange(BaseModel):
    """
    Intervallo ammesso per una misura del prodotto.

    Attributes:
        name: Etichetta della misura (es. "Torace")
        unit: Unità di misura (default: in)
        min_value: Valore minimo
        max_value: Valore massimo
    """
    name: str = Field(..., min_length=1, max_length=100)
    unit: MeasurementUnit = Field(default=MeasurementUnit.INCH)
    min_value: float = Field(default=0)
    max_value: float = Field(default=100)

    @model_validator(mode="after")
    def validate_range(self) -> "MeasurementRange":
        if self.max_value < self.min_value:
            raise ValueError("max_value non può essere inferiore a min_value")
        return self


class ProductBase(BaseModel):
    """Schema base per i prodotti."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    price: Decimal = Field(default=Decimal("0"), ge=Decimal("0"), description="Prezzo di listino")
    category_id: uuid.UUID
    image: str = Field(default="default-product.jpg", max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    measurements: list[MeasurementRange] = Field(default_factory=list)


class ProductCreate(ProductBase):
    """Schema per la creazione di un prodotto."""
    pass


class ProductUpdate(BaseModel):
    """
    Schema per l'aggiornamento di un prodotto.

    Tutti i campi sono opzionali per permettere aggiornamenti parziali.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[Decimal] = Field(None, ge=Decimal("0"))
    category_id: Optional[uuid.UUID] = None
    image: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    measurements: Optional[list[MeasurementRange]] = None


class ProductRead(ProductBase):
    """Schema per la lettura di un prodotto con la sua categoria."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    category: Optional[CategorySummary] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class ProductList(PaginatedResponse):
    items: list[ProductRead]
