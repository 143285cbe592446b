"""
Schemas Pydantic per le Categorie
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.category import DEFAULT_GRADIENT_COLORS


def _strip_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Il titolo della categoria non può essere vuoto")
    return v


class CategoryBase(BaseModel):
    """
    Schema base per le categorie.

    Attributes:
        title: Titolo univoco
        icon: Icona per il frontend
        gradient_colors: Colori del gradiente
        required_measurements: Etichette delle misure da rilevare
    """
    title: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(default="category", max_length=100)
    gradient_colors: list[str] = Field(default_factory=lambda: list(DEFAULT_GRADIENT_COLORS))
    required_measurements: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_title(v)


class CategoryCreate(CategoryBase):
    """Schema per la creazione di una categoria."""
    pass


class CategoryUpdate(BaseModel):
    """Schema per l'aggiornamento parziale di una categoria."""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=100)
    gradient_colors: Optional[list[str]] = None
    required_measurements: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _strip_title(v)


class CategoryRead(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime.datetime
    updated_at: datetime.datetime
