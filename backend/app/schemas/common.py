"""
Schemas Pydantic condivisi
Progetto: Tailor Manager (Gestionale Sartoria)

Metadati di paginazione e riepiloghi delle entità collegate
usati nelle risposte "popolate" (cliente, utente, categoria, prodotto).
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PaginatedResponse(BaseModel):
    """
    Base per le risposte paginate.

    Le sottoclassi dichiarano il campo `items` con il proprio tipo.

    Attributes:
        total: Numero totale di record
        page: Pagina corrente
        per_page: Record per pagina
        total_pages: Numero totale di pagine (calcolato automaticamente)
    """

    total: int = Field(..., ge=0, description="Numero totale di record")
    page: int = Field(..., ge=1, description="Numero pagina corrente")
    per_page: int = Field(..., ge=1, description="Record per pagina")
    total_pages: int = 0

    @model_validator(mode="after")
    def compute_total_pages(self) -> "PaginatedResponse":
        """Calcola automaticamente il numero totale di pagine."""
        if self.per_page > 0:
            self.total_pages = (self.total + self.per_page - 1) // self.per_page
        return self


class UserSummary(BaseModel):
    """Riepilogo utente (solo nome) per le risposte popolate."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str


class CustomerSummary(BaseModel):
    """Riepilogo cliente per le risposte popolate."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str


class CategorySummary(BaseModel):
    """Riepilogo categoria per le risposte popolate."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str


class ProductSummary(BaseModel):
    """Riepilogo prodotto (nome, prezzo, categoria) per le voci d'ordine."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    price: Decimal
    category: CategorySummary | None = None


class MeasurementSummary(BaseModel):
    """Scheda misure collegata a una voce d'ordine."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    category: CategorySummary | None = None
    measurements: dict[str, str] = Field(default_factory=dict)
