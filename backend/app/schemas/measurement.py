"""
Schemas Pydantic per le Schede Misure
Progetto: Tailor Manager (Gestionale Sartoria)

Le misure sono una mappa ordinata etichetta → valore: l'ordine di
inserimento delle etichette viene preservato nella serializzazione.
"""

import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import CategorySummary, CustomerSummary, PaginatedResponse, UserSummary


def validate_measurement_map(v: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
    """Rimuove gli spazi dalle etichette e scarta quelle vuote."""
    if v is None:
        return v
    cleaned: dict[str, str] = {}
    for label, value in v.items():
        label = label.strip()
        if not label:
            raise ValueError("Le etichette delle misure non possono essere vuote")
        cleaned[label] = value.strip()
    return cleaned


class MeasurementCreate(BaseModel):
    """
    Schema per la creazione di una scheda misure.

    Attributes:
        customer_id: Cliente misurato
        category_id: Categoria di capo
        measurements: Mappa etichetta → valore
        notes: Note
    """
    customer_id: uuid.UUID
    category_id: uuid.UUID
    measurements: dict[str, str] = Field(default_factory=dict)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("measurements")
    @classmethod
    def validate_measurements(cls, v: dict[str, str]) -> dict[str, str]:
        return validate_measurement_map(v)


class MeasurementUpdate(BaseModel):
    """Schema per l'aggiornamento di misure e note."""
    measurements: Optional[dict[str, str]] = None
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("measurements")
    @classmethod
    def validate_measurements(cls, v: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        return validate_measurement_map(v)


class MeasurementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    customer: Optional[CustomerSummary] = None
    category_id: uuid.UUID
    category: Optional[CategorySummary] = None
    measurements: dict[str, str] = Field(default_factory=dict)
    notes: Optional[str] = None
    measured_by: Optional[UserSummary] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class MeasurementList(PaginatedResponse):
    items: list[MeasurementRead]
