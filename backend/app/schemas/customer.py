"""
Schemas Pydantic per l'entità Customer
Progetto: Tailor Manager (Gestionale Sartoria)

Schemas per validazione e serializzazione dati clienti.
"""

import datetime
import re
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.schemas.common import PaginatedResponse
from app.schemas.measurement import MeasurementRead


PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-()]{5,30}$")


def validate_phone_field(v: Optional[str]) -> Optional[str]:
    """
    Valida e normalizza il numero di telefono.

    Args:
        v: Numero di telefono

    Returns:
        Numero normalizzato (spazi iniziali/finali rimossi)

    Raises:
        ValueError: Se il numero contiene caratteri non ammessi
    """
    if v is None:
        return v
    v = v.strip()
    if not PHONE_PATTERN.match(v):
        raise ValueError("Numero di telefono non valido")
    return v


class CustomerBase(BaseModel):
    """
    Schema base per i clienti.

    Attributes:
        name: Nome e cognome
        phone: Telefono (univoco)
        email: Email opzionale
        address: Indirizzo
        referral: Come ci ha conosciuto
        notes: Note
        profile_image: Immagine profilo
    """
    name: str = Field(..., min_length=1, max_length=200, description="Nome del cliente")
    phone: str = Field(..., min_length=5, max_length=30, description="Telefono univoco")
    email: Optional[EmailStr] = Field(None, description="Email del cliente")
    address: Optional[str] = Field(None, max_length=500)
    referral: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=5000)
    profile_image: str = Field(default="default-customer.jpg", max_length=255)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_field(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class CustomerCreate(CustomerBase):
    """Schema per la creazione di un cliente."""
    pass


class CustomerUpdate(BaseModel):
    """
    Schema per l'aggiornamento di un cliente.

    Tutti i campi sono opzionali per permettere aggiornamenti parziali.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, min_length=5, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    referral: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=5000)
    profile_image: Optional[str] = Field(None, max_length=255)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone_field(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class CustomerRead(CustomerBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime.datetime
    updated_at: datetime.datetime


class CustomerDetail(CustomerRead):
    """Dettaglio cliente con le schede misure, dalla più recente."""
    measurements: list[MeasurementRead] = Field(default_factory=list)


class CustomerList(PaginatedResponse):
    """Schema per la risposta paginata dei clienti."""
    items: list[CustomerRead]
