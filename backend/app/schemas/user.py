"""
Schemas Pydantic per l'entità User
Progetto: Tailor Manager (Gestionale Sartoria)

Schemas per validazione e serializzazione dati utente.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import UserRole


def _lower_email(v: Optional[str]) -> Optional[str]:
    return v.lower() if v else v


class UserCreate(BaseModel):
    """
    Schema per la registrazione di un nuovo utente.

    Attributes:
        name: Nome dell'utente
        email: Email dell'utente (deve essere univoca)
        password: Password in chiaro (min 6 caratteri)
        role: Ruolo dell'utente (default: staff)
        phone: Telefono opzionale
    """

    name: str = Field(..., min_length=1, max_length=100, description="Nome dell'utente")
    email: EmailStr = Field(..., description="Email univoca dell'utente")
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Password in chiaro (min 6 caratteri)",
    )
    role: UserRole = Field(default=UserRole.STAFF, description="Ruolo dell'utente")
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _lower_email(v)


class UserLogin(BaseModel):
    """Schema per il login utente."""

    email: EmailStr = Field(..., description="Email dell'utente")
    password: str = Field(..., description="Password in chiaro")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _lower_email(v)


class UserUpdate(BaseModel):
    """
    Schema per l'aggiornamento di un utente da parte di un admin.

    Tutti i campi sono opzionali per permettere aggiornamenti parziali.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(None, max_length=30)
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return _lower_email(v)


class ProfileUpdate(BaseModel):
    """Schema per l'aggiornamento del proprio profilo."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    profile_image: Optional[str] = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return _lower_email(v)


class PasswordChange(BaseModel):
    """Schema per il cambio password."""

    current_password: str = Field(..., description="Password attuale")
    new_password: str = Field(..., min_length=6, max_length=100, description="Nuova password")


class UserResponse(BaseModel):
    """
    Schema per la risposta contenente dati utente.

    Non espone mai la password hashata.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    profile_image: str
    is_active: bool
    created_at: datetime


__all__ = [
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "ProfileUpdate",
    "PasswordChange",
    "UserResponse",
]
