"""
Schemas Pydantic per l'autenticazione JWT
Progetto: Tailor Manager (Gestionale Sartoria)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """
    Schema per la risposta contenente i token JWT.

    Attributes:
        access_token: Token di accesso JWT
        refresh_token: Token di refresh JWT
        token_type: Tipo di token (default: bearer)
    """

    access_token: str = Field(..., description="Token di accesso JWT")
    refresh_token: str = Field(..., description="Token di refresh JWT")
    token_type: str = Field(default="bearer", description="Tipo di token")


class TokenRefresh(BaseModel):
    """Schema per la richiesta di refresh token."""

    refresh_token: str = Field(..., description="Token di refresh JWT")


class TokenPayload(BaseModel):
    """
    Schema per il payload contenuto nei token JWT.

    Attributes:
        sub: Subject - ID dell'utente come stringa
        role: Ruolo dell'utente
        exp: Expiration - Data/ora di scadenza
        type: Tipo di token ("access" o "refresh")
        jti: Identificativo del refresh token
    """

    sub: str
    role: str
    exp: datetime
    type: str
    jti: Optional[str] = None


__all__ = [
    "TokenResponse",
    "TokenRefresh",
    "TokenPayload",
]
