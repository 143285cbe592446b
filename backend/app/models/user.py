"""
Modello SQLAlchemy per l'entità User
Progetto: Tailor Manager (Gestionale Sartoria)

Modello per l'autenticazione e gestione utenti del sistema.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin


class UserRole(str, Enum):
    """Ruoli utente nel sistema."""
    ADMIN = "admin"
    TAILOR = "tailor"
    STAFF = "staff"


class User(Base, UUIDMixin, TimestampMixin):
    """
    Modello per gli utenti del sistema.

    Gli utenti registrano ordini, misure e pagamenti; il ruolo admin
    gestisce catalogo e account.

    Attributes:
        id: UUID primary key, generato automaticamente
        name: Nome dell'utente
        email: Email univoca dell'utente (minuscola)
        hashed_password: Password hashata (bcrypt)
        role: Ruolo dell'utente (admin, tailor, staff)
        phone: Telefono
        profile_image: Nome file immagine profilo
        is_active: Indica se l'utente è attivo
        refresh_token_id: Identificativo dell'ultimo refresh token emesso
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Nome dell'utente",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        doc="Email univoca dell'utente",
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Password hashata",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STAFF.value,
        doc="Ruolo dell'utente",
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
        doc="Telefono dell'utente",
    )

    profile_image: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="default-user.jpg",
        doc="Immagine profilo",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Indica se l'utente è attivo",
    )

    refresh_token_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        doc="jti del refresh token valido (None dopo il logout)",
    )

    __table_args__ = (
        Index("ix_users_email", "email"),
        Index("ix_users_role", "role"),
        CheckConstraint(
            "role IN ('admin', 'tailor', 'staff')",
            name="ck_users_role",
        ),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
