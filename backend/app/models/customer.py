"""
Modello SQLAlchemy per l'entità Customer
Progetto: Tailor Manager (Gestionale Sartoria)

Anagrafica clienti della sartoria.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.measurement import Measurement
    from app.models.order import Order


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Modello per i clienti.

    Il numero di telefono identifica il cliente: l'unicità viene
    verificata dal service prima di creare o aggiornare il record.

    Attributes:
        name: Nome del cliente
        phone: Telefono (univoco)
        email: Email opzionale, salvata in minuscolo
        address: Indirizzo
        referral: Canale di provenienza (passaparola, social, ...)
        notes: Note libere
        profile_image: Nome file immagine profilo

    Relationships:
        measurements: Schede misure del cliente
        orders: Ordini del cliente
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Nome del cliente",
    )

    phone: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Telefono del cliente",
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Email del cliente",
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        doc="Indirizzo del cliente",
    )

    referral: Mapped[Optional[str]] = mapped_column(
        String(200),
        nullable=True,
        doc="Canale di provenienza",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note libere",
    )

    profile_image: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="default-customer.jpg",
        doc="Immagine profilo",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    measurements: Mapped[List["Measurement"]] = relationship(
        "Measurement",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Measurement.created_at.desc()",
        lazy="raise",
        doc="Schede misure del cliente",
    )

    orders: Mapped[List["Order"]] = relationship(
        "Order",
        back_populates="customer",
        passive_deletes=True,
        lazy="raise",
        doc="Ordini del cliente",
    )

    __table_args__ = (
        Index("ix_customers_phone", "phone"),
        Index("ix_customers_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name}, phone={self.phone})>"
