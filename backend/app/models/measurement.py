"""
Modello SQLAlchemy per l'entità Measurement
Progetto: Tailor Manager (Gestionale Sartoria)

Schede misure dei clienti. Le misure sono una mappa dinamica
etichetta → valore (entrambi stringhe) senza campi fissi: le etichette
dipendono dalla categoria del capo.
"""

from __future__ import annotations
import uuid
from typing import TYPE_CHECKING, Dict, Optional

from sqlalchemy import JSON, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.category import Category
    from app.models.customer import Customer
    from app.models.user import User


class Measurement(Base, UUIDMixin, TimestampMixin):
    """
    Modello per le schede misure.

    Attributes:
        customer_id: UUID del cliente a cui appartengono le misure
        category_id: UUID della categoria di capo
        measurements: Mappa ordinata etichetta → valore (colonna JSON,
            l'ordine delle chiavi è preservato)
        notes: Note del sarto
        measured_by_id: UUID dell'utente che ha rilevato le misure
    """

    __tablename__ = "measurements"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID del cliente",
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID della categoria",
    )

    measurements: Mapped[Dict[str, str]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Misure etichetta → valore",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note",
    )

    measured_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="UUID dell'utente che ha rilevato le misure",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    customer: Mapped["Customer"] = relationship(
        "Customer",
        back_populates="measurements",
        lazy="joined",
        doc="Cliente",
    )

    category: Mapped["Category"] = relationship(
        "Category",
        lazy="joined",
        doc="Categoria di capo",
    )

    measured_by: Mapped[Optional["User"]] = relationship(
        "User",
        lazy="joined",
        doc="Utente che ha rilevato le misure",
    )

    def __repr__(self) -> str:
        return f"<Measurement(id={self.id}, customer_id={self.customer_id}, category_id={self.category_id})>"
