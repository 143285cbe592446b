"""
Modello SQLAlchemy per l'entità Product
Progetto: Tailor Manager (Gestionale Sartoria)

Catalogo dei capi e servizi offerti dalla sartoria.
"""

from __future__ import annotations
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.category import Category


class Product(Base, UUIDMixin, TimestampMixin):
    """
    Modello per i prodotti del catalogo.

    Il prezzo del prodotto è il prezzo di listino: le voci d'ordine
    lo copiano al momento della creazione se non ne indicano uno.

    Attributes:
        name: Nome del prodotto
        description: Descrizione
        price: Prezzo di listino
        category_id: UUID della categoria
        image: Nome file immagine
        icon: Nome icona
        is_active: Prodotto ordinabile
        measurements: Intervalli ammessi per le misure
            (lista di {name, unit, min_value, max_value})
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Nome del prodotto",
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Descrizione del prodotto",
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Prezzo di listino",
    )

    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID della categoria",
    )

    image: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="default-product.jpg",
        doc="Immagine prodotto",
    )

    icon: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="Nome icona",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        doc="Prodotto attivo a catalogo",
    )

    measurements: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Intervalli delle misure richieste",
    )

    category: Mapped["Category"] = relationship(
        "Category",
        back_populates="products",
        lazy="joined",
        doc="Categoria del prodotto",
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name}, price={self.price})>"
