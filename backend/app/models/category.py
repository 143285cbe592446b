"""
Modello SQLAlchemy per l'entità Category
Progetto: Tailor Manager (Gestionale Sartoria)

Categorie di capi (camicie, abiti, ...) con l'elenco delle misure richieste.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.product import Product


DEFAULT_GRADIENT_COLORS = ["#FF5722", "#F44336"]


class Category(Base, UUIDMixin, TimestampMixin):
    """
    Modello per le categorie di prodotto.

    Attributes:
        title: Titolo univoco della categoria
        icon: Nome icona per il frontend
        gradient_colors: Colori del gradiente della card
        required_measurements: Etichette delle misure da rilevare
    """

    __tablename__ = "categories"

    title: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        doc="Titolo univoco della categoria",
    )

    icon: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="category",
        doc="Nome icona",
    )

    gradient_colors: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: list(DEFAULT_GRADIENT_COLORS),
        doc="Colori del gradiente",
    )

    required_measurements: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Misure richieste per questa categoria",
    )

    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="category",
        passive_deletes=True,
        lazy="raise",
        doc="Prodotti della categoria",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, title={self.title})>"
