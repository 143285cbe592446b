"""
Modelli SQLAlchemy per gli Ordini
Progetto: Tailor Manager (Gestionale Sartoria)

Contiene:
- Order: Ordine del cliente, identificato da un numero ORD-YYMM-NNNN
- OrderItem: Voci dell'ordine (un capo/prodotto con quantità, prezzo e stato)
"""


from __future__ import annotations
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.customer import Customer
    from app.models.invoice import Invoice
    from app.models.measurement import Measurement
    from app.models.product import Product
    from app.models.user import User


# Gli stati sono definiti in app.schemas.order (OrderStatus, ItemStatus, Priority)


class Order(Base, UUIDMixin, TimestampMixin):
    """
    Modello per gli ordini.

    Lo stato dell'ordine è derivato dagli stati delle voci
    (vedi app.services.order_service.derive_order_status), salvo
    modifica esplicita tramite aggiornamento dell'ordine.

    Attributes:
        order_number: Numero ordine ORD-YYMM-NNNN, assegnato alla creazione
        customer_id: UUID del cliente
        status: Stato aggregato dell'ordine
        total_amount: Somma di price * quantity sulle voci
        due_date: Data di consegna prevista
        priority: Priorità (Low, Medium, High)
        notes: Note
        photos: Nomi file delle foto allegate
        created_by_id: UUID dell'utente che ha creato l'ordine
        updated_by_id: UUID dell'ultimo utente che ha modificato l'ordine

    Relationships:
        customer: Cliente
        items: Voci dell'ordine (ordinate per posizione)
        invoice: Fattura associata (al massimo una)
    """

    __tablename__ = "orders"

    order_number: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        doc="Numero ordine ORD-YYMM-NNNN",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID del cliente",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="New",
        doc="Stato dell'ordine",
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Totale dell'ordine",
    )

    due_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Data di consegna prevista",
    )

    priority: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="Medium",
        doc="Priorità dell'ordine",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note",
    )

    photos: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Foto allegate",
    )

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        doc="UUID dell'utente creatore",
    )

    updated_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="UUID dell'ultimo utente che ha modificato l'ordine",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    customer: Mapped["Customer"] = relationship(
        "Customer",
        back_populates="orders",
        lazy="joined",
        doc="Cliente dell'ordine",
    )

    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
        doc="Voci dell'ordine",
    )

    invoice: Mapped[Optional["Invoice"]] = relationship(
        "Invoice",
        back_populates="order",
        uselist=False,  # relazione 1:1
        lazy="selectin",
        doc="Fattura associata all'ordine",
    )

    created_by: Mapped["User"] = relationship(
        "User",
        foreign_keys=[created_by_id],
        lazy="joined",
        doc="Utente creatore",
    )

    updated_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[updated_by_id],
        lazy="joined",
        doc="Ultimo utente che ha modificato l'ordine",
    )

    # ------------------------------------------------------------
    # Indici e Vincoli
    # ------------------------------------------------------------
    __table_args__ = (
        Index("ix_orders_status", "status"),
        Index("ix_orders_due_date", "due_date"),
        CheckConstraint(
            "status IN ('New', 'In Progress', 'Partially Ready', 'Ready', 'Urgent', 'Completed', 'Cancelled')",
            name="ck_orders_status",
        ),
        CheckConstraint(
            "priority IN ('Low', 'Medium', 'High')",
            name="ck_orders_priority",
        ),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_amount"),
    )

    @property
    def invoice_id(self) -> Optional[uuid.UUID]:
        """UUID della fattura associata, se presente."""
        return self.invoice.id if self.invoice is not None else None

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number={self.order_number}, status={self.status})>"


class OrderItem(Base, UUIDMixin, TimestampMixin):
    """
    Modello per le voci d'ordine.

    Appartiene esclusivamente al suo ordine (nessun ciclo di vita autonomo).

    Attributes:
        order_id: UUID dell'ordine padre
        position: Posizione della voce nell'ordine
        product_id: UUID del prodotto
        quantity: Quantità (>= 1)
        price: Prezzo unitario (copiato dal prodotto se non indicato)
        measurement_id: UUID della scheda misure (stesso cliente dell'ordine)
        notes: Note
        deadline: Scadenza della lavorazione
        status: Stato della voce
        completed_at: Data/ora di completamento

    Properties:
        line_total: Totale riga (price * quantity)
    """

    __tablename__ = "order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID dell'ordine padre",
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Posizione della voce nell'ordine",
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
        doc="UUID del prodotto",
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Quantità",
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Prezzo unitario",
    )

    measurement_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("measurements.id", ondelete="SET NULL"),
        nullable=True,
        doc="UUID della scheda misure",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note",
    )

    deadline: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Scadenza della lavorazione",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="New",
        doc="Stato della voce",
    )

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Data/ora di completamento",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="items",
        doc="Ordine padre",
    )

    product: Mapped["Product"] = relationship(
        "Product",
        lazy="joined",
        doc="Prodotto",
    )

    measurement: Mapped[Optional["Measurement"]] = relationship(
        "Measurement",
        lazy="joined",
        doc="Scheda misure",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('New', 'In Progress', 'Ready', 'Urgent', 'Completed', 'Cancelled')",
            name="ck_order_items_status",
        ),
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("price >= 0", name="ck_order_items_price"),
    )

    @hybrid_property
    def line_total(self) -> Decimal:
        """Totale della riga (price * quantity)."""
        return self.price * self.quantity

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, status={self.status})>"
