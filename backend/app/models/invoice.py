"""
Modelli SQLAlchemy per la Fatturazione
Progetto: Tailor Manager (Gestionale Sartoria)

Contiene:
- Invoice: Fattura emessa per un ordine (numero INV-YYMM-NNNN)
- Payment: Pagamento registrato sulla fattura (registro incassi)

amount_paid, balance e status sono campi persistiti ricalcolati dal
registro pagamenti (vedi app.services.invoice_service.reconcile_ledger).
"""

from __future__ import annotations
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base
from app.models.mixins import TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.customer import Customer
    from app.models.order import Order
    from app.models.user import User


class Invoice(Base, UUIDMixin, TimestampMixin):
    """
    Modello per le fatture.

    Ogni fattura è collegata a esattamente un ordine (vincolo unique su
    order_id): il riferimento inverso Order.invoice impedisce una seconda
    fattura per lo stesso ordine.

    Attributes:
        invoice_number: Numero fattura INV-YYMM-NNNN
        customer_id: UUID del cliente (copiato dall'ordine)
        order_id: UUID dell'ordine fatturato
        issue_date: Data di emissione
        due_date: Data di scadenza
        subtotal: Imponibile
        discount: Sconto
        tax: Imposte
        total_amount: subtotal - discount + tax
        amount_paid: Somma dei pagamenti
        balance: total_amount - amount_paid
        status: Unpaid, Partially Paid, Paid, Cancelled
        notes: Note
        created_by_id: UUID dell'utente che ha emesso la fattura
    """

    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(
        String(32),
        unique=True,
        nullable=False,
        doc="Numero fattura INV-YYMM-NNNN",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        doc="UUID del cliente",
    )

    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("orders.id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
        doc="UUID dell'ordine fatturato",
    )

    issue_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Data di emissione",
    )

    due_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Data di scadenza",
    )

    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Imponibile",
    )

    discount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Sconto",
    )

    tax: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Imposte",
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Totale fattura",
    )

    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Totale incassato",
    )

    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Residuo da incassare",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="Unpaid",
        doc="Stato di pagamento",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note",
    )

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        doc="UUID dell'utente che ha emesso la fattura",
    )

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------
    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="invoice",
        lazy="joined",
        doc="Ordine fatturato",
    )

    customer: Mapped["Customer"] = relationship(
        "Customer",
        lazy="joined",
        doc="Cliente",
    )

    created_by: Mapped["User"] = relationship(
        "User",
        lazy="joined",
        doc="Utente che ha emesso la fattura",
    )

    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="Payment.created_at",
        lazy="selectin",
        doc="Registro pagamenti",
    )

    __table_args__ = (
        Index("ix_invoices_status", "status"),
        Index("ix_invoices_due_date", "due_date"),
        CheckConstraint(
            "status IN ('Unpaid', 'Partially Paid', 'Paid', 'Cancelled')",
            name="ck_invoices_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number={self.invoice_number}, status={self.status})>"


class Payment(Base, UUIDMixin, TimestampMixin):
    """
    Modello per i pagamenti registrati su una fattura.

    Attributes:
        invoice_id: UUID della fattura
        amount: Importo (> 0)
        method: Cash, Card, Mobile Money, Bank Transfer, Other
        date: Data del pagamento
        transaction_id: Riferimento della transazione
        notes: Note
        recorded_by_id: UUID dell'utente che ha registrato il pagamento
    """

    __tablename__ = "payments"

    invoice_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="UUID della fattura",
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Importo del pagamento",
    )

    method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Metodo di pagamento",
    )

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Data del pagamento",
    )

    transaction_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="Riferimento transazione",
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Note",
    )

    recorded_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        doc="UUID dell'utente che ha registrato il pagamento",
    )

    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="payments",
        doc="Fattura",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount"),
        CheckConstraint(
            "method IN ('Cash', 'Card', 'Mobile Money', 'Bank Transfer', 'Other')",
            name="ck_payments_method",
        ),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, amount={self.amount}, method={self.method})>"
