"""
Schemas Pydantic per gli Ordini
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce gli schemi di validazione e serializzazione per l'API.
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.schemas.common import (
    CustomerSummary,
    MeasurementSummary,
    PaginatedResponse,
    ProductSummary,
    UserSummary,
)


# -------------------------------------------------------------------
# Enum per gli stati
# -------------------------------------------------------------------

class OrderStatus(str, Enum):
    """Enum che definisce i possibili stati di un ordine."""
    NEW = "New"
    IN_PROGRESS = "In Progress"
    PARTIALLY_READY = "Partially Ready"
    READY = "Ready"
    URGENT = "Urgent"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class ItemStatus(str, Enum):
    """Enum che definisce i possibili stati di una voce d'ordine."""
    NEW = "New"
    IN_PROGRESS = "In Progress"
    READY = "Ready"
    URGENT = "Urgent"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Priority(str, Enum):
    """Priorità dell'ordine."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# -------------------------------------------------------------------
# Schemas per OrderItem (voci d'ordine)
# -------------------------------------------------------------------

class OrderItemCreate(BaseModel):
    """
    Schema per una voce d'ordine in input (creazione o sostituzione).

    Attributes:
        product_id: UUID del prodotto
        quantity: Quantità (default 1)
        price: Prezzo unitario; se omesso viene copiato dal prodotto
        measurement_id: Scheda misure del cliente (opzionale)
        notes: Note sulla lavorazione
        deadline: Scadenza della lavorazione
        status: Stato iniziale della voce
    """
    product_id: uuid.UUID
    quantity: int = Field(default=1, ge=1, description="Quantità")
    price: Optional[Decimal] = Field(None, ge=Decimal("0"), description="Prezzo unitario")
    measurement_id: Optional[uuid.UUID] = None
    notes: Optional[str] = Field(None, max_length=2000)
    deadline: datetime.datetime = Field(..., description="Scadenza della lavorazione")
    status: ItemStatus = Field(default=ItemStatus.NEW)


class OrderItemRead(BaseModel):
    """Schema per la lettura di una voce d'ordine."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    position: int
    product_id: uuid.UUID
    product: Optional[ProductSummary] = None
    quantity: int
    price: Decimal
    measurement_id: Optional[uuid.UUID] = None
    measurement: Optional[MeasurementSummary] = None
    notes: Optional[str] = None
    deadline: Optional[datetime.datetime] = None
    status: ItemStatus
    completed_at: Optional[datetime.datetime] = None

    @computed_field
    @property
    def line_total(self) -> Decimal:
        """Totale della riga (price * quantity)."""
        return self.price * self.quantity


class OrderItemStatusUpdate(BaseModel):
    """Schema per il cambio di stato di una singola voce."""
    status: ItemStatus = Field(..., description="Nuovo stato della voce")


# -------------------------------------------------------------------
# Schemas per Order
# -------------------------------------------------------------------

class OrderCreate(BaseModel):
    """
    Schema per la creazione di un ordine.

    La validazione "almeno una voce" avviene nel service layer.
    Se status non è indicato viene derivato dagli stati delle voci.
    """
    customer_id: uuid.UUID
    items: list[OrderItemCreate] = Field(default_factory=list)
    status: Optional[OrderStatus] = None
    due_date: datetime.datetime = Field(..., description="Data di consegna prevista")
    priority: Priority = Field(default=Priority.MEDIUM)
    notes: Optional[str] = Field(None, max_length=5000)
    photos: list[str] = Field(default_factory=list)
    created_by_id: Optional[uuid.UUID] = Field(
        None,
        description="Utente creatore (default: utente autenticato)",
    )


class OrderUpdate(BaseModel):
    """
    Schema per l'aggiornamento di un ordine.

    Tutti i campi sono opzionali. Una lista items non vuota sostituisce
    integralmente le voci esistenti; status è un override esplicito.
    """
    status: Optional[OrderStatus] = None
    due_date: Optional[datetime.datetime] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = Field(None, max_length=5000)
    photos: Optional[list[str]] = None
    items: Optional[list[OrderItemCreate]] = None


class OrderRead(BaseModel):
    """
    Schema per la lettura di un ordine con cliente, voci e fattura.
    """
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    customer_id: uuid.UUID
    customer: Optional[CustomerSummary] = None
    status: OrderStatus
    total_amount: Decimal
    due_date: datetime.datetime
    priority: Priority
    notes: Optional[str] = None
    photos: list[str] = Field(default_factory=list)
    items: list[OrderItemRead] = Field(default_factory=list)
    created_by: Optional[UserSummary] = None
    updated_by: Optional[UserSummary] = None
    invoice_id: Optional[uuid.UUID] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class OrderList(PaginatedResponse):
    """Schema per la risposta paginata degli ordini."""
    items: list[OrderRead]
