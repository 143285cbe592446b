"""
Schemas Pydantic per Fatture e Pagamenti
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import CustomerSummary, PaginatedResponse, UserSummary


class InvoiceStatus(str, Enum):
    """Stati di pagamento della fattura."""
    UNPAID = "Unpaid"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    """Metodi di pagamento accettati."""
    CASH = "Cash"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"
    BANK_TRANSFER = "Bank Transfer"
    OTHER = "Other"


# -------------------------------------------------------------------
# Pagamenti
# -------------------------------------------------------------------

class PaymentCreate(BaseModel):
    """
    Schema per la registrazione di un pagamento.

    amount e method sono opzionali a livello di schema: la loro assenza
    viene segnalata dal service con un errore di validazione di business.
    """
    amount: Optional[Decimal] = Field(None, gt=Decimal("0"), description="Importo")
    method: Optional[PaymentMethod] = Field(None, description="Metodo di pagamento")
    date: Optional[datetime.datetime] = Field(None, description="Data (default: ora)")
    transaction_id: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)


class PaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    amount: Decimal
    method: PaymentMethod
    date: datetime.datetime
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    recorded_by_id: Optional[uuid.UUID] = None
    created_at: datetime.datetime


# -------------------------------------------------------------------
# Fatture
# -------------------------------------------------------------------

class InvoiceCreate(BaseModel):
    """
    Schema per l'emissione di una fattura da un ordine.

    Attributes:
        order_id: Ordine da fatturare (senza fattura)
        due_date: Scadenza (default: data consegna dell'ordine)
        subtotal: Imponibile (default: totale dell'ordine)
        discount: Sconto (default 0)
        tax: Imposte (default 0)
        notes: Note
    """
    order_id: uuid.UUID
    issue_date: Optional[datetime.datetime] = None
    due_date: Optional[datetime.datetime] = None
    subtotal: Optional[Decimal] = Field(None, ge=Decimal("0"))
    discount: Optional[Decimal] = Field(None, ge=Decimal("0"))
    tax: Optional[Decimal] = Field(None, ge=Decimal("0"))
    notes: Optional[str] = Field(None, max_length=5000)


class InvoiceUpdate(BaseModel):
    """
    Schema per l'aggiornamento di una fattura.

    Non consente di modificare importi incassati, residuo o stato.
    """
    due_date: Optional[datetime.datetime] = None
    subtotal: Optional[Decimal] = Field(None, ge=Decimal("0"))
    discount: Optional[Decimal] = Field(None, ge=Decimal("0"))
    tax: Optional[Decimal] = Field(None, ge=Decimal("0"))
    notes: Optional[str] = Field(None, max_length=5000)


class InvoiceOrderSummary(BaseModel):
    """Riepilogo dell'ordine fatturato."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    status: str
    total_amount: Decimal


class InvoiceRead(BaseModel):
    """Schema per la lettura di una fattura con pagamenti."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    invoice_number: str
    order_id: uuid.UUID
    order: Optional[InvoiceOrderSummary] = None
    customer_id: uuid.UUID
    customer: Optional[CustomerSummary] = None
    issue_date: datetime.datetime
    due_date: datetime.datetime
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    balance: Decimal
    status: InvoiceStatus
    notes: Optional[str] = None
    payments: list[PaymentRead] = Field(default_factory=list)
    created_by: Optional[UserSummary] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class InvoiceList(PaginatedResponse):
    """Schema per la risposta paginata delle fatture."""
    items: list[InvoiceRead]
