"""
Router FastAPI per Fatture e Pagamenti
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import datetime
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentUser, get_current_user
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceList,
    InvoiceRead,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
)
from app.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

invoice_service = InvoiceService()

router = APIRouter(
    prefix="/invoices",
    tags=["Fatture"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="fatture_lista",
    summary="Lista fatture",
    description="Recupera la lista paginata delle fatture con eventuali filtri.",
    response_model=InvoiceList,
)
async def get_invoices(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(10, ge=1, le=100, description="Elementi per pagina"),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status", description="Filtro per stato"),
    customer_id: Optional[uuid.UUID] = Query(None, description="Filtro per cliente"),
    due_from: Optional[datetime.datetime] = Query(None, description="Scadenza a partire da"),
    due_to: Optional[datetime.datetime] = Query(None, description="Scadenza entro"),
    search: Optional[str] = Query(None, description="Ricerca sul numero fattura"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceList:
    invoices, total = await invoice_service.get_all(
        db=db,
        customer_id=customer_id,
        status_filter=status_filter,
        due_from=due_from,
        due_to=due_to,
        search=search,
        page=page,
        per_page=per_page,
    )
    return InvoiceList(
        items=[InvoiceRead.model_validate(i) for i in invoices],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{invoice_id}",
    name="fattura_dettaglio",
    summary="Dettaglio fattura",
    response_model=InvoiceRead,
)
async def get_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.get_by_id(db, invoice_id)
    return InvoiceRead.model_validate(invoice)


@router.post(
    "/",
    name="fattura_crea",
    summary="Emetti fattura",
    description=(
        "Emette la fattura di un ordine non ancora fatturato. "
        "Il numero fattura (INV-YYMM-NNNN) viene assegnato automaticamente."
    ),
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    data: InvoiceCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.create(db, data, current_user.id)
    return InvoiceRead.model_validate(invoice)


@router.put(
    "/{invoice_id}",
    name="fattura_aggiorna",
    summary="Aggiorna fattura",
    description="Aggiorna scadenza, note e importi. Incassi e stato non sono modificabili.",
    response_model=InvoiceRead,
)
async def update_invoice(
    data: InvoiceUpdate,
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.update(db, invoice_id, data)
    return InvoiceRead.model_validate(invoice)


@router.delete(
    "/{invoice_id}",
    name="fattura_elimina",
    summary="Elimina fattura",
    description="Elimina una fattura senza pagamenti registrati.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await invoice_service.delete(db, invoice_id)


@router.post(
    "/{invoice_id}/cancel",
    name="fattura_annulla",
    summary="Annulla fattura",
    response_model=InvoiceRead,
)
async def cancel_invoice(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.cancel(db, invoice_id)
    return InvoiceRead.model_validate(invoice)


# -------------------------------------------------------------------
# Pagamenti
# -------------------------------------------------------------------

@router.post(
    "/{invoice_id}/payments",
    name="pagamento_registra",
    summary="Registra pagamento",
    description="Registra un pagamento e ricalcola incassato, residuo e stato.",
    response_model=InvoiceRead,
)
async def add_payment(
    data: PaymentCreate,
    current_user: CurrentUser,
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.add_payment(db, invoice_id, data, current_user.id)
    return InvoiceRead.model_validate(invoice)


@router.delete(
    "/{invoice_id}/payments/{payment_id}",
    name="pagamento_rimuovi",
    summary="Rimuovi pagamento",
    response_model=InvoiceRead,
)
async def remove_payment(
    invoice_id: uuid.UUID = Path(..., description="UUID della fattura"),
    payment_id: uuid.UUID = Path(..., description="UUID del pagamento"),
    db: AsyncSession = Depends(get_db),
) -> InvoiceRead:
    invoice = await invoice_service.remove_payment(db, invoice_id, payment_id)
    return InvoiceRead.model_validate(invoice)
