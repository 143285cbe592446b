"""
Router FastAPI per gli Ordini
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce gli endpoint API per la gestione degli ordini,
incluse le operazioni CRUD e il cambio di stato delle singole voci.
"""

import datetime
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentUser, get_current_user
from app.schemas.order import (
    OrderCreate,
    OrderItemStatusUpdate,
    OrderList,
    OrderRead,
    OrderStatus,
    OrderUpdate,
    Priority,
)
from app.services.order_service import OrderService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Istanza del service
order_service = OrderService()

# Router con prefix e tag
router = APIRouter(
    prefix="/orders",
    tags=["Ordini"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="ordini_lista",
    summary="Lista ordini",
    description="Recupera la lista paginata degli ordini con eventuali filtri.",
    response_model=OrderList,
    status_code=status.HTTP_200_OK,
)
async def get_orders(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(10, ge=1, le=100, description="Elementi per pagina"),
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Filtro per stato"),
    priority: Optional[Priority] = Query(None, description="Filtro per priorità"),
    customer_id: Optional[uuid.UUID] = Query(None, description="Filtro per cliente"),
    due_from: Optional[datetime.datetime] = Query(None, description="Consegna a partire da"),
    due_to: Optional[datetime.datetime] = Query(None, description="Consegna entro"),
    search: Optional[str] = Query(None, description="Ricerca sul numero ordine"),
    db: AsyncSession = Depends(get_db),
) -> OrderList:
    """
    Recupera la lista paginata degli ordini.

    Returns:
        OrderList: Lista paginata con metadati
    """
    orders, total = await order_service.get_all(
        db=db,
        customer_id=customer_id,
        status_filter=status_filter,
        priority=priority,
        due_from=due_from,
        due_to=due_to,
        search=search,
        page=page,
        per_page=per_page,
    )

    return OrderList(
        items=[OrderRead.model_validate(o) for o in orders],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{order_id}",
    name="ordine_dettaglio",
    summary="Dettaglio ordine",
    description="Recupera un ordine con cliente, voci, prodotti e fattura.",
    response_model=OrderRead,
    status_code=status.HTTP_200_OK,
)
async def get_order(
    order_id: uuid.UUID = Path(..., description="UUID dell'ordine"),
    db: AsyncSession = Depends(get_db),
) -> OrderRead:
    order = await order_service.get_by_id(db, order_id)
    return OrderRead.model_validate(order)


@router.post(
    "/",
    name="ordine_crea",
    summary="Crea ordine",
    description=(
        "Crea un nuovo ordine con almeno una voce. Il numero ordine "
        "(ORD-YYMM-NNNN) e il totale vengono calcolati automaticamente."
    ),
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    data: OrderCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> OrderRead:
    order = await order_service.create(db, data, current_user.id)
    return OrderRead.model_validate(order)


@router.put(
    "/{order_id}",
    name="ordine_aggiorna",
    summary="Aggiorna ordine",
    description=(
        "Aggiorna i dati dell'ordine. Una lista di voci non vuota sostituisce "
        "le voci esistenti e ricalcola il totale."
    ),
    response_model=OrderRead,
    status_code=status.HTTP_200_OK,
)
async def update_order(
    data: OrderUpdate,
    current_user: CurrentUser,
    order_id: uuid.UUID = Path(..., description="UUID dell'ordine"),
    db: AsyncSession = Depends(get_db),
) -> OrderRead:
    order = await order_service.update(db, order_id, data, current_user.id)
    return OrderRead.model_validate(order)


@router.delete(
    "/{order_id}",
    name="ordine_elimina",
    summary="Elimina ordine",
    description="Elimina un ordine non ancora fatturato.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_order(
    order_id: uuid.UUID = Path(..., description="UUID dell'ordine"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await order_service.delete(db, order_id)


@router.put(
    "/{order_id}/items/{item_id}/status",
    name="voce_cambia_stato",
    summary="Cambia stato voce",
    description=(
        "Cambia lo stato di una voce e ricalcola lo stato complessivo "
        "dell'ordine."
    ),
    response_model=OrderRead,
    status_code=status.HTTP_200_OK,
)
async def set_item_status(
    data: OrderItemStatusUpdate,
    order_id: uuid.UUID = Path(..., description="UUID dell'ordine"),
    item_id: uuid.UUID = Path(..., description="UUID della voce"),
    db: AsyncSession = Depends(get_db),
) -> OrderRead:
    order = await order_service.set_item_status(db, order_id, item_id, data.status)
    return OrderRead.model_validate(order)
