"""
Router FastAPI per l'entità Customer
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce gli endpoint API per le operazioni CRUD sui clienti.
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user
from app.schemas.customer import (
    CustomerCreate,
    CustomerDetail,
    CustomerList,
    CustomerRead,
    CustomerUpdate,
)
from app.schemas.measurement import MeasurementRead
from app.schemas.order import OrderRead
from app.services.customer_service import CustomerService

# Logger per questo modulo
logger = logging.getLogger(__name__)


def get_customer_service() -> CustomerService:
    """Dependency injection per CustomerService."""
    return CustomerService()


router = APIRouter(
    prefix="/customers",
    tags=["Clienti"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="clienti_lista",
    summary="Lista clienti",
    description="Recupera la lista paginata dei clienti con ricerca su nome, telefono ed email.",
    response_model=CustomerList,
)
async def get_customers(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(10, ge=1, le=100, description="Elementi per pagina"),
    search: Optional[str] = Query(None, description="Termine di ricerca"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerList:
    customers, total = await service.get_all(db, page=page, per_page=per_page, search=search)
    return CustomerList(
        items=[CustomerRead.model_validate(c) for c in customers],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{customer_id}",
    name="cliente_dettaglio",
    summary="Dettaglio cliente",
    description="Recupera un cliente con le sue schede misure.",
    response_model=CustomerDetail,
)
async def get_customer(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetail:
    customer = await service.get_by_id(db, customer_id)
    return CustomerDetail.model_validate(customer)


@router.post(
    "/",
    name="cliente_crea",
    summary="Crea cliente",
    description="Crea un nuovo cliente. Il telefono deve essere univoco.",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    customer = await service.create(db, data)
    return CustomerRead.model_validate(customer)


@router.put(
    "/{customer_id}",
    name="cliente_aggiorna",
    summary="Aggiorna cliente",
    response_model=CustomerRead,
)
async def update_customer(
    data: CustomerUpdate,
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> CustomerRead:
    customer = await service.update(db, customer_id, data)
    return CustomerRead.model_validate(customer)


@router.delete(
    "/{customer_id}",
    name="cliente_elimina",
    summary="Elimina cliente",
    description="Elimina un cliente senza ordini, insieme alle sue schede misure.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_customer(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> None:
    await service.delete(db, customer_id)


@router.get(
    "/{customer_id}/orders",
    name="cliente_ordini",
    summary="Ordini del cliente",
    response_model=list[OrderRead],
)
async def get_customer_orders(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> list[OrderRead]:
    orders = await service.get_orders(db, customer_id)
    return [OrderRead.model_validate(o) for o in orders]


@router.get(
    "/{customer_id}/measurements",
    name="cliente_misure",
    summary="Schede misure del cliente",
    response_model=list[MeasurementRead],
)
async def get_customer_measurements(
    customer_id: uuid.UUID = Path(..., description="UUID del cliente"),
    db: AsyncSession = Depends(get_db),
    service: CustomerService = Depends(get_customer_service),
) -> list[MeasurementRead]:
    measurements = await service.get_measurements(db, customer_id)
    return [MeasurementRead.model_validate(m) for m in measurements]
