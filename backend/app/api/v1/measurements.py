"""
Router FastAPI per le Schede Misure
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import CurrentUser, get_current_user
from app.schemas.measurement import (
    MeasurementCreate,
    MeasurementList,
    MeasurementRead,
    MeasurementUpdate,
)
from app.services.measurement_service import MeasurementService

measurement_service = MeasurementService()

router = APIRouter(
    prefix="/measurements",
    tags=["Misure"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="misure_lista",
    summary="Lista schede misure",
    response_model=MeasurementList,
)
async def get_measurements(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(10, ge=1, le=100, description="Elementi per pagina"),
    customer_id: Optional[uuid.UUID] = Query(None, description="Filtro per cliente"),
    category_id: Optional[uuid.UUID] = Query(None, description="Filtro per categoria"),
    db: AsyncSession = Depends(get_db),
) -> MeasurementList:
    measurements, total = await measurement_service.get_all(
        db,
        customer_id=customer_id,
        category_id=category_id,
        page=page,
        per_page=per_page,
    )
    return MeasurementList(
        items=[MeasurementRead.model_validate(m) for m in measurements],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{measurement_id}",
    name="misura_dettaglio",
    summary="Dettaglio scheda misure",
    response_model=MeasurementRead,
)
async def get_measurement(
    measurement_id: uuid.UUID = Path(..., description="UUID della scheda misure"),
    db: AsyncSession = Depends(get_db),
) -> MeasurementRead:
    measurement = await measurement_service.get_by_id(db, measurement_id)
    return MeasurementRead.model_validate(measurement)


@router.post(
    "/",
    name="misura_crea",
    summary="Registra scheda misure",
    response_model=MeasurementRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_measurement(
    data: MeasurementCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MeasurementRead:
    measurement = await measurement_service.create(db, data, current_user.id)
    return MeasurementRead.model_validate(measurement)


@router.put(
    "/{measurement_id}",
    name="misura_aggiorna",
    summary="Aggiorna scheda misure",
    response_model=MeasurementRead,
)
async def update_measurement(
    data: MeasurementUpdate,
    current_user: CurrentUser,
    measurement_id: uuid.UUID = Path(..., description="UUID della scheda misure"),
    db: AsyncSession = Depends(get_db),
) -> MeasurementRead:
    measurement = await measurement_service.update(db, measurement_id, data, current_user.id)
    return MeasurementRead.model_validate(measurement)


@router.delete(
    "/{measurement_id}",
    name="misura_elimina",
    summary="Elimina scheda misure",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_measurement(
    measurement_id: uuid.UUID = Path(..., description="UUID della scheda misure"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await measurement_service.delete(db, measurement_id)
