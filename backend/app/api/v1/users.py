"""
Router per l'amministrazione degli utenti
Progetto: Tailor Manager (Gestionale Sartoria)

Tutti gli endpoint richiedono il ruolo admin.
"""

import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import AdminUser
from app.schemas.user import UserResponse, UserUpdate
from app.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/users",
    tags=["Utenti"],
)


@router.get(
    "/",
    name="utenti_lista",
    summary="Lista utenti",
    response_model=list[UserResponse],
)
async def list_users(
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> list[UserResponse]:
    users = await service.list_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    name="utente_dettaglio",
    summary="Dettaglio utente",
    response_model=UserResponse,
)
async def get_user(
    admin: AdminUser,
    user_id: uuid.UUID = Path(..., description="UUID dell'utente"),
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.get_user_by_id(db, user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    name="utente_aggiorna",
    summary="Aggiorna utente",
    description="Aggiorna nome, email, ruolo, telefono o stato di attivazione.",
    response_model=UserResponse,
)
async def update_user(
    data: UserUpdate,
    admin: AdminUser,
    user_id: uuid.UUID = Path(..., description="UUID dell'utente"),
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    user = await service.update_user(db, user_id, data)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    name="utente_elimina",
    summary="Elimina utente",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_user(
    admin: AdminUser,
    user_id: uuid.UUID = Path(..., description="UUID dell'utente"),
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> None:
    await service.delete_user(db, user_id, admin)
