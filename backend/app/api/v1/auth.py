"""
Router per l'autenticazione
Progetto: Tailor Manager (Gestionale Sartoria)

Endpoints per registrazione, login, logout, refresh token e profilo utente.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.token import TokenRefresh, TokenResponse
from app.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserLogin, UserResponse
from app.services.auth_service import AuthService, get_auth_service

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registra un nuovo utente",
)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Registra un nuovo utente nel sistema.

    Se NON esistono utenti (primo utente) la registrazione è libera e
    il ruolo viene forzato ad admin. Altrimenti serve un token di un admin.
    """
    return await service.register(db, data, current_user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Effettua il login",
)
async def login(
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """
    Effettua il login e restituisce i token JWT.

    Args:
        data: Credenziali dell'utente

    Returns:
        TokenResponse con access_token e refresh_token
    """
    return await service.login(db, data)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Aggiorna i token",
)
async def refresh(
    data: TokenRefresh,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
):
    """Aggiorna i token JWT usando un refresh token."""
    return await service.refresh(db, data.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Effettua il logout",
)
async def logout(
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
    current_user: User = Depends(get_current_user),
) -> None:
    """Revoca il refresh token: servirà un nuovo login."""
    await service.logout(db, current_user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Ottieni il profilo utente corrente",
)
async def get_me(
    current_user: User = Depends(get_current_user),
):
    """Restituisce i dati dell'utente corrente."""
    return current_user


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Aggiorna il proprio profilo",
)
async def update_me(
    data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
    current_user: User = Depends(get_current_user),
):
    return await service.update_profile(db, current_user, data)


@router.put(
    "/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cambia la propria password",
)
async def change_password(
    data: PasswordChange,
    db: AsyncSession = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
    current_user: User = Depends(get_current_user),
) -> None:
    """Richiede la password attuale per impostarne una nuova."""
    await service.change_password(db, current_user, data)


# Export
__all__ = ["router"]
