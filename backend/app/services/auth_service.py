"""
Servizio per l'autenticazione e la gestione utenti
Progetto: Tailor Manager (Gestionale Sartoria)

Business logic per registrazione, login, refresh token, profilo
e amministrazione degli utenti.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    BusinessValidationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User, UserRole
from app.schemas.token import TokenResponse
from app.schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserLogin, UserUpdate

logger = logging.getLogger(__name__)


def _invalid_credentials(detail: str = "Email o password non corretti") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _issue_tokens(user: User) -> TokenResponse:
    # Un solo refresh token valido per utente: il precedente viene revocato
    user.refresh_token_id = uuid4().hex
    return TokenResponse(
        access_token=create_access_token(str(user.id), user.role),
        refresh_token=create_refresh_token(str(user.id), user.role, user.refresh_token_id),
        token_type="bearer",
    )


class AuthService:
    """Servizio per la gestione dell'autenticazione e degli utenti."""

    async def register(
        self,
        db: AsyncSession,
        data: UserCreate,
        current_user: Optional[User] = None,
    ) -> User:
        """
        Registra un nuovo utente nel sistema.

        Il primo utente registrato diventa admin; successivamente solo
        un admin può registrare nuovi utenti.

        Args:
            db: Sessione database
            data: Dati per la creazione dell'utente
            current_user: Utente autenticato che effettua la registrazione

        Returns:
            L'utente creato

        Raises:
            DuplicateError: Se l'email è già registrata
            AuthorizationError: Se il sistema ha già utenti e il chiamante non è admin
        """
        count_result = await db.execute(select(func.count(User.id)))
        user_count = count_result.scalar() or 0

        role = data.role
        if user_count == 0:
            # Il primo utente è sempre admin
            role = UserRole.ADMIN
        elif current_user is None or current_user.role != UserRole.ADMIN.value:
            raise AuthorizationError("Solo un amministratore può registrare nuovi utenti")

        result = await db.execute(select(User).where(User.email == data.email))
        if result.scalar_one_or_none():
            raise DuplicateError(f"L'email {data.email} è già registrata")

        user = User(
            name=data.name,
            email=data.email,
            hashed_password=hash_password(data.password),
            phone=data.phone,
            role=role.value if isinstance(role, UserRole) else role,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info("Registrato utente %s (%s)", user.email, user.role)
        return user

    async def login(self, db: AsyncSession, data: UserLogin) -> TokenResponse:
        """
        Autentica un utente e restituisce i token JWT.

        Raises:
            HTTPException 401: Se le credenziali sono invalide o l'utente è disattivato
        """
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Login fallito per %s", data.email)
            raise _invalid_credentials()

        if not user.is_active:
            raise _invalid_credentials("Utente disattivato")

        tokens = _issue_tokens(user)
        await db.flush()

        logger.info("Login effettuato: %s", user.email)
        return tokens

    async def refresh(self, db: AsyncSession, refresh_token: str) -> TokenResponse:
        """
        Aggiorna i token JWT usando un refresh token.

        Il token deve coincidere con l'ultimo emesso per l'utente: dopo
        logout, cambio password o un refresh successivo non è più valido.

        Raises:
            HTTPException 401: Se il refresh token è invalido o revocato
        """
        token_data = decode_token(refresh_token)

        if token_data.type != REFRESH_TOKEN_TYPE:
            raise _invalid_credentials("Token di accesso non valido per il refresh")

        try:
            user_id = UUID(token_data.sub)
        except ValueError:
            raise _invalid_credentials("ID utente invalido nel token")

        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise _invalid_credentials("Utente non trovato")
        if not user.is_active:
            raise _invalid_credentials("Utente disattivato")
        if not token_data.jti or token_data.jti != user.refresh_token_id:
            logger.warning("Refresh token revocato per utente %s", user.id)
            raise _invalid_credentials("Refresh token revocato")

        tokens = _issue_tokens(user)
        await db.flush()
        return tokens

    async def logout(self, db: AsyncSession, user: User) -> None:
        """Revoca il refresh token dell'utente."""
        user.refresh_token_id = None
        await db.flush()

        logger.info("Logout effettuato: %s", user.email)

    async def get_user_by_id(self, db: AsyncSession, user_id: UUID) -> User:
        """
        Ottiene un utente per ID.

        Raises:
            NotFoundError: Se l'utente non esiste
        """
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundError(f"Utente con ID {user_id} non trovato")

        return user

    async def _check_email_free(
        self, db: AsyncSession, email: str, exclude_id: UUID
    ) -> None:
        result = await db.execute(
            select(User).where(User.email == email, User.id != exclude_id)
        )
        if result.scalar_one_or_none():
            raise DuplicateError(f"L'email {email} è già registrata")

    async def update_profile(
        self, db: AsyncSession, user: User, data: ProfileUpdate
    ) -> User:
        """Aggiorna il profilo dell'utente autenticato."""
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("email") and update_data["email"] != user.email:
            await self._check_email_free(db, update_data["email"], user.id)

        for field, value in update_data.items():
            if value is None and field != "phone":
                continue
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)

        logger.info("Aggiornato profilo utente %s", user.id)
        return user

    async def change_password(
        self, db: AsyncSession, user: User, data: PasswordChange
    ) -> None:
        """
        Cambia la password dell'utente autenticato.

        Raises:
            BusinessValidationError: Se la password attuale non è corretta
        """
        if not verify_password(data.current_password, user.hashed_password):
            logger.warning("Cambio password fallito per utente %s", user.id)
            raise BusinessValidationError("La password attuale non è corretta")

        user.hashed_password = hash_password(data.new_password)
        user.refresh_token_id = None
        await db.flush()

        logger.info("Password aggiornata per utente %s", user.id)

    # ----------------------------------------------------------------
    # Amministrazione utenti
    # ----------------------------------------------------------------

    async def list_users(self, db: AsyncSession) -> list[User]:
        result = await db.execute(select(User).order_by(User.name))
        return list(result.scalars().all())

    async def update_user(
        self, db: AsyncSession, user_id: UUID, data: UserUpdate
    ) -> User:
        """Aggiornamento di un utente da parte di un admin."""
        user = await self.get_user_by_id(db, user_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("email") and update_data["email"] != user.email:
            await self._check_email_free(db, update_data["email"], user.id)

        for field, value in update_data.items():
            if value is None and field != "phone":
                continue
            if isinstance(value, UserRole):
                value = value.value
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)

        logger.info("Aggiornato utente %s", user_id)
        return user

    async def delete_user(
        self, db: AsyncSession, user_id: UUID, current_user: User
    ) -> None:
        """
        Elimina un utente.

        Raises:
            NotFoundError: Se l'utente non esiste
            BusinessValidationError: Se l'admin tenta di eliminare sé stesso
        """
        if user_id == current_user.id:
            raise BusinessValidationError("Non è possibile eliminare il proprio utente")

        user = await self.get_user_by_id(db, user_id)
        await db.delete(user)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.error("Errore IntegrityError eliminazione utente: %s", e.orig)
            raise ConflictError(
                "Impossibile eliminare l'utente: ha ordini o fatture collegati. Disattivarlo."
            )

        logger.info("Eliminato utente %s", user_id)


def get_auth_service() -> AuthService:
    """
    Factory per ottenere un'istanza del servizio di autenticazione.

    Returns:
        Istanza di AuthService
    """
    return AuthService()


# Export
__all__ = [
    "AuthService",
    "get_auth_service",
]
