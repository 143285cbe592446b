"""
Service Layer per l'entità Customer
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce la logica di business per la gestione dei clienti.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, DuplicateError, NotFoundError
from app.models import Customer, Measurement, Order
from app.schemas.customer import CustomerCreate, CustomerUpdate

# Logger per questo modulo
logger = logging.getLogger(__name__)


class CustomerService:
    """
    Service per la gestione delle operazioni CRUD sui clienti.

    Implementa:
    - Validazione Proattiva: controllo duplicati sul telefono prima del create/update
    - Ricerca su nome, telefono ed email
    """

    async def get_all(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
    ) -> tuple[list[Customer], int]:
        """
        Recupera la lista paginata dei clienti.

        Args:
            db: Sessione database
            page: Numero pagina (default 1)
            per_page: Elementi per pagina (default 10)
            search: Termine di ricerca opzionale (nome, telefono, email)

        Returns:
            Tuple di (lista clienti, totale count)
        """
        query = select(Customer)
        count_query = select(func.count()).select_from(Customer)

        if search:
            search_term = f"%{search}%"
            condition = or_(
                Customer.name.ilike(search_term),
                Customer.phone.ilike(search_term),
                Customer.email.ilike(search_term),
            )
            query = query.where(condition)
            count_query = count_query.where(condition)

        offset = (page - 1) * per_page
        query = query.order_by(Customer.created_at.desc()).offset(offset).limit(per_page)

        result = await db.execute(query)
        customers = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperati %d clienti su %d totali", len(customers), total)
        return customers, total

    async def get_by_id(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
    ) -> Customer:
        """
        Recupera un cliente tramite ID, con le sue schede misure.

        Raises:
            NotFoundError: Se il cliente non esiste
        """
        result = await db.execute(
            select(Customer)
            .where(Customer.id == customer_id)
            .options(selectinload(Customer.measurements))
        )
        customer = result.scalar_one_or_none()

        if customer is None:
            logger.warning("Cliente non trovato: %s", customer_id)
            raise NotFoundError(f"Cliente con ID {customer_id} non trovato")

        return customer

    async def create(
        self,
        db: AsyncSession,
        customer_data: CustomerCreate,
    ) -> Customer:
        """
        Crea un nuovo cliente.

        Raises:
            DuplicateError: Se il telefono è già registrato
        """
        existing = await self._check_phone_exists(db, customer_data.phone)
        if existing:
            logger.warning(
                "Tentativo di creare cliente con telefono duplicato: %s (esistente: %s)",
                customer_data.phone, existing.id,
            )
            raise DuplicateError(
                f"Cliente con telefono '{customer_data.phone}' già registrato"
            )

        customer = Customer(**customer_data.model_dump())

        db.add(customer)
        await self._flush(db, "creazione")
        await db.refresh(customer)

        logger.info("Creato nuovo cliente: %s - %s", customer.id, customer.name)
        return customer

    async def update(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
        customer_data: CustomerUpdate,
    ) -> Customer:
        """
        Aggiorna un cliente esistente.

        Raises:
            NotFoundError: Se il cliente non esiste
            DuplicateError: Se il nuovo telefono appartiene a un altro cliente
        """
        customer = await self.get_by_id(db, customer_id)
        update_data = customer_data.model_dump(exclude_unset=True)

        new_phone = update_data.get("phone")
        if new_phone and new_phone != customer.phone:
            existing = await self._check_phone_exists(db, new_phone, exclude_id=customer_id)
            if existing:
                logger.warning(
                    "Telefono %s già usato dal cliente %s", new_phone, existing.id
                )
                raise DuplicateError(f"Cliente con telefono '{new_phone}' già registrato")

        for field, value in update_data.items():
            setattr(customer, field, value)

        await self._flush(db, "aggiornamento")
        await db.refresh(customer)

        logger.info("Aggiornato cliente: %s", customer_id)
        return customer

    async def delete(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
    ) -> None:
        """
        Elimina un cliente e le sue schede misure.

        Raises:
            NotFoundError: Se il cliente non esiste
            ConflictError: Se il cliente ha ordini
        """
        customer = await self.get_by_id(db, customer_id)

        orders_count = await db.execute(
            select(func.count()).select_from(Order).where(Order.customer_id == customer_id)
        )
        count = orders_count.scalar() or 0
        if count:
            logger.warning("Impossibile eliminare cliente %s: %d ordini", customer_id, count)
            raise ConflictError(
                f"Impossibile eliminare il cliente: {count} ordini collegati"
            )

        await db.delete(customer)
        await db.flush()

        logger.info("Eliminato cliente: %s - %s", customer.id, customer.name)

    async def get_orders(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
    ) -> list[Order]:
        """Ordini del cliente, dal più recente."""
        await self.get_by_id(db, customer_id)
        result = await db.execute(
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_measurements(
        self,
        db: AsyncSession,
        customer_id: uuid.UUID,
    ) -> list[Measurement]:
        """Schede misure del cliente, dalla più recente."""
        await self.get_by_id(db, customer_id)
        result = await db.execute(
            select(Measurement)
            .where(Measurement.customer_id == customer_id)
            .order_by(Measurement.created_at.desc())
        )
        return list(result.scalars().all())

    # ----------------------------------------------------------------
    # Metodi privati di supporto
    # ----------------------------------------------------------------

    async def _flush(self, db: AsyncSession, operation: str) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            logger.error("Errore IntegrityError %s cliente: %s", operation, e.orig)
            if "phone" in str(e.orig).lower():
                raise DuplicateError("Telefono già registrato per un altro cliente")
            raise ConflictError(f"Errore durante {operation} del cliente")

    async def _check_phone_exists(
        self,
        db: AsyncSession,
        phone: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[Customer]:
        """
        Verifica se un numero di telefono è già in uso.

        Args:
            db: Sessione database
            phone: Telefono da verificare
            exclude_id: UUID del cliente da escludere (per update)

        Returns:
            Oggetto Customer se trovato, None altrimenti
        """
        query = select(Customer).where(Customer.phone == phone)
        if exclude_id:
            query = query.where(Customer.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().first()
