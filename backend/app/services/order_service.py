"""
Service Layer per gli Ordini
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce la logica di business per la gestione degli ordini:
validazione delle voci, calcolo del totale, numerazione progressiva
e aggregazione degli stati delle voci nello stato dell'ordine.
"""

import datetime
import logging
import uuid
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    BusinessValidationError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
)
from app.models import Customer, Measurement, Order, OrderItem, Product
from app.schemas.order import (
    ItemStatus,
    OrderCreate,
    OrderItemCreate,
    OrderStatus,
    OrderUpdate,
    Priority,
)
from app.services.numbering import ORDER_PREFIX, generate_identifier

# Logger per questo modulo
logger = logging.getLogger(__name__)


def _value(status) -> str:
    return status.value if isinstance(status, Enum) else status


def compute_total_amount(items: Iterable) -> Decimal:
    """
    Calcola il totale dell'ordine: somma di price * quantity.

    Una quantità assente o nulla vale 1.

    Args:
        items: Voci con attributi price e quantity

    Returns:
        Decimal: Totale dell'ordine
    """
    total = Decimal("0")
    for item in items:
        quantity = max(item.quantity or 0, 1)
        total += Decimal(str(item.price or 0)) * quantity
    return total


def derive_order_status(items: Iterable) -> OrderStatus:
    """
    Deriva lo stato dell'ordine dagli stati delle voci.

    Vince la prima regola soddisfatta:
    1. tutte Completed -> Completed
    2. tutte Ready o Completed -> Ready
    3. almeno una Ready o Completed -> Partially Ready
    4. almeno una In Progress -> In Progress
    5. altrimenti -> New

    Urgent e Cancelled non partecipano a nessuna regola.
    """
    statuses = [_value(item.status) for item in items]
    if not statuses:
        return OrderStatus.NEW

    done = (ItemStatus.READY.value, ItemStatus.COMPLETED.value)

    if all(s == ItemStatus.COMPLETED.value for s in statuses):
        return OrderStatus.COMPLETED
    if all(s in done for s in statuses):
        return OrderStatus.READY
    if any(s in done for s in statuses):
        return OrderStatus.PARTIALLY_READY
    if any(s == ItemStatus.IN_PROGRESS.value for s in statuses):
        return OrderStatus.IN_PROGRESS
    return OrderStatus.NEW


class OrderService:
    """
    Service per la gestione delle operazioni CRUD sugli ordini.

    Fornisce metodi asincroni per interagire con il database
    in modo centralizzato, senza dipendenze da FastAPI.
    """

    async def get_all(
        self,
        db: AsyncSession,
        customer_id: Optional[uuid.UUID] = None,
        status_filter: Optional[OrderStatus] = None,
        priority: Optional[Priority] = None,
        due_from: Optional[datetime.datetime] = None,
        due_to: Optional[datetime.datetime] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[Order], int]:
        """
        Recupera la lista paginata degli ordini.

        Args:
            db: Sessione database
            customer_id: Filtro opzionale per cliente
            status_filter: Filtro opzionale per stato
            priority: Filtro opzionale per priorità
            due_from: Consegna a partire da
            due_to: Consegna entro
            search: Ricerca sul numero ordine
            page: Numero pagina (default 1)
            per_page: Elementi per pagina (default 10)

        Returns:
            Tuple di (lista ordini, totale count)
        """
        conditions = []

        if customer_id:
            conditions.append(Order.customer_id == customer_id)
        if status_filter:
            conditions.append(Order.status == _value(status_filter))
        if priority:
            conditions.append(Order.priority == _value(priority))
        if due_from:
            conditions.append(Order.due_date >= due_from)
        if due_to:
            conditions.append(Order.due_date <= due_to)
        if search:
            conditions.append(Order.order_number.ilike(f"%{search}%"))

        query = select(Order)
        if conditions:
            query = query.where(and_(*conditions))

        offset = (page - 1) * per_page
        query = query.order_by(Order.created_at.desc()).offset(offset).limit(per_page)

        result = await db.execute(query)
        orders = list(result.scalars().all())

        count_query = select(func.count()).select_from(Order)
        if conditions:
            count_query = count_query.where(and_(*conditions))
        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperati %d ordini su %d totali", len(orders), total)
        return orders, total

    async def get_by_id(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        for_update: bool = False,
    ) -> Order:
        """
        Recupera un ordine tramite ID con cliente, voci e fattura.

        Args:
            db: Sessione database
            order_id: UUID dell'ordine
            for_update: Se True blocca la riga dell'ordine (SELECT ... FOR UPDATE)

        Raises:
            NotFoundError: Se l'ordine non esiste
        """
        # populate_existing ricarica voci e prodotti anche dopo un flush
        query = select(Order).where(Order.id == order_id).execution_options(
            populate_existing=True
        )
        if for_update:
            query = query.with_for_update(of=Order)

        result = await db.execute(query)
        order = result.scalar_one_or_none()

        if not order:
            logger.warning("Ordine non trovato: %s", order_id)
            raise NotFoundError(f"Ordine con ID {order_id} non trovato")

        logger.debug("Recuperato ordine: %s", order_id)
        return order

    async def _validate_item(
        self,
        db: AsyncSession,
        item_data: OrderItemCreate,
        customer_id: uuid.UUID,
        position: int,
    ) -> OrderItem:
        """
        Valida una voce d'ordine e costruisce il modello.

        Il prezzo, se omesso, è copiato dal prezzo corrente del prodotto.

        Raises:
            NotFoundError: Prodotto o scheda misure inesistenti
            InvalidReferenceError: Scheda misure di un altro cliente
        """
        product_result = await db.execute(
            select(Product).where(Product.id == item_data.product_id)
        )
        product = product_result.scalar_one_or_none()
        if not product:
            logger.warning("Prodotto non trovato: %s", item_data.product_id)
            raise NotFoundError(f"Prodotto con ID {item_data.product_id} non trovato")

        if item_data.measurement_id:
            measurement_result = await db.execute(
                select(Measurement).where(Measurement.id == item_data.measurement_id)
            )
            measurement = measurement_result.scalar_one_or_none()
            if not measurement:
                logger.warning("Scheda misure non trovata: %s", item_data.measurement_id)
                raise NotFoundError(
                    f"Scheda misure con ID {item_data.measurement_id} non trovata"
                )
            if measurement.customer_id != customer_id:
                logger.warning(
                    "Scheda misure %s non appartiene al cliente %s",
                    item_data.measurement_id,
                    customer_id,
                )
                raise InvalidReferenceError("La scheda misure non appartiene al cliente")

        price = item_data.price if item_data.price is not None else product.price

        return OrderItem(
            position=position,
            product_id=item_data.product_id,
            quantity=item_data.quantity,
            price=price,
            measurement_id=item_data.measurement_id,
            notes=item_data.notes,
            deadline=item_data.deadline,
            status=_value(item_data.status),
        )

    async def _build_items(
        self,
        db: AsyncSession,
        items_data: list[OrderItemCreate],
        customer_id: uuid.UUID,
    ) -> list[OrderItem]:
        items = []
        for position, item_data in enumerate(items_data):
            items.append(await self._validate_item(db, item_data, customer_id, position))
        return items

    async def _flush(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            logger.error("Errore di integrità sul salvataggio dell'ordine: %s", e)
            raise ConflictError("Conflitto nel salvataggio dell'ordine, riprovare")

    async def create(
        self,
        db: AsyncSession,
        data: OrderCreate,
        user_id: uuid.UUID,
        now: Optional[datetime.datetime] = None,
    ) -> Order:
        """
        Crea un nuovo ordine.

        Args:
            db: Sessione database
            data: Dati per la creazione dell'ordine
            user_id: Utente autenticato
            now: Istante corrente (default: ora UTC)

        Returns:
            Order: L'ordine creato

        Raises:
            NotFoundError: Cliente, prodotto o scheda misure inesistenti
            BusinessValidationError: Ordine senza voci
            InvalidReferenceError: Scheda misure di un altro cliente
            ConflictError: Numero ordine già assegnato (vincolo univoco)
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)

        customer_result = await db.execute(
            select(Customer).where(Customer.id == data.customer_id)
        )
        if not customer_result.scalar_one_or_none():
            logger.warning("Cliente non trovato: %s", data.customer_id)
            raise NotFoundError(f"Cliente con ID {data.customer_id} non trovato")

        if not data.items:
            raise BusinessValidationError("L'ordine deve contenere almeno una voce")

        items = await self._build_items(db, data.items, data.customer_id)

        status = _value(data.status) if data.status else derive_order_status(items).value
        order_number = await generate_identifier(
            db, Order, Order.order_number, ORDER_PREFIX, now
        )

        order = Order(
            order_number=order_number,
            customer_id=data.customer_id,
            items=items,
            status=status,
            total_amount=compute_total_amount(items),
            due_date=data.due_date,
            priority=_value(data.priority),
            notes=data.notes,
            photos=list(data.photos),
            created_by_id=data.created_by_id or user_id,
            updated_by_id=user_id,
        )

        db.add(order)
        await self._flush(db)

        logger.info("Creato ordine %s (%s)", order.order_number, order.id)
        return await self.get_by_id(db, order.id)

    async def update(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        data: OrderUpdate,
        user_id: uuid.UUID,
    ) -> Order:
        """
        Aggiorna un ordine esistente.

        Una lista items non vuota sostituisce integralmente le voci e
        ricalcola il totale. Lo status, se indicato, è un override esplicito
        e non viene ricalcolato dalle voci.

        Raises:
            NotFoundError: Ordine, prodotto o scheda misure inesistenti
            InvalidReferenceError: Scheda misure di un altro cliente
        """
        order = await self.get_by_id(db, order_id, for_update=True)

        update_data = data.model_dump(exclude_unset=True, exclude={"items"})

        if data.items:
            new_items = await self._build_items(db, data.items, order.customer_id)
            order.items = new_items
            order.total_amount = compute_total_amount(new_items)

        for field, value in update_data.items():
            if value is None and field != "notes":
                continue
            setattr(order, field, _value(value))

        order.updated_by_id = user_id

        await self._flush(db)

        logger.info("Aggiornato ordine: %s", order_id)
        return await self.get_by_id(db, order_id)

    async def delete(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
    ) -> None:
        """
        Elimina un ordine e le sue voci.

        Raises:
            NotFoundError: Se l'ordine non esiste
            ConflictError: Se l'ordine è già stato fatturato
        """
        order = await self.get_by_id(db, order_id)

        if order.invoice is not None:
            logger.warning(
                "Impossibile eliminare ordine %s: fattura %s presente",
                order_id,
                order.invoice.invoice_number,
            )
            raise ConflictError("Impossibile eliminare un ordine con fattura emessa")

        await db.delete(order)
        await db.flush()

        logger.info("Eliminato ordine: %s", order_id)

    async def set_item_status(
        self,
        db: AsyncSession,
        order_id: uuid.UUID,
        item_id: uuid.UUID,
        new_status: ItemStatus,
        now: Optional[datetime.datetime] = None,
    ) -> Order:
        """
        Cambia lo stato di una voce e ricalcola lo stato dell'ordine.

        Se la voce non ha scadenza viene impostata alla consegna dell'ordine
        o, in mancanza, a now + default_item_deadline_days. completed_at viene
        valorizzato nel passaggio a Completed e azzerato quando la voce
        torna a un altro stato.

        Args:
            db: Sessione database
            order_id: UUID dell'ordine
            item_id: UUID della voce
            new_status: Nuovo stato della voce
            now: Istante corrente (default: ora UTC)

        Raises:
            NotFoundError: Ordine o voce inesistenti
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)
        order = await self.get_by_id(db, order_id, for_update=True)

        item = next((i for i in order.items if i.id == item_id), None)
        if item is None:
            logger.warning("Voce %s non trovata nell'ordine %s", item_id, order_id)
            raise NotFoundError(f"Voce {item_id} non trovata nell'ordine {order_id}")

        if item.deadline is None:
            item.deadline = order.due_date or (
                now + datetime.timedelta(days=settings.default_item_deadline_days)
            )

        old_status = item.status
        new_value = _value(new_status)
        if new_value == ItemStatus.COMPLETED.value:
            if old_status != ItemStatus.COMPLETED.value:
                item.completed_at = now
        else:
            item.completed_at = None
        item.status = new_value

        order.status = derive_order_status(order.items).value

        await self._flush(db)

        logger.info(
            "Voce %s dell'ordine %s: %s -> %s (ordine: %s)",
            item_id,
            order_id,
            old_status,
            new_value,
            order.status,
        )
        return order
