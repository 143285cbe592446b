"""
Service Layer per le Schede Misure
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models import Category, Customer, Measurement
from app.schemas.measurement import MeasurementCreate, MeasurementUpdate

logger = logging.getLogger(__name__)


class MeasurementService:
    """
    Service per le schede misure dei clienti.

    measured_by_id registra sempre l'ultimo utente che ha rilevato le misure.
    """

    async def get_all(
        self,
        db: AsyncSession,
        customer_id: Optional[uuid.UUID] = None,
        category_id: Optional[uuid.UUID] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[Measurement], int]:
        """Recupera la lista paginata delle schede misure."""
        conditions = []
        if customer_id:
            conditions.append(Measurement.customer_id == customer_id)
        if category_id:
            conditions.append(Measurement.category_id == category_id)

        query = select(Measurement)
        count_query = select(func.count()).select_from(Measurement)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        offset = (page - 1) * per_page
        query = query.order_by(Measurement.created_at.desc()).offset(offset).limit(per_page)

        result = await db.execute(query)
        measurements = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperate %d schede misure su %d totali", len(measurements), total)
        return measurements, total

    async def get_by_id(self, db: AsyncSession, measurement_id: uuid.UUID) -> Measurement:
        """
        Recupera una scheda misure tramite ID.

        Raises:
            NotFoundError: Se la scheda non esiste
        """
        # populate_existing ricarica le relazioni anche per oggetti appena salvati
        result = await db.execute(
            select(Measurement)
            .where(Measurement.id == measurement_id)
            .execution_options(populate_existing=True)
        )
        measurement = result.scalar_one_or_none()

        if measurement is None:
            logger.warning("Scheda misure non trovata: %s", measurement_id)
            raise NotFoundError(f"Scheda misure con ID {measurement_id} non trovata")

        return measurement

    async def create(
        self,
        db: AsyncSession,
        data: MeasurementCreate,
        user_id: uuid.UUID,
    ) -> Measurement:
        """
        Registra una nuova scheda misure.

        Raises:
            NotFoundError: Se cliente o categoria non esistono
        """
        customer_result = await db.execute(
            select(Customer.id).where(Customer.id == data.customer_id)
        )
        if customer_result.scalar_one_or_none() is None:
            logger.warning("Cliente non trovato: %s", data.customer_id)
            raise NotFoundError(f"Cliente con ID {data.customer_id} non trovato")

        category_result = await db.execute(
            select(Category.id).where(Category.id == data.category_id)
        )
        if category_result.scalar_one_or_none() is None:
            logger.warning("Categoria non trovata: %s", data.category_id)
            raise NotFoundError(f"Categoria con ID {data.category_id} non trovata")

        measurement = Measurement(
            customer_id=data.customer_id,
            category_id=data.category_id,
            measurements=dict(data.measurements),
            notes=data.notes,
            measured_by_id=user_id,
        )
        db.add(measurement)
        await db.flush()

        logger.info(
            "Creata scheda misure %s per cliente %s", measurement.id, data.customer_id
        )
        return await self.get_by_id(db, measurement.id)

    async def update(
        self,
        db: AsyncSession,
        measurement_id: uuid.UUID,
        data: MeasurementUpdate,
        user_id: uuid.UUID,
    ) -> Measurement:
        """Aggiorna misure e note della scheda."""
        measurement = await self.get_by_id(db, measurement_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("measurements") is not None:
            measurement.measurements = dict(update_data["measurements"])
        if "notes" in update_data:
            measurement.notes = update_data["notes"]
        measurement.measured_by_id = user_id

        await db.flush()

        logger.info("Aggiornata scheda misure: %s", measurement_id)
        return await self.get_by_id(db, measurement_id)

    async def delete(self, db: AsyncSession, measurement_id: uuid.UUID) -> None:
        measurement = await self.get_by_id(db, measurement_id)

        await db.delete(measurement)
        await db.flush()

        logger.info("Eliminata scheda misure: %s", measurement_id)
