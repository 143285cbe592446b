"""
Service Layer per le Categorie
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, DuplicateError, NotFoundError
from app.models import Category, Product
from app.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    """Service per la gestione delle categorie di prodotto."""

    async def get_all(self, db: AsyncSession) -> list[Category]:
        """Recupera tutte le categorie ordinate per titolo."""
        result = await db.execute(select(Category).order_by(Category.title))
        return list(result.scalars().all())

    async def get_by_id(self, db: AsyncSession, category_id: uuid.UUID) -> Category:
        """
        Recupera una categoria tramite ID.

        Raises:
            NotFoundError: Se la categoria non esiste
        """
        result = await db.execute(select(Category).where(Category.id == category_id))
        category = result.scalar_one_or_none()

        if category is None:
            logger.warning("Categoria non trovata: %s", category_id)
            raise NotFoundError(f"Categoria con ID {category_id} non trovata")

        return category

    async def create(self, db: AsyncSession, data: CategoryCreate) -> Category:
        """
        Crea una nuova categoria.

        Raises:
            DuplicateError: Se esiste già una categoria con lo stesso titolo
        """
        if await self._get_by_title(db, data.title):
            logger.warning("Categoria duplicata: %s", data.title)
            raise DuplicateError(f"Categoria '{data.title}' già esistente")

        category = Category(**data.model_dump())
        db.add(category)
        await self._flush(db)
        await db.refresh(category)

        logger.info("Creata categoria: %s - %s", category.id, category.title)
        return category

    async def update(
        self,
        db: AsyncSession,
        category_id: uuid.UUID,
        data: CategoryUpdate,
    ) -> Category:
        """
        Aggiorna una categoria.

        Raises:
            NotFoundError: Se la categoria non esiste
            DuplicateError: Se il nuovo titolo è già usato
        """
        category = await self.get_by_id(db, category_id)
        update_data = data.model_dump(exclude_unset=True)

        new_title = update_data.get("title")
        if new_title and new_title != category.title:
            if await self._get_by_title(db, new_title, exclude_id=category_id):
                logger.warning("Categoria duplicata: %s", new_title)
                raise DuplicateError(f"Categoria '{new_title}' già esistente")

        for field, value in update_data.items():
            if value is not None:
                setattr(category, field, value)

        await self._flush(db)
        await db.refresh(category)

        logger.info("Aggiornata categoria: %s", category_id)
        return category

    async def delete(self, db: AsyncSession, category_id: uuid.UUID) -> None:
        """
        Elimina una categoria non utilizzata.

        Raises:
            NotFoundError: Se la categoria non esiste
            ConflictError: Se ci sono prodotti nella categoria
        """
        category = await self.get_by_id(db, category_id)

        count_result = await db.execute(
            select(func.count()).select_from(Product).where(Product.category_id == category_id)
        )
        products_count = count_result.scalar() or 0
        if products_count:
            logger.warning(
                "Impossibile eliminare categoria %s: %d prodotti", category_id, products_count
            )
            raise ConflictError(
                f"Impossibile eliminare la categoria: usata da {products_count} prodotti"
            )

        await db.delete(category)
        await db.flush()

        logger.info("Eliminata categoria: %s - %s", category.id, category.title)

    async def get_products(self, db: AsyncSession, category_id: uuid.UUID) -> list[Product]:
        """Prodotti della categoria ordinati per nome."""
        await self.get_by_id(db, category_id)
        result = await db.execute(
            select(Product).where(Product.category_id == category_id).order_by(Product.name)
        )
        return list(result.scalars().all())

    async def _get_by_title(
        self,
        db: AsyncSession,
        title: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[Category]:
        query = select(Category).where(func.lower(Category.title) == title.lower())
        if exclude_id:
            query = query.where(Category.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def _flush(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as e:
            logger.error("Errore IntegrityError categoria: %s", e.orig)
            raise DuplicateError("Titolo categoria già esistente")
