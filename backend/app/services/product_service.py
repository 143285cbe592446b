"""
Service Layer per i Prodotti
Progetto: Tailor Manager (Gestionale Sartoria)

Definisce la logica di business per il catalogo prodotti.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Category, Product
from app.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service per la gestione delle operazioni CRUD sui prodotti.

    Il prezzo di listino viene copiato nelle voci d'ordine al momento
    della creazione: modificarlo non altera gli ordini esistenti.
    """

    async def get_all(
        self,
        db: AsyncSession,
        category_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[Product], int]:
        """
        Recupera la lista paginata dei prodotti ordinata per nome.

        Args:
            db: Sessione database
            category_id: Filtro per categoria
            is_active: Filtro per prodotti attivi/disattivi
            search: Ricerca sul nome
            page: Numero pagina
            per_page: Elementi per pagina

        Returns:
            Tuple di (lista prodotti, totale count)
        """
        conditions = []
        if category_id:
            conditions.append(Product.category_id == category_id)
        if is_active is not None:
            conditions.append(Product.is_active == is_active)
        if search:
            conditions.append(Product.name.ilike(f"%{search}%"))

        query = select(Product)
        count_query = select(func.count()).select_from(Product)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        offset = (page - 1) * per_page
        query = query.order_by(Product.name).offset(offset).limit(per_page)

        result = await db.execute(query)
        products = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperati %d prodotti su %d totali", len(products), total)
        return products, total

    async def get_by_id(self, db: AsyncSession, product_id: uuid.UUID) -> Product:
        """
        Recupera un prodotto tramite ID.

        Raises:
            NotFoundError: Se il prodotto non esiste
        """
        result = await db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        product = result.scalar_one_or_none()

        if product is None:
            logger.warning("Prodotto non trovato: %s", product_id)
            raise NotFoundError(f"Prodotto con ID {product_id} non trovato")

        return product

    async def _check_category(self, db: AsyncSession, category_id: uuid.UUID) -> None:
        result = await db.execute(select(Category.id).where(Category.id == category_id))
        if result.scalar_one_or_none() is None:
            logger.warning("Categoria non trovata: %s", category_id)
            raise NotFoundError(f"Categoria con ID {category_id} non trovata")

    async def create(self, db: AsyncSession, data: ProductCreate) -> Product:
        """
        Crea un nuovo prodotto.

        Raises:
            NotFoundError: Se la categoria non esiste
        """
        await self._check_category(db, data.category_id)

        product = Product(**data.model_dump(mode="json", exclude={"price", "category_id"}))
        product.price = data.price
        product.category_id = data.category_id

        db.add(product)
        await db.flush()

        logger.info("Creato prodotto: %s - %s", product.id, product.name)
        return await self.get_by_id(db, product.id)

    async def update(
        self,
        db: AsyncSession,
        product_id: uuid.UUID,
        data: ProductUpdate,
    ) -> Product:
        """
        Aggiorna un prodotto esistente.

        Raises:
            NotFoundError: Se il prodotto o la nuova categoria non esistono
        """
        product = await self.get_by_id(db, product_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("category_id"):
            await self._check_category(db, update_data["category_id"])

        if update_data.get("measurements") is not None:
            update_data["measurements"] = [
                m.model_dump(mode="json") for m in data.measurements
            ]

        for field, value in update_data.items():
            if value is None and field not in ("description", "icon"):
                continue
            setattr(product, field, value)

        await db.flush()

        logger.info("Aggiornato prodotto: %s", product_id)
        return await self.get_by_id(db, product_id)

    async def delete(self, db: AsyncSession, product_id: uuid.UUID) -> None:
        """
        Elimina un prodotto.

        I prodotti referenziati da voci d'ordine sono protetti dal vincolo
        RESTRICT: in quel caso va disattivato (is_active=False).
        """
        product = await self.get_by_id(db, product_id)

        await db.delete(product)
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Prodotto %s usato da voci d'ordine: %s", product_id, e)
            raise ConflictError(
                "Impossibile eliminare un prodotto usato negli ordini: disattivarlo"
            )

        logger.info("Eliminato prodotto: %s - %s", product.id, product.name)
