"""
Router FastAPI per le Categorie
Progetto: Tailor Manager (Gestionale Sartoria)

Lettura per tutti gli utenti autenticati, scrittura riservata agli admin.
"""

import uuid

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import AdminUser, get_current_user
from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.schemas.product import ProductRead
from app.services.category_service import CategoryService

category_service = CategoryService()

router = APIRouter(
    prefix="/categories",
    tags=["Categorie"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="categorie_lista",
    summary="Lista categorie",
    description="Recupera tutte le categorie ordinate per titolo.",
    response_model=list[CategoryRead],
)
async def get_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryRead]:
    categories = await category_service.get_all(db)
    return [CategoryRead.model_validate(c) for c in categories]


@router.get(
    "/{category_id}",
    name="categoria_dettaglio",
    summary="Dettaglio categoria",
    response_model=CategoryRead,
)
async def get_category(
    category_id: uuid.UUID = Path(..., description="UUID della categoria"),
    db: AsyncSession = Depends(get_db),
) -> CategoryRead:
    category = await category_service.get_by_id(db, category_id)
    return CategoryRead.model_validate(category)


@router.post(
    "/",
    name="categoria_crea",
    summary="Crea categoria",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    data: CategoryCreate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> CategoryRead:
    category = await category_service.create(db, data)
    return CategoryRead.model_validate(category)


@router.put(
    "/{category_id}",
    name="categoria_aggiorna",
    summary="Aggiorna categoria",
    response_model=CategoryRead,
)
async def update_category(
    data: CategoryUpdate,
    admin: AdminUser,
    category_id: uuid.UUID = Path(..., description="UUID della categoria"),
    db: AsyncSession = Depends(get_db),
) -> CategoryRead:
    category = await category_service.update(db, category_id, data)
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_id}",
    name="categoria_elimina",
    summary="Elimina categoria",
    description="Elimina una categoria non associata a prodotti.",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_category(
    admin: AdminUser,
    category_id: uuid.UUID = Path(..., description="UUID della categoria"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await category_service.delete(db, category_id)


@router.get(
    "/{category_id}/products",
    name="categoria_prodotti",
    summary="Prodotti della categoria",
    response_model=list[ProductRead],
)
async def get_category_products(
    category_id: uuid.UUID = Path(..., description="UUID della categoria"),
    db: AsyncSession = Depends(get_db),
) -> list[ProductRead]:
    products = await category_service.get_products(db, category_id)
    return [ProductRead.model_validate(p) for p in products]
