"""
Router FastAPI per i Prodotti
Progetto: Tailor Manager (Gestionale Sartoria)
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import AdminUser, get_current_user
from app.schemas.product import ProductCreate, ProductList, ProductRead, ProductUpdate
from app.services.product_service import ProductService

product_service = ProductService()

router = APIRouter(
    prefix="/products",
    tags=["Prodotti"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "/",
    name="prodotti_lista",
    summary="Lista prodotti",
    description="Recupera la lista paginata dei prodotti ordinata per nome.",
    response_model=ProductList,
)
async def get_products(
    page: int = Query(1, ge=1, description="Numero pagina"),
    per_page: int = Query(10, ge=1, le=100, description="Elementi per pagina"),
    category_id: Optional[uuid.UUID] = Query(None, description="Filtro per categoria"),
    is_active: Optional[bool] = Query(None, description="Filtro per prodotti attivi"),
    search: Optional[str] = Query(None, description="Ricerca sul nome"),
    db: AsyncSession = Depends(get_db),
) -> ProductList:
    products, total = await product_service.get_all(
        db,
        category_id=category_id,
        is_active=is_active,
        search=search,
        page=page,
        per_page=per_page,
    )
    return ProductList(
        items=[ProductRead.model_validate(p) for p in products],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get(
    "/{product_id}",
    name="prodotto_dettaglio",
    summary="Dettaglio prodotto",
    response_model=ProductRead,
)
async def get_product(
    product_id: uuid.UUID = Path(..., description="UUID del prodotto"),
    db: AsyncSession = Depends(get_db),
) -> ProductRead:
    product = await product_service.get_by_id(db, product_id)
    return ProductRead.model_validate(product)


@router.post(
    "/",
    name="prodotto_crea",
    summary="Crea prodotto",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    data: ProductCreate,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> ProductRead:
    product = await product_service.create(db, data)
    return ProductRead.model_validate(product)


@router.put(
    "/{product_id}",
    name="prodotto_aggiorna",
    summary="Aggiorna prodotto",
    description="Il nuovo prezzo vale solo per gli ordini futuri.",
    response_model=ProductRead,
)
async def update_product(
    data: ProductUpdate,
    admin: AdminUser,
    product_id: uuid.UUID = Path(..., description="UUID del prodotto"),
    db: AsyncSession = Depends(get_db),
) -> ProductRead:
    product = await product_service.update(db, product_id, data)
    return ProductRead.model_validate(product)


@router.delete(
    "/{product_id}",
    name="prodotto_elimina",
    summary="Elimina prodotto",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_product(
    admin: AdminUser,
    product_id: uuid.UUID = Path(..., description="UUID del prodotto"),
    db: AsyncSession = Depends(get_db),
) -> None:
    await product_service.delete(db, product_id)
