"""
API v1 Routes
Progetto: Tailor Manager (Gestionale Sartoria)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from app.api.v1 import (
    auth, users, customers, categories, products, measurements, orders, invoices
)

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(auth.router)
api_v1_router.include_router(users.router)
api_v1_router.include_router(customers.router)
api_v1_router.include_router(categories.router)
api_v1_router.include_router(products.router)
api_v1_router.include_router(measurements.router)
api_v1_router.include_router(orders.router)
api_v1_router.include_router(invoices.router)

# Esportazione
__all__ = ["api_v1_router"]
