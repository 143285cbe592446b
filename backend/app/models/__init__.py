"""
Modelli Database SQLAlchemy
Progetto: Tailor Manager (Gestionale Sartoria)

Import centralizzato di tutti i modelli per create_all e usage generico.

Modelli:
- User: Utenti del sistema (admin, sarti, staff)
- Customer: Anagrafica clienti
- Category: Categorie di capi con le misure richieste
- Product: Catalogo capi/servizi
- Measurement: Schede misure dei clienti
- Order / OrderItem: Ordini e relative voci
- Invoice / Payment: Fatture e registro pagamenti
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from app.models.user import User, UserRole
from app.models.customer import Customer
from app.models.category import Category
from app.models.product import Product
from app.models.measurement import Measurement
from app.models.order import Order, OrderItem
from app.models.invoice import Invoice, Payment

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Customer",
    "Category",
    "Product",
    "Measurement",
    "Order",
    "OrderItem",
    "Invoice",
    "Payment",
]
