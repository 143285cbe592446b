"""
Schemas Pydantic per il progetto Tailor Manager

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
e serializzazione delle risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from app.schemas import OrderRead, CustomerRead, etc.

from app.schemas.common import (
    CategorySummary,
    CustomerSummary,
    PaginatedResponse,
    ProductSummary,
    UserSummary,
)
from app.schemas.user import (
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from app.schemas.token import TokenPayload, TokenRefresh, TokenResponse
from app.schemas.customer import (
    CustomerCreate,
    CustomerDetail,
    CustomerList,
    CustomerRead,
    CustomerUpdate,
)
from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.schemas.product import (
    MeasurementRange,
    MeasurementUnit,
    ProductCreate,
    ProductList,
    ProductRead,
    ProductUpdate,
)
from app.schemas.measurement import (
    MeasurementCreate,
    MeasurementList,
    MeasurementRead,
    MeasurementUpdate,
)
from app.schemas.order import (
    ItemStatus,
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderItemStatusUpdate,
    OrderList,
    OrderRead,
    OrderStatus,
    OrderUpdate,
    Priority,
)
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceList,
    InvoiceRead,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
    PaymentMethod,
    PaymentRead,
)

__all__ = [
    # Common
    "PaginatedResponse",
    "UserSummary",
    "CustomerSummary",
    "CategorySummary",
    "ProductSummary",
    # User / Token
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "ProfileUpdate",
    "PasswordChange",
    "UserResponse",
    "TokenResponse",
    "TokenRefresh",
    "TokenPayload",
    # Customer
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerRead",
    "CustomerDetail",
    "CustomerList",
    # Catalog
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryRead",
    "MeasurementUnit",
    "MeasurementRange",
    "ProductCreate",
    "ProductUpdate",
    "ProductRead",
    "ProductList",
    # Measurement
    "MeasurementCreate",
    "MeasurementUpdate",
    "MeasurementRead",
    "MeasurementList",
    # Order
    "OrderStatus",
    "ItemStatus",
    "Priority",
    "OrderItemCreate",
    "OrderItemRead",
    "OrderItemStatusUpdate",
    "OrderCreate",
    "OrderUpdate",
    "OrderRead",
    "OrderList",
    # Invoice
    "InvoiceStatus",
    "PaymentMethod",
    "PaymentCreate",
    "PaymentRead",
    "InvoiceCreate",
    "InvoiceUpdate",
    "InvoiceRead",
    "InvoiceList",
]
