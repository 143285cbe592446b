"""
Pytest configuration and fixtures per i test dei service.

Le sessioni database sono mock (AsyncMock): ogni chiamata a
db.execute restituisce, in ordine, i risultati preparati nel test.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession


# ============================================================
# Fixtures per AsyncSession Mock
# ============================================================


@pytest.fixture
def mock_db():
    """Crea un mock di AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.delete = AsyncMock()
    db.expire = MagicMock()
    return db


def make_result(
    one: Any = None,
    many: Optional[list] = None,
    scalar: Any = None,
) -> MagicMock:
    """
    Costruisce il risultato di db.execute.

    Args:
        one: Valore di scalar_one_or_none() e scalars().first()
        many: Valore di scalars().all()
        scalar: Valore di scalar() (es. count)
    """
    result = MagicMock()
    result.scalar_one_or_none.return_value = one
    result.scalar.return_value = scalar
    result.scalars.return_value.all.return_value = many or []
    result.scalars.return_value.first.return_value = one
    return result


# Istante fisso usato nei test
NOW = datetime(2024, 5, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def user_id():
    return uuid.uuid4()


# ============================================================
# Mock di dominio (senza sessione)
# ============================================================


class MockCustomer:
    """Mock del modello Customer."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.name = kwargs.get('name', 'Amina Diallo')
        self.phone = kwargs.get('phone', '+221 77 123 4567')
        self.email = kwargs.get('email', None)


class MockCategory:
    """Mock del modello Category."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.title = kwargs.get('title', 'Abiti')


class MockProduct:
    """Mock del modello Product."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.name = kwargs.get('name', 'Abito su misura')
        self.price = kwargs.get('price', Decimal("100.00"))
        self.category_id = kwargs.get('category_id', uuid.uuid4())


class MockMeasurement:
    """Mock del modello Measurement."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.customer_id = kwargs.get('customer_id', uuid.uuid4())
        self.category_id = kwargs.get('category_id', uuid.uuid4())
        self.measurements = kwargs.get('measurements', {"Spalle": "42", "Torace": "96.5"})


class MockOrderItem:
    """Mock del modello OrderItem."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.product_id = kwargs.get('product_id', uuid.uuid4())
        self.quantity = kwargs.get('quantity', 1)
        self.price = kwargs.get('price', Decimal("100.00"))
        self.status = kwargs.get('status', 'New')
        self.deadline = kwargs.get('deadline', None)
        self.completed_at = kwargs.get('completed_at', None)


class MockOrder:
    """Mock del modello Order."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.order_number = kwargs.get('order_number', 'ORD-2405-0001')
        self.customer_id = kwargs.get('customer_id', uuid.uuid4())
        self.status = kwargs.get('status', 'New')
        self.total_amount = kwargs.get('total_amount', Decimal("1000.00"))
        self.due_date = kwargs.get('due_date', None)
        self.items = kwargs.get('items', [])
        self.invoice = kwargs.get('invoice', None)


class MockPayment:
    """Mock del modello Payment."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.amount = kwargs.get('amount', Decimal("100.00"))
        self.method = kwargs.get('method', 'Cash')


class MockInvoice:
    """Mock del modello Invoice."""
    def __init__(self, **kwargs):
        self.id = kwargs.get('id', uuid.uuid4())
        self.invoice_number = kwargs.get('invoice_number', 'INV-2405-0001')
        self.order = kwargs.get('order', None)
        self.subtotal = kwargs.get('subtotal', Decimal("1000.00"))
        self.discount = kwargs.get('discount', Decimal("0"))
        self.tax = kwargs.get('tax', Decimal("0"))
        self.total_amount = kwargs.get('total_amount', Decimal("1000.00"))
        self.amount_paid = kwargs.get('amount_paid', Decimal("0"))
        self.balance = kwargs.get('balance', Decimal("1000.00"))
        self.status = kwargs.get('status', 'Unpaid')
        self.due_date = kwargs.get('due_date', NOW + timedelta(days=30))
        self.notes = kwargs.get('notes', None)
        self.payments = kwargs.get('payments', [])


@pytest.fixture
def mock_customer():
    return MockCustomer()


@pytest.fixture
def mock_product():
    return MockProduct()


@pytest.fixture
def mock_order():
    """Ordine da 1000 non fatturato."""
    return MockOrder()


@pytest.fixture
def mock_invoice():
    """Fattura da 1000 senza pagamenti."""
    return MockInvoice()
