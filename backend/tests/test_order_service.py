"""
Unit tests per OrderService.

Verificano calcolo del totale, aggregazione degli stati delle voci,
validazione delle voci e flussi di creazione/eliminazione con
sessione database mock.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    BusinessValidationError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
)
from app.schemas.order import (
    ItemStatus,
    OrderCreate,
    OrderItemCreate,
    OrderItemRead,
    OrderStatus,
    OrderUpdate,
)
from app.services.order_service import (
    OrderService,
    compute_total_amount,
    derive_order_status,
)
from conftest import (
    MockCustomer,
    MockMeasurement,
    MockOrder,
    MockOrderItem,
    MockProduct,
    make_result,
)


def _items(*statuses):
    return [MockOrderItem(status=s) for s in statuses]


# ============================================================
# Tests per il calcolo del totale
# ============================================================


class TestComputeTotalAmount:
    """Test del totale ordine."""

    def test_sum_of_lines(self):
        items = [
            MockOrderItem(price=Decimal("100"), quantity=2),
            MockOrderItem(price=Decimal("50"), quantity=1),
        ]
        assert compute_total_amount(items) == Decimal("250")

    def test_missing_quantity_counts_as_one(self):
        items = [
            MockOrderItem(price=Decimal("80"), quantity=None),
            MockOrderItem(price=Decimal("20"), quantity=0),
        ]
        assert compute_total_amount(items) == Decimal("100")

    def test_empty_order(self):
        assert compute_total_amount([]) == Decimal("0")


# ============================================================
# Tests per l'aggregazione degli stati
# ============================================================


class TestDeriveOrderStatus:
    """Test dello stato ordine derivato dalle voci."""

    def test_mixed_ready_completed_new(self):
        assert derive_order_status(_items("Ready", "Completed", "New")) == OrderStatus.PARTIALLY_READY

    def test_all_completed(self):
        assert derive_order_status(_items("Completed", "Completed")) == OrderStatus.COMPLETED

    def test_ready_and_completed(self):
        assert derive_order_status(_items("Ready", "Completed")) == OrderStatus.READY

    def test_in_progress(self):
        assert derive_order_status(_items("New", "In Progress")) == OrderStatus.IN_PROGRESS

    def test_all_new(self):
        assert derive_order_status(_items("New", "New")) == OrderStatus.NEW

    def test_urgent_and_cancelled_are_ignored(self):
        assert derive_order_status(_items("Urgent", "Cancelled")) == OrderStatus.NEW

    def test_accepts_enum_values(self):
        items = _items(ItemStatus.READY, ItemStatus.READY)
        assert derive_order_status(items) == OrderStatus.READY

    def test_empty_items(self):
        assert derive_order_status([]) == OrderStatus.NEW


# ============================================================
# Tests per la validazione delle voci
# ============================================================


class TestValidateItem:
    """Test di _validate_item."""

    @pytest.fixture
    def service(self):
        return OrderService()

    @pytest.mark.asyncio
    async def test_price_defaults_to_product_price(self, service, mock_db, now):
        product = MockProduct(price=Decimal("75.00"))
        mock_db.execute.return_value = make_result(one=product)
        data = OrderItemCreate(product_id=product.id, quantity=2, deadline=now)

        item = await service._validate_item(mock_db, data, uuid.uuid4(), 0)

        assert item.price == Decimal("75.00")
        assert item.quantity == 2
        assert item.status == "New"

    @pytest.mark.asyncio
    async def test_explicit_price_is_kept(self, service, mock_db, now):
        product = MockProduct(price=Decimal("75.00"))
        mock_db.execute.return_value = make_result(one=product)
        data = OrderItemCreate(product_id=product.id, price=Decimal("60"), deadline=now)

        item = await service._validate_item(mock_db, data, uuid.uuid4(), 0)

        assert item.price == Decimal("60")

    @pytest.mark.asyncio
    async def test_missing_product(self, service, mock_db, now):
        mock_db.execute.return_value = make_result(one=None)
        data = OrderItemCreate(product_id=uuid.uuid4(), deadline=now)

        with pytest.raises(NotFoundError):
            await service._validate_item(mock_db, data, uuid.uuid4(), 0)

    @pytest.mark.asyncio
    async def test_missing_measurement(self, service, mock_db, now):
        mock_db.execute.side_effect = [
            make_result(one=MockProduct()),
            make_result(one=None),
        ]
        data = OrderItemCreate(product_id=uuid.uuid4(), measurement_id=uuid.uuid4(), deadline=now)

        with pytest.raises(NotFoundError):
            await service._validate_item(mock_db, data, uuid.uuid4(), 0)

    @pytest.mark.asyncio
    async def test_measurement_of_other_customer(self, service, mock_db, now):
        measurement = MockMeasurement(customer_id=uuid.uuid4())
        mock_db.execute.side_effect = [
            make_result(one=MockProduct()),
            make_result(one=measurement),
        ]
        data = OrderItemCreate(product_id=uuid.uuid4(), measurement_id=measurement.id, deadline=now)

        with pytest.raises(InvalidReferenceError):
            await service._validate_item(mock_db, data, uuid.uuid4(), 0)


# ============================================================
# Tests per la creazione dell'ordine
# ============================================================


class TestCreateOrder:
    """Test di OrderService.create."""

    @pytest.mark.asyncio
    async def test_create_computes_total_and_number(self, mock_db, now, user_id):
        customer = MockCustomer()
        shirt = MockProduct(price=Decimal("100"))
        trousers = MockProduct(price=Decimal("50"))
        created = MockOrder()
        mock_db.execute.side_effect = [
            make_result(one=customer),
            make_result(one=shirt),
            make_result(one=trousers),
            make_result(one="ORD-2404-0099"),
            make_result(one=created),
        ]
        data = OrderCreate(
            customer_id=customer.id,
            due_date=now + timedelta(days=10),
            items=[
                OrderItemCreate(product_id=shirt.id, quantity=2, deadline=now),
                OrderItemCreate(product_id=trousers.id, quantity=1, deadline=now),
            ],
        )

        result = await OrderService().create(mock_db, data, user_id, now=now)

        assert result is created
        order = mock_db.add.call_args[0][0]
        assert order.order_number == "ORD-2405-0100"
        assert order.total_amount == Decimal("250")
        assert order.total_amount == compute_total_amount(order.items)
        assert order.status == "New"
        assert order.created_by_id == user_id
        assert order.updated_by_id == user_id
        mock_db.flush.assert_awaited()

    @pytest.mark.asyncio
    async def test_status_derived_from_items(self, mock_db, now, user_id):
        customer = MockCustomer()
        product = MockProduct()
        mock_db.execute.side_effect = [
            make_result(one=customer),
            make_result(one=product),
            make_result(one=None),
            make_result(one=MockOrder()),
        ]
        data = OrderCreate(
            customer_id=customer.id,
            due_date=now,
            items=[OrderItemCreate(product_id=product.id, deadline=now, status=ItemStatus.READY)],
        )

        await OrderService().create(mock_db, data, user_id, now=now)

        order = mock_db.add.call_args[0][0]
        assert order.status == "Ready"
        assert order.order_number == "ORD-2405-0001"

    @pytest.mark.asyncio
    async def test_missing_customer(self, mock_db, now, user_id):
        mock_db.execute.return_value = make_result(one=None)
        data = OrderCreate(
            customer_id=uuid.uuid4(),
            due_date=now,
            items=[OrderItemCreate(product_id=uuid.uuid4(), deadline=now)],
        )

        with pytest.raises(NotFoundError):
            await OrderService().create(mock_db, data, user_id, now=now)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_items(self, mock_db, now, user_id):
        mock_db.execute.return_value = make_result(one=MockCustomer())
        data = OrderCreate(customer_id=uuid.uuid4(), due_date=now, items=[])

        with pytest.raises(BusinessValidationError):
            await OrderService().create(mock_db, data, user_id, now=now)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_order_number(self, mock_db, now, user_id):
        """Un numero già assegnato da una richiesta concorrente è un conflitto."""
        customer = MockCustomer()
        product = MockProduct()
        mock_db.execute.side_effect = [
            make_result(one=customer),
            make_result(one=product),
            make_result(one="ORD-2405-0007"),
        ]
        mock_db.flush.side_effect = IntegrityError(
            "INSERT INTO orders", {}, Exception("uq_orders_order_number")
        )
        data = OrderCreate(
            customer_id=customer.id,
            due_date=now,
            items=[OrderItemCreate(product_id=product.id, deadline=now)],
        )

        with pytest.raises(ConflictError):
            await OrderService().create(mock_db, data, user_id, now=now)

        assert mock_db.add.call_args[0][0].order_number == "ORD-2405-0008"


# ============================================================
# Tests per aggiornamento ed eliminazione
# ============================================================


class TestUpdateDeleteOrder:
    """Test di OrderService.update e delete."""

    @pytest.mark.asyncio
    async def test_update_replaces_items_and_total(self, mock_db, now, user_id):
        order = MockOrder(items=[MockOrderItem(price=Decimal("500"))], total_amount=Decimal("500"))
        product = MockProduct(price=Decimal("30"))
        mock_db.execute.side_effect = [
            make_result(one=order),
            make_result(one=product),
            make_result(one=order),
        ]
        data = OrderUpdate(
            items=[OrderItemCreate(product_id=product.id, quantity=3, deadline=now)],
            notes="Orlo da accorciare",
        )

        result = await OrderService().update(mock_db, order.id, data, user_id)

        assert result.total_amount == Decimal("90")
        assert len(result.items) == 1
        assert result.notes == "Orlo da accorciare"
        assert result.updated_by_id == user_id

    @pytest.mark.asyncio
    async def test_update_status_is_explicit_override(self, mock_db, user_id):
        order = MockOrder(items=_items("New"), status="New")
        mock_db.execute.return_value = make_result(one=order)

        await OrderService().update(
            mock_db, order.id, OrderUpdate(status=OrderStatus.URGENT), user_id
        )

        assert order.status == "Urgent"

    @pytest.mark.asyncio
    async def test_delete_invoiced_order(self, mock_db, mock_invoice):
        order = MockOrder(invoice=mock_invoice)
        mock_db.execute.return_value = make_result(one=order)

        with pytest.raises(ConflictError):
            await OrderService().delete(mock_db, order.id)

        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete(self, mock_db, mock_order):
        mock_db.execute.return_value = make_result(one=mock_order)

        await OrderService().delete(mock_db, mock_order.id)

        mock_db.delete.assert_awaited_once_with(mock_order)

    @pytest.mark.asyncio
    async def test_get_missing_order(self, mock_db):
        mock_db.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await OrderService().get_by_id(mock_db, uuid.uuid4())


# ============================================================
# Tests per il cambio di stato delle voci
# ============================================================


class TestSetItemStatus:
    """Test di OrderService.set_item_status."""

    @pytest.mark.asyncio
    async def test_completed_stamps_and_derives(self, mock_db, now):
        item = MockOrderItem(status="Ready")
        other = MockOrderItem(status="New")
        order = MockOrder(items=[item, other], due_date=now + timedelta(days=3))
        mock_db.execute.return_value = make_result(one=order)

        await OrderService().set_item_status(
            mock_db, order.id, item.id, ItemStatus.COMPLETED, now=now
        )

        assert item.status == "Completed"
        assert item.completed_at == now
        assert item.deadline == now + timedelta(days=3)
        assert order.status == "Partially Ready"

    @pytest.mark.asyncio
    async def test_deadline_defaults_to_seven_days(self, mock_db, now):
        item = MockOrderItem(status="New")
        order = MockOrder(items=[item], due_date=None)
        mock_db.execute.return_value = make_result(one=order)

        await OrderService().set_item_status(
            mock_db, order.id, item.id, ItemStatus.IN_PROGRESS, now=now
        )

        assert item.deadline == now + timedelta(days=7)
        assert item.completed_at is None
        assert order.status == "In Progress"

    @pytest.mark.asyncio
    async def test_idempotent(self, mock_db, now):
        """Due chiamate identiche producono lo stesso stato."""
        item = MockOrderItem(status="Ready")
        order = MockOrder(items=[item])
        mock_db.execute.return_value = make_result(one=order)
        service = OrderService()

        await service.set_item_status(mock_db, order.id, item.id, ItemStatus.COMPLETED, now=now)
        first = (item.status, item.completed_at, item.deadline, order.status)

        later = now + timedelta(hours=2)
        await service.set_item_status(mock_db, order.id, item.id, ItemStatus.COMPLETED, now=later)

        assert (item.status, item.completed_at, item.deadline, order.status) == first
        assert order.status == "Completed"

    @pytest.mark.asyncio
    async def test_reopened_item_clears_completion(self, mock_db, now):
        item = MockOrderItem(status="Completed", completed_at=now - timedelta(days=1))
        order = MockOrder(items=[item], status="Completed", due_date=now)
        mock_db.execute.return_value = make_result(one=order)

        await OrderService().set_item_status(
            mock_db, order.id, item.id, ItemStatus.IN_PROGRESS, now=now
        )

        assert item.status == "In Progress"
        assert item.completed_at is None
        assert order.status == "In Progress"

    @pytest.mark.asyncio
    async def test_missing_item(self, mock_db, mock_order, now):
        mock_db.execute.return_value = make_result(one=mock_order)

        with pytest.raises(NotFoundError):
            await OrderService().set_item_status(
                mock_db, mock_order.id, uuid.uuid4(), ItemStatus.READY, now=now
            )

    @pytest.mark.asyncio
    async def test_missing_order(self, mock_db, now):
        mock_db.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await OrderService().set_item_status(
                mock_db, uuid.uuid4(), uuid.uuid4(), ItemStatus.READY, now=now
            )


class TestOrderItemRead:
    """La voce d'ordine espone la scheda misure collegata."""

    def test_measurement_sheet_is_serialized(self, now):
        sheet = MockMeasurement(measurements={"Vita": "80", "Lunghezza": "102"})
        sheet.category = None
        product = MockProduct(name="Pantalone")
        product.category = None
        item = MockOrderItem(status="Ready", deadline=now)
        item.position = 0
        item.product = product
        item.product_id = product.id
        item.measurement_id = sheet.id
        item.measurement = sheet
        item.notes = None

        data = OrderItemRead.model_validate(item).model_dump()

        assert data["measurement"]["id"] == sheet.id
        assert data["measurement"]["measurements"] == {"Vita": "80", "Lunghezza": "102"}
        assert data["product"]["name"] == "Pantalone"
        assert data["line_total"] == Decimal("100.00")
