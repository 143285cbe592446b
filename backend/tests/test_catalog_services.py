"""
Unit tests per i service di anagrafica: clienti, categorie, prodotti,
schede misure e utenti.
"""

import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from app.core.security import decode_token, hash_password
from app.models.user import UserRole
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.schemas.customer import CustomerCreate, CustomerDetail, CustomerUpdate
from app.schemas.measurement import MeasurementCreate
from app.schemas.product import ProductCreate
from app.schemas.user import PasswordChange, UserCreate, UserLogin
from app.services.auth_service import AuthService
from app.services.category_service import CategoryService
from app.services.customer_service import CustomerService
from app.services.measurement_service import MeasurementService
from app.services.product_service import ProductService
from conftest import MockCategory, MockCustomer, make_result


# ============================================================
# Clienti
# ============================================================


class TestCustomerService:
    """Test di CustomerService."""

    @pytest.mark.asyncio
    async def test_create_duplicate_phone(self, mock_db):
        existing = MockCustomer(phone="+221 77 123 4567")
        mock_db.execute.return_value = make_result(one=existing)
        data = CustomerCreate(name="Fatou Sow", phone="+221 77 123 4567")

        with pytest.raises(DuplicateError):
            await CustomerService().create(mock_db, data)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create(self, mock_db):
        mock_db.execute.return_value = make_result(one=None)
        data = CustomerCreate(name="Fatou Sow", phone=" 338001122 ", email="Fatou@Example.com")

        customer = await CustomerService().create(mock_db, data)

        assert customer.phone == "338001122"
        assert customer.email == "fatou@example.com"
        mock_db.add.assert_called_once_with(customer)

    @pytest.mark.asyncio
    async def test_update_phone_taken(self, mock_db):
        customer = MockCustomer(phone="111111")
        mock_db.execute.side_effect = [
            make_result(one=customer),
            make_result(one=MockCustomer(phone="222222")),
        ]

        with pytest.raises(DuplicateError):
            await CustomerService().update(mock_db, customer.id, CustomerUpdate(phone="222222"))

    @pytest.mark.asyncio
    async def test_delete_with_orders(self, mock_db):
        customer = MockCustomer()
        mock_db.execute.side_effect = [
            make_result(one=customer),
            make_result(scalar=3),
        ]

        with pytest.raises(ConflictError):
            await CustomerService().delete(mock_db, customer.id)

        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_missing(self, mock_db):
        mock_db.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await CustomerService().get_by_id(mock_db, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_detail_includes_measurements(self, mock_db, now):
        customer_id = uuid.uuid4()
        sheet = SimpleNamespace(
            id=uuid.uuid4(),
            customer_id=customer_id,
            customer=None,
            category_id=uuid.uuid4(),
            category=MockCategory(title="Camicie"),
            measurements={"Spalle": "42", "Collo": "39", "Manica": "63"},
            notes=None,
            measured_by=None,
            created_at=now,
            updated_at=now,
        )
        customer = SimpleNamespace(
            id=customer_id,
            name="Amina Diallo",
            phone="+221 77 123 4567",
            email=None,
            address=None,
            referral=None,
            notes=None,
            profile_image="default-customer.jpg",
            created_at=now,
            updated_at=now,
            measurements=[sheet],
        )
        mock_db.execute.return_value = make_result(one=customer)

        detail = CustomerDetail.model_validate(
            await CustomerService().get_by_id(mock_db, customer_id)
        )

        assert len(detail.measurements) == 1
        assert detail.measurements[0].category.title == "Camicie"
        assert list(detail.measurements[0].measurements) == ["Spalle", "Collo", "Manica"]


# ============================================================
# Categorie
# ============================================================


class TestCategoryService:
    """Test di CategoryService."""

    @pytest.mark.asyncio
    async def test_create_duplicate_title(self, mock_db):
        mock_db.execute.return_value = make_result(one=MockCategory(title="Abiti"))

        with pytest.raises(DuplicateError):
            await CategoryService().create(mock_db, CategoryCreate(title="  Abiti "))

    @pytest.mark.asyncio
    async def test_create_defaults(self, mock_db):
        mock_db.execute.return_value = make_result(one=None)

        category = await CategoryService().create(mock_db, CategoryCreate(title="Camicie"))

        assert category.title == "Camicie"
        assert category.icon == "category"
        assert len(category.gradient_colors) == 2

    @pytest.mark.asyncio
    async def test_rename_to_existing_title(self, mock_db):
        category = MockCategory(title="Abiti")
        mock_db.execute.side_effect = [
            make_result(one=category),
            make_result(one=MockCategory(title="Camicie")),
        ]

        with pytest.raises(DuplicateError):
            await CategoryService().update(mock_db, category.id, CategoryUpdate(title="Camicie"))

    @pytest.mark.asyncio
    async def test_delete_with_products(self, mock_db):
        category = MockCategory()
        mock_db.execute.side_effect = [
            make_result(one=category),
            make_result(scalar=2),
        ]

        with pytest.raises(ConflictError):
            await CategoryService().delete(mock_db, category.id)


# ============================================================
# Prodotti e schede misure
# ============================================================


class TestProductService:
    """Test di ProductService."""

    @pytest.mark.asyncio
    async def test_create_missing_category(self, mock_db):
        mock_db.execute.return_value = make_result(one=None)
        data = ProductCreate(name="Gilet", category_id=uuid.uuid4(), price=Decimal("40"))

        with pytest.raises(NotFoundError):
            await ProductService().create(mock_db, data)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_product_in_use(self, mock_db):
        product = SimpleNamespace(id=uuid.uuid4(), name="Gilet")
        mock_db.execute.return_value = make_result(one=product)
        mock_db.flush.side_effect = IntegrityError("DELETE FROM products", {}, Exception("fk"))

        with pytest.raises(ConflictError):
            await ProductService().delete(mock_db, product.id)


class TestMeasurementService:
    """Test di MeasurementService."""

    @pytest.mark.asyncio
    async def test_create_missing_customer(self, mock_db, user_id):
        mock_db.execute.return_value = make_result(one=None)
        data = MeasurementCreate(
            customer_id=uuid.uuid4(),
            category_id=uuid.uuid4(),
            measurements={"Spalle": "42"},
        )

        with pytest.raises(NotFoundError):
            await MeasurementService().create(mock_db, data, user_id)

    @pytest.mark.asyncio
    async def test_create_missing_category(self, mock_db, user_id):
        mock_db.execute.side_effect = [
            make_result(one=MockCustomer()),
            make_result(one=None),
        ]
        data = MeasurementCreate(
            customer_id=uuid.uuid4(),
            category_id=uuid.uuid4(),
            measurements={"Vita": "80"},
        )

        with pytest.raises(NotFoundError):
            await MeasurementService().create(mock_db, data, user_id)


# ============================================================
# Utenti
# ============================================================


class TestRegister:
    """Test della registrazione utenti."""

    @pytest.mark.asyncio
    async def test_first_user_becomes_admin(self, mock_db):
        mock_db.execute.side_effect = [
            make_result(scalar=0),
            make_result(one=None),
        ]
        data = UserCreate(name="Titolare", email="owner@example.com", password="segreta1")

        user = await AuthService().register(mock_db, data)

        assert user.role == UserRole.ADMIN.value
        assert user.hashed_password != "segreta1"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_register(self, mock_db):
        mock_db.execute.return_value = make_result(scalar=1)
        staff = SimpleNamespace(id=uuid.uuid4(), role=UserRole.STAFF.value)
        data = UserCreate(name="Nuovo", email="new@example.com", password="segreta1")

        with pytest.raises(AuthorizationError):
            await AuthService().register(mock_db, data, current_user=staff)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_db):
        admin = SimpleNamespace(id=uuid.uuid4(), role=UserRole.ADMIN.value)
        mock_db.execute.side_effect = [
            make_result(scalar=2),
            make_result(one=SimpleNamespace(id=uuid.uuid4())),
        ]
        data = UserCreate(name="Nuovo", email="new@example.com", password="segreta1")

        with pytest.raises(DuplicateError):
            await AuthService().register(mock_db, data, current_user=admin)


class TestRefreshTokens:
    """Un solo refresh token valido per utente, revocabile."""

    @pytest.fixture
    def user(self):
        return SimpleNamespace(
            id=uuid.uuid4(),
            email="sarta@example.com",
            role=UserRole.TAILOR.value,
            is_active=True,
            hashed_password=hash_password("segreta1"),
            refresh_token_id=None,
        )

    async def _login(self, mock_db, user):
        mock_db.execute.return_value = make_result(one=user)
        return await AuthService().login(
            mock_db, UserLogin(email=user.email, password="segreta1")
        )

    @pytest.mark.asyncio
    async def test_login_stores_token_id(self, mock_db, user):
        tokens = await self._login(mock_db, user)

        assert user.refresh_token_id is not None
        assert decode_token(tokens.refresh_token).jti == user.refresh_token_id
        mock_db.flush.assert_awaited()

    @pytest.mark.asyncio
    async def test_refresh_rotates_token(self, mock_db, user):
        tokens = await self._login(mock_db, user)
        service = AuthService()

        renewed = await service.refresh(mock_db, tokens.refresh_token)

        assert decode_token(renewed.refresh_token).jti == user.refresh_token_id
        with pytest.raises(HTTPException) as exc_info:
            await service.refresh(mock_db, tokens.refresh_token)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_revokes_refresh(self, mock_db, user):
        tokens = await self._login(mock_db, user)
        service = AuthService()

        await service.logout(mock_db, user)

        assert user.refresh_token_id is None
        with pytest.raises(HTTPException) as exc_info:
            await service.refresh(mock_db, tokens.refresh_token)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_password_change_revokes_refresh(self, mock_db, user):
        tokens = await self._login(mock_db, user)
        service = AuthService()

        await service.change_password(
            mock_db,
            user,
            PasswordChange(current_password="segreta1", new_password="nuova-segreta"),
        )

        assert user.refresh_token_id is None
        with pytest.raises(HTTPException):
            await service.refresh(mock_db, tokens.refresh_token)
