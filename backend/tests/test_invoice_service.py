"""
Unit tests per InvoiceService.

Verificano emissione della fattura da un ordine, registro incassi
(amount_paid, balance, status) e vincoli su eliminazione e annullamento.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    PaymentCreate,
    PaymentMethod,
)
from app.services.invoice_service import (
    InvoiceService,
    compute_invoice_total,
    derive_payment_status,
    reconcile_ledger,
)
from conftest import MockInvoice, MockOrder, MockPayment, make_result


# ============================================================
# Tests per le funzioni di calcolo
# ============================================================


class TestInvoiceTotals:
    """Test del totale fattura."""

    def test_total(self):
        assert compute_invoice_total(Decimal("1000"), Decimal("100"), Decimal("50")) == Decimal("950")

    def test_missing_values_count_as_zero(self):
        assert compute_invoice_total(Decimal("300"), None, None) == Decimal("300")


class TestPaymentStatus:
    """Test dello stato di pagamento."""

    def test_unpaid(self):
        assert derive_payment_status(Decimal("0"), Decimal("1000")) == InvoiceStatus.UNPAID

    def test_partially_paid(self):
        assert derive_payment_status(Decimal("400"), Decimal("600")) == InvoiceStatus.PARTIALLY_PAID

    def test_paid(self):
        assert derive_payment_status(Decimal("1000"), Decimal("0")) == InvoiceStatus.PAID

    def test_overpaid_is_paid(self):
        assert derive_payment_status(Decimal("1200"), Decimal("-200")) == InvoiceStatus.PAID

    def test_zero_total_is_paid(self):
        assert derive_payment_status(Decimal("0"), Decimal("0")) == InvoiceStatus.PAID


class TestReconcileLedger:
    """Test del ricalcolo del registro."""

    def test_sums_payments(self):
        invoice = MockInvoice(payments=[
            MockPayment(amount=Decimal("250")),
            MockPayment(amount=Decimal("150")),
        ])

        reconcile_ledger(invoice)

        assert invoice.amount_paid == Decimal("400")
        assert invoice.balance == Decimal("600")
        assert invoice.status == "Partially Paid"

    def test_cancelled_keeps_status(self):
        invoice = MockInvoice(status="Cancelled", payments=[MockPayment(amount=Decimal("1000"))])

        reconcile_ledger(invoice)

        assert invoice.balance == Decimal("0")
        assert invoice.status == "Cancelled"


# ============================================================
# Tests per il registro pagamenti
# ============================================================


class TestPayments:
    """Test di add_payment e remove_payment."""

    @pytest.mark.asyncio
    async def test_payment_ledger_sequence(self, mock_db, mock_invoice, now, user_id):
        """400 + 600 su 1000, poi rimozione del primo pagamento."""
        mock_db.execute.return_value = make_result(one=mock_invoice)
        service = InvoiceService()

        await service.add_payment(
            mock_db, mock_invoice.id,
            PaymentCreate(amount=Decimal("400"), method=PaymentMethod.CASH),
            user_id, now=now,
        )
        assert mock_invoice.amount_paid == Decimal("400")
        assert mock_invoice.balance == Decimal("600")
        assert mock_invoice.status == "Partially Paid"

        await service.add_payment(
            mock_db, mock_invoice.id,
            PaymentCreate(amount=Decimal("600"), method=PaymentMethod.MOBILE_MONEY),
            user_id, now=now,
        )
        assert mock_invoice.amount_paid == Decimal("1000")
        assert mock_invoice.balance == Decimal("0")
        assert mock_invoice.status == "Paid"

        first = mock_invoice.payments[0]
        first.id = uuid.uuid4()
        await service.remove_payment(mock_db, mock_invoice.id, first.id)

        assert mock_invoice.amount_paid == Decimal("600")
        assert mock_invoice.balance == Decimal("400")
        assert mock_invoice.status == "Partially Paid"
        assert len(mock_invoice.payments) == 1

    @pytest.mark.asyncio
    async def test_payment_defaults(self, mock_db, mock_invoice, now, user_id):
        mock_db.execute.return_value = make_result(one=mock_invoice)

        await InvoiceService().add_payment(
            mock_db, mock_invoice.id,
            PaymentCreate(amount=Decimal("100"), method=PaymentMethod.CARD),
            user_id, now=now,
        )

        payment = mock_invoice.payments[0]
        assert payment.date == now
        assert payment.method == "Card"
        assert payment.recorded_by_id == user_id

    @pytest.mark.asyncio
    async def test_missing_amount(self, mock_db, user_id):
        with pytest.raises(BusinessValidationError):
            await InvoiceService().add_payment(
                mock_db, uuid.uuid4(), PaymentCreate(method=PaymentMethod.CASH), user_id
            )
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_method(self, mock_db, user_id):
        with pytest.raises(BusinessValidationError):
            await InvoiceService().add_payment(
                mock_db, uuid.uuid4(), PaymentCreate(amount=Decimal("10")), user_id
            )

    @pytest.mark.asyncio
    async def test_payment_on_missing_invoice(self, mock_db, user_id):
        mock_db.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await InvoiceService().add_payment(
                mock_db, uuid.uuid4(),
                PaymentCreate(amount=Decimal("10"), method=PaymentMethod.CASH),
                user_id,
            )

    @pytest.mark.asyncio
    async def test_remove_unknown_payment(self, mock_db, user_id):
        invoice = MockInvoice(payments=[MockPayment(amount=Decimal("200"))])
        mock_db.execute.return_value = make_result(one=invoice)

        with pytest.raises(NotFoundError):
            await InvoiceService().remove_payment(mock_db, invoice.id, uuid.uuid4())

        assert len(invoice.payments) == 1

    @pytest.mark.asyncio
    async def test_payment_on_cancelled_invoice(self, mock_db, now, user_id):
        invoice = MockInvoice(status="Cancelled")
        mock_db.execute.return_value = make_result(one=invoice)

        await InvoiceService().add_payment(
            mock_db, invoice.id,
            PaymentCreate(amount=Decimal("1000"), method=PaymentMethod.CASH),
            user_id, now=now,
        )

        assert invoice.balance == Decimal("0")
        assert invoice.status == "Cancelled"


# ============================================================
# Tests per l'emissione della fattura
# ============================================================


class TestCreateInvoice:
    """Test di InvoiceService.create."""

    @pytest.mark.asyncio
    async def test_order_already_invoiced(self, mock_db, mock_invoice, user_id):
        order = MockOrder(invoice=mock_invoice)
        mock_db.execute.return_value = make_result(one=order)

        with pytest.raises(ConflictError):
            await InvoiceService().create(mock_db, InvoiceCreate(order_id=order.id), user_id)

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_order(self, mock_db, user_id):
        mock_db.execute.return_value = make_result(one=None)

        with pytest.raises(NotFoundError):
            await InvoiceService().create(mock_db, InvoiceCreate(order_id=uuid.uuid4()), user_id)

    @pytest.mark.asyncio
    async def test_duplicate_invoice_number(self, mock_db, now, user_id):
        """Il vincolo univoco sul numero fattura diventa un conflitto."""
        order = MockOrder()
        mock_db.execute.side_effect = [
            make_result(one=order),
            make_result(one="INV-2405-0003"),
        ]
        mock_db.flush.side_effect = IntegrityError(
            "INSERT INTO invoices", {}, Exception("uq_invoices_invoice_number")
        )

        with pytest.raises(ConflictError):
            await InvoiceService().create(
                mock_db, InvoiceCreate(order_id=order.id), user_id, now=now
            )

        assert mock_db.add.call_args[0][0].invoice_number == "INV-2405-0004"

    @pytest.mark.asyncio
    async def test_defaults_from_order(self, mock_db, now, user_id):
        due = now + timedelta(days=14)
        order = MockOrder(total_amount=Decimal("1000"), due_date=due)
        created = MockInvoice()
        mock_db.execute.side_effect = [
            make_result(one=order),
            make_result(one="INV-2404-0041"),
            make_result(one=created),
        ]

        result = await InvoiceService().create(
            mock_db, InvoiceCreate(order_id=order.id), user_id, now=now
        )

        assert result is created
        invoice = mock_db.add.call_args[0][0]
        assert order.invoice is invoice
        assert invoice.invoice_number == "INV-2405-0042"
        assert invoice.subtotal == Decimal("1000")
        assert invoice.total_amount == Decimal("1000")
        assert invoice.amount_paid == Decimal("0")
        assert invoice.balance == Decimal("1000")
        assert invoice.status == "Unpaid"
        assert invoice.due_date == due
        assert invoice.issue_date == now
        assert invoice.created_by_id == user_id

    @pytest.mark.asyncio
    async def test_discount_and_tax(self, mock_db, now, user_id):
        order = MockOrder(total_amount=Decimal("1000"), due_date=now)
        mock_db.execute.side_effect = [
            make_result(one=order),
            make_result(one=None),
            make_result(one=MockInvoice()),
        ]
        data = InvoiceCreate(order_id=order.id, discount=Decimal("100"), tax=Decimal("90"))

        await InvoiceService().create(mock_db, data, user_id, now=now)

        invoice = mock_db.add.call_args[0][0]
        assert invoice.total_amount == Decimal("990")
        assert invoice.balance == Decimal("990")


# ============================================================
# Tests per aggiornamento, eliminazione e annullamento
# ============================================================


class TestInvoiceLifecycle:
    """Test di update, delete e cancel."""

    @pytest.mark.asyncio
    async def test_update_recomputes_total(self, mock_db):
        invoice = MockInvoice(amount_paid=Decimal("200"), balance=Decimal("800"), status="Partially Paid")
        mock_db.execute.return_value = make_result(one=invoice)

        await InvoiceService().update(mock_db, invoice.id, InvoiceUpdate(discount=Decimal("100")))

        assert invoice.total_amount == Decimal("900")
        # Il registro incassi non viene toccato
        assert invoice.amount_paid == Decimal("200")
        assert invoice.balance == Decimal("800")
        assert invoice.status == "Partially Paid"

    @pytest.mark.asyncio
    async def test_update_notes_only(self, mock_db):
        invoice = MockInvoice()
        mock_db.execute.return_value = make_result(one=invoice)

        await InvoiceService().update(mock_db, invoice.id, InvoiceUpdate(notes="Ritiro sabato"))

        assert invoice.notes == "Ritiro sabato"
        assert invoice.total_amount == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_delete_with_payments(self, mock_db):
        invoice = MockInvoice(payments=[MockPayment()])
        mock_db.execute.return_value = make_result(one=invoice)

        with pytest.raises(ConflictError):
            await InvoiceService().delete(mock_db, invoice.id)

        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_releases_order(self, mock_db, mock_order):
        invoice = MockInvoice(order=mock_order)
        mock_order.invoice = invoice
        mock_db.execute.return_value = make_result(one=invoice)

        await InvoiceService().delete(mock_db, invoice.id)

        mock_db.delete.assert_awaited_once_with(invoice)
        mock_db.expire.assert_called_once_with(mock_order, ["invoice"])

    @pytest.mark.asyncio
    async def test_cancel(self, mock_db, mock_invoice):
        mock_db.execute.return_value = make_result(one=mock_invoice)

        await InvoiceService().cancel(mock_db, mock_invoice.id)

        assert mock_invoice.status == "Cancelled"

    @pytest.mark.asyncio
    async def test_cancel_twice(self, mock_db):
        invoice = MockInvoice(status="Cancelled")
        mock_db.execute.return_value = make_result(one=invoice)

        with pytest.raises(BusinessValidationError):
            await InvoiceService().cancel(mock_db, invoice.id)
