"""
Service Layer per Fatture e Pagamenti
Progetto: Tailor Manager (Gestionale Sartoria)

Gestisce l'emissione delle fatture dagli ordini e il registro incassi:
amount_paid, balance e status sono sempre ricalcolati dai pagamenti
registrati dopo ogni aggiunta o rimozione.
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BusinessValidationError, ConflictError, NotFoundError
from app.models import Invoice, Order, Payment
from app.schemas.invoice import InvoiceCreate, InvoiceStatus, InvoiceUpdate, PaymentCreate
from app.services.numbering import INVOICE_PREFIX, generate_identifier

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_invoice_total(subtotal, discount, tax) -> Decimal:
    """Totale fattura: subtotal - discount + tax."""
    return _to_decimal(subtotal) - _to_decimal(discount) + _to_decimal(tax)


def derive_payment_status(amount_paid, balance) -> InvoiceStatus:
    """
    Stato di pagamento in funzione di incassato e residuo.

    balance <= 0 -> Paid; amount_paid > 0 -> Partially Paid; altrimenti Unpaid.
    Cancelled non viene mai derivato.
    """
    if _to_decimal(balance) <= 0:
        return InvoiceStatus.PAID
    if _to_decimal(amount_paid) > 0:
        return InvoiceStatus.PARTIALLY_PAID
    return InvoiceStatus.UNPAID


def reconcile_ledger(invoice) -> None:
    """
    Ricalcola amount_paid, balance e status dal registro pagamenti.

    Una fattura annullata resta Cancelled: vengono aggiornati solo gli importi.
    """
    amount_paid = sum((_to_decimal(p.amount) for p in invoice.payments), Decimal("0"))
    invoice.amount_paid = amount_paid
    invoice.balance = _to_decimal(invoice.total_amount) - amount_paid

    if invoice.status != InvoiceStatus.CANCELLED.value:
        invoice.status = derive_payment_status(invoice.amount_paid, invoice.balance).value


class InvoiceService:
    """
    Service per la gestione di fatture e pagamenti.

    Fornisce metodi asincroni per interagire con il database
    in modo centralizzato, senza dipendenze da FastAPI.
    """

    async def get_all(
        self,
        db: AsyncSession,
        customer_id: Optional[uuid.UUID] = None,
        status_filter: Optional[InvoiceStatus] = None,
        due_from: Optional[datetime.datetime] = None,
        due_to: Optional[datetime.datetime] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[Invoice], int]:
        """
        Recupera la lista paginata delle fatture.

        Returns:
            Tuple di (lista fatture, totale count)
        """
        conditions = []

        if customer_id:
            conditions.append(Invoice.customer_id == customer_id)
        if status_filter:
            conditions.append(Invoice.status == status_filter.value)
        if due_from:
            conditions.append(Invoice.due_date >= due_from)
        if due_to:
            conditions.append(Invoice.due_date <= due_to)
        if search:
            conditions.append(Invoice.invoice_number.ilike(f"%{search}%"))

        query = select(Invoice)
        if conditions:
            query = query.where(and_(*conditions))

        offset = (page - 1) * per_page
        query = query.order_by(Invoice.created_at.desc()).offset(offset).limit(per_page)

        result = await db.execute(query)
        invoices = list(result.scalars().all())

        count_query = select(func.count()).select_from(Invoice)
        if conditions:
            count_query = count_query.where(and_(*conditions))
        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        logger.debug("Recuperate %d fatture su %d totali", len(invoices), total)
        return invoices, total

    async def get_by_id(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        for_update: bool = False,
    ) -> Invoice:
        """
        Recupera una fattura con ordine, cliente e pagamenti.

        Raises:
            NotFoundError: Se la fattura non esiste
        """
        query = select(Invoice).where(Invoice.id == invoice_id).execution_options(
            populate_existing=True
        )
        if for_update:
            query = query.with_for_update(of=Invoice)

        result = await db.execute(query)
        invoice = result.scalar_one_or_none()

        if not invoice:
            logger.warning("Fattura non trovata: %s", invoice_id)
            raise NotFoundError(f"Fattura con ID {invoice_id} non trovata")

        return invoice

    async def create(
        self,
        db: AsyncSession,
        data: InvoiceCreate,
        user_id: uuid.UUID,
        now: Optional[datetime.datetime] = None,
    ) -> Invoice:
        """
        Emette la fattura di un ordine.

        Steps:
        1. Verifica che l'ordine esista e non sia già fatturato
        2. subtotal di default = totale ordine, discount/tax di default = 0
        3. Calcola total_amount e lo stato iniziale
        4. Genera invoice_number progressivo (INV-YYMM-NNNN)

        La fattura e il riferimento inverso Order.invoice vengono scritti
        nella stessa transazione.

        Raises:
            NotFoundError: Ordine inesistente
            ConflictError: Ordine già fatturato
        """
        now = now or datetime.datetime.now(datetime.timezone.utc)

        order_result = await db.execute(
            select(Order).where(Order.id == data.order_id).with_for_update(of=Order)
        )
        order = order_result.scalar_one_or_none()

        if not order:
            logger.warning("Ordine non trovato: %s", data.order_id)
            raise NotFoundError(f"Ordine con ID {data.order_id} non trovato")

        if order.invoice is not None:
            logger.warning(
                "Ordine %s già fatturato con %s",
                data.order_id,
                order.invoice.invoice_number,
            )
            raise ConflictError(
                f"L'ordine è già stato fatturato: {order.invoice.invoice_number}"
            )

        subtotal = data.subtotal if data.subtotal is not None else order.total_amount
        discount = data.discount if data.discount is not None else Decimal("0")
        tax = data.tax if data.tax is not None else Decimal("0")

        invoice_number = await generate_identifier(
            db, Invoice, Invoice.invoice_number, INVOICE_PREFIX, now
        )

        invoice = Invoice(
            invoice_number=invoice_number,
            order_id=order.id,
            customer_id=order.customer_id,
            issue_date=data.issue_date or now,
            due_date=data.due_date or order.due_date,
            subtotal=subtotal,
            discount=discount,
            tax=tax,
            total_amount=compute_invoice_total(subtotal, discount, tax),
            status=InvoiceStatus.UNPAID.value,
            notes=data.notes,
            created_by_id=user_id,
            payments=[],
        )
        reconcile_ledger(invoice)

        order.invoice = invoice
        db.add(invoice)

        try:
            await db.flush()
        except IntegrityError as e:
            logger.error("Errore di integrità durante creazione fattura: %s", e)
            raise ConflictError("Errore durante la creazione della fattura")

        logger.info("Emessa fattura %s per ordine %s", invoice.invoice_number, order.order_number)
        return await self.get_by_id(db, invoice.id)

    async def update(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        data: InvoiceUpdate,
    ) -> Invoice:
        """
        Aggiorna scadenza, note e importi della fattura.

        Se cambia uno tra subtotal, discount e tax, total_amount viene
        ricalcolato dai valori aggiornati o esistenti. amount_paid, balance
        e status non vengono toccati.
        """
        invoice = await self.get_by_id(db, invoice_id, for_update=True)
        update_data = data.model_dump(exclude_unset=True)

        amounts_changed = any(
            update_data.get(field) is not None for field in ("subtotal", "discount", "tax")
        )

        for field in ("subtotal", "discount", "tax", "due_date"):
            if update_data.get(field) is not None:
                setattr(invoice, field, update_data[field])
        if "notes" in update_data:
            invoice.notes = update_data["notes"]

        if amounts_changed:
            invoice.total_amount = compute_invoice_total(
                invoice.subtotal, invoice.discount, invoice.tax
            )

        await db.flush()

        logger.info("Aggiornata fattura: %s", invoice_id)
        return invoice

    async def delete(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
    ) -> None:
        """
        Elimina una fattura senza pagamenti.

        Il riferimento inverso sull'ordine scompare con la fattura,
        rendendo l'ordine di nuovo fatturabile ed eliminabile.

        Raises:
            NotFoundError: Fattura non trovata
            ConflictError: La fattura ha pagamenti registrati
        """
        invoice = await self.get_by_id(db, invoice_id)

        if invoice.payments:
            logger.warning(
                "Impossibile eliminare fattura %s: %d pagamenti registrati",
                invoice_id,
                len(invoice.payments),
            )
            raise ConflictError(
                "Impossibile eliminare una fattura con pagamenti registrati. "
                "Rimuovere prima i pagamenti."
            )

        order = invoice.order
        await db.delete(invoice)
        await db.flush()

        if order is not None:
            db.expire(order, ["invoice"])

        logger.info("Eliminata fattura: %s", invoice_id)

    async def cancel(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
    ) -> Invoice:
        """Annulla la fattura. Lo stato Cancelled resta fino a eliminazione."""
        invoice = await self.get_by_id(db, invoice_id, for_update=True)

        if invoice.status == InvoiceStatus.CANCELLED.value:
            raise BusinessValidationError("La fattura è già annullata")

        invoice.status = InvoiceStatus.CANCELLED.value
        await db.flush()

        logger.info("Annullata fattura: %s", invoice_id)
        return invoice

    async def add_payment(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        data: PaymentCreate,
        user_id: uuid.UUID,
        now: Optional[datetime.datetime] = None,
    ) -> Invoice:
        """
        Registra un pagamento e ricalcola il registro.

        Args:
            db: Sessione database
            invoice_id: UUID della fattura
            data: Dati del pagamento
            user_id: Utente che registra il pagamento
            now: Istante corrente (default per la data del pagamento)

        Returns:
            Invoice: La fattura aggiornata

        Raises:
            BusinessValidationError: Importo o metodo mancanti
            NotFoundError: Fattura non trovata
        """
        if not data.amount or data.method is None:
            raise BusinessValidationError("Importo e metodo di pagamento sono obbligatori")

        now = now or datetime.datetime.now(datetime.timezone.utc)
        invoice = await self.get_by_id(db, invoice_id, for_update=True)

        payment = Payment(
            amount=data.amount,
            method=data.method.value,
            date=data.date or now,
            transaction_id=data.transaction_id,
            notes=data.notes,
            recorded_by_id=user_id,
        )
        invoice.payments.append(payment)
        reconcile_ledger(invoice)

        await db.flush()

        logger.info(
            "Pagamento di %s registrato su fattura %s (residuo %s, stato %s)",
            data.amount,
            invoice.invoice_number,
            invoice.balance,
            invoice.status,
        )
        return invoice

    async def remove_payment(
        self,
        db: AsyncSession,
        invoice_id: uuid.UUID,
        payment_id: uuid.UUID,
    ) -> Invoice:
        """
        Rimuove un pagamento (es. per errore di registrazione).

        Raises:
            NotFoundError: Fattura o pagamento non trovati
        """
        invoice = await self.get_by_id(db, invoice_id, for_update=True)

        payment = next((p for p in invoice.payments if p.id == payment_id), None)
        if payment is None:
            logger.warning("Pagamento %s non trovato sulla fattura %s", payment_id, invoice_id)
            raise NotFoundError(f"Pagamento con ID {payment_id} non trovato")

        invoice.payments.remove(payment)
        reconcile_ledger(invoice)

        await db.flush()

        logger.info(
            "Rimosso pagamento %s dalla fattura %s (residuo %s, stato %s)",
            payment_id,
            invoice.invoice_number,
            invoice.balance,
            invoice.status,
        )
        return invoice
