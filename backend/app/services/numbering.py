"""
Numerazione progressiva di ordini e fatture
Progetto: Tailor Manager (Gestionale Sartoria)

Formato: {PREFIX}-{YY}{MM}-{NNNN} (es. ORD-2405-0001, INV-2405-0001).

Il progressivo NON riparte ogni mese: deriva dall'ultimo record creato
con lo stesso prefisso, indipendentemente dal mese del suo identificativo.
"""

import datetime
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings

logger = logging.getLogger(__name__)

ORDER_PREFIX = "ORD"
INVOICE_PREFIX = "INV"

# Numero di caratteri finali letti come progressivo
SEQUENCE_DIGITS = 4


def next_identifier(
    prefix: str,
    current_date: datetime.date,
    most_recent: Optional[str],
) -> str:
    """
    Calcola il prossimo identificativo per un prefisso.

    Il progressivo è dato dalle ultime 4 cifre di most_recent + 1; se
    most_recent è assente o non interpretabile si parte da 1. Oltre 9999
    il numero cresce senza troncamento.

    Args:
        prefix: Prefisso (es. "ORD")
        current_date: Data di riferimento per anno e mese
        most_recent: Identificativo del record più recente con lo stesso prefisso

    Returns:
        str: Nuovo identificativo

    Example:
        >>> next_identifier("ORD", date(2024, 5, 15), "ORD-2404-0099")
        'ORD-2405-0100'
    """
    sequence = 1
    if most_recent:
        tail = most_recent[-SEQUENCE_DIGITS:]
        if tail.isdigit():
            sequence = int(tail) + 1

    yy = current_date.year % 100
    return f"{prefix}-{yy:02d}{current_date.month:02d}-{sequence:04d}"


def local_date(now: datetime.datetime) -> datetime.date:
    """Data di calendario di `now` nel fuso orario del negozio."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)
    return now.astimezone(settings.tzinfo).date()


async def generate_identifier(
    db: AsyncSession,
    model,
    column,
    prefix: str,
    now: datetime.datetime,
) -> str:
    """
    Genera il prossimo identificativo leggendo il record più recente.

    Nessun controllo di univocità: le collisioni emergono dal vincolo
    unique sulla colonna al momento del flush.

    Args:
        db: Sessione database
        model: Modello ORM (Order o Invoice)
        column: Colonna con l'identificativo (es. Order.order_number)
        prefix: Prefisso dell'identificativo
        now: Istante corrente

    Returns:
        str: Nuovo identificativo
    """
    stmt = (
        select(column)
        .select_from(model)
        .order_by(model.created_at.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    most_recent = result.scalar_one_or_none()

    identifier = next_identifier(prefix, local_date(now), most_recent)
    logger.debug("Generato identificativo %s (precedente: %s)", identifier, most_recent)
    return identifier
