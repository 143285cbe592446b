"""
Unit tests per la numerazione progressiva ORD/INV.
"""

from datetime import date, datetime, timezone

import pytest

from app.services.numbering import (
    INVOICE_PREFIX,
    ORDER_PREFIX,
    generate_identifier,
    local_date,
    next_identifier,
)
from app.models import Order
from conftest import make_result


class TestNextIdentifier:
    """Test del calcolo del prossimo identificativo."""

    def test_increments_previous_month_sequence(self):
        """Il progressivo prosegue anche al cambio mese."""
        result = next_identifier(ORDER_PREFIX, date(2024, 5, 15), "ORD-2404-0099")
        assert result == "ORD-2405-0100"

    def test_first_identifier(self):
        assert next_identifier(INVOICE_PREFIX, date(2024, 5, 1), None) == "INV-2405-0001"

    def test_unparseable_tail_restarts(self):
        assert next_identifier(ORDER_PREFIX, date(2024, 12, 3), "ORD-legacy") == "ORD-2412-0001"

    def test_year_is_two_digits(self):
        assert next_identifier(ORDER_PREFIX, date(2031, 1, 9), "ORD-3012-0007") == "ORD-3101-0008"

    def test_grows_past_four_digits(self):
        """Oltre 9999 il numero cresce senza troncamento."""
        assert next_identifier(ORDER_PREFIX, date(2024, 5, 15), "ORD-2405-9999") == "ORD-2405-10000"

    def test_five_digit_tail_reads_last_four(self):
        """Vengono letti solo gli ultimi 4 caratteri."""
        assert next_identifier(ORDER_PREFIX, date(2024, 5, 15), "ORD-2405-10000") == "ORD-2405-0001"

    def test_tails_increase_within_month(self):
        previous = None
        tails = []
        for _ in range(5):
            previous = next_identifier(ORDER_PREFIX, date(2024, 5, 15), previous)
            tails.append(int(previous[-4:]))
        assert tails == sorted(tails)
        assert len(set(tails)) == len(tails)


class TestLocalDate:
    """Test della data di calendario del negozio."""

    def test_naive_datetime_is_utc(self):
        assert local_date(datetime(2024, 5, 31, 23, 0)) == date(2024, 5, 31)

    def test_aware_datetime(self):
        now = datetime(2024, 5, 15, 10, 30, tzinfo=timezone.utc)
        assert local_date(now) == date(2024, 5, 15)


class TestGenerateIdentifier:
    """Test della generazione con lettura dell'ultimo record."""

    @pytest.mark.asyncio
    async def test_reads_most_recent(self, mock_db, now):
        mock_db.execute.return_value = make_result(one="ORD-2404-0099")

        result = await generate_identifier(mock_db, Order, Order.order_number, ORDER_PREFIX, now)

        assert result == "ORD-2405-0100"
        mock_db.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_table(self, mock_db, now):
        mock_db.execute.return_value = make_result(one=None)

        result = await generate_identifier(mock_db, Order, Order.order_number, ORDER_PREFIX, now)

        assert result == "ORD-2405-0001"
