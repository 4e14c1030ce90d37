"""Tests for the ledger service."""

from datetime import date, datetime

import pytest

from pasarantar.models.common import TransactionType
from pasarantar.models.ledger import TransactionCreate, TransactionFilter


@pytest.fixture
def seeded_ledger(ledger_service):
    entries = [
        (TransactionType.INCOME, 500000, "Penjualan Online", datetime(2024, 3, 5)),
        (TransactionType.EXPENSE, 200000, "Belanja Pasar (HPP)", datetime(2024, 3, 6)),
        (TransactionType.EXPENSE, 30000, "Bensin", datetime(2024, 3, 20)),
        (TransactionType.CAPITAL, 1000000, "Modal Awal", datetime(2024, 2, 1)),
    ]
    for tx_type, amount, category, when in entries:
        ledger_service.create_transaction(TransactionCreate(
            type=tx_type, amount=amount, category=category, date=when,
        ))
    return ledger_service


def test_create_transaction(ledger_service):
    tx = ledger_service.create_transaction(TransactionCreate(
        type=TransactionType.EXPENSE, amount=15000, category=" Parkir ",
    ))

    assert tx.id.startswith("tx_")
    assert tx.category == "Parkir"
    assert ledger_service.get_transaction(tx.id) == tx


def test_blank_category_rejected(ledger_service):
    with pytest.raises(ValueError):
        ledger_service.create_transaction(TransactionCreate(
            type=TransactionType.EXPENSE, amount=1000, category="  ",
        ))


def test_list_newest_first(seeded_ledger):
    dates = [t.date for t in seeded_ledger.list_transactions()]
    assert dates == sorted(dates, reverse=True)


def test_filter_by_type(seeded_ledger):
    result = seeded_ledger.list_transactions(TransactionFilter(type=TransactionType.EXPENSE))
    assert {t.category for t in result} == {"Belanja Pasar (HPP)", "Bensin"}


def test_filter_by_category_substring(seeded_ledger):
    result = seeded_ledger.list_transactions(TransactionFilter(category="belanja"))
    assert [t.amount for t in result] == [200000]


def test_filter_by_date_range(seeded_ledger):
    result = seeded_ledger.list_transactions(TransactionFilter(
        start_date=date(2024, 3, 1), end_date=date(2024, 3, 10),
    ))
    assert len(result) == 2


def test_filter_by_month(seeded_ledger):
    result = seeded_ledger.list_transactions(TransactionFilter(month=2, year=2024))
    assert [t.type for t in result] == [TransactionType.CAPITAL]


def test_summarize_filtered(seeded_ledger):
    summary = seeded_ledger.summarize(TransactionFilter(month=3, year=2024))

    assert summary.total_income == 500000
    assert summary.total_expense == 230000
    assert summary.total_capital == 0
    assert summary.net_profit == 270000


def test_delete_transaction(ledger_service):
    tx = ledger_service.create_transaction(TransactionCreate(
        type=TransactionType.INCOME, amount=1000, category="Lain-lain",
    ))

    assert ledger_service.delete_transaction(tx.id) is True
    assert ledger_service.delete_transaction(tx.id) is False
    assert ledger_service.list_transactions() == []
