import pytest
from datetime import date
from decimal import Decimal
from typing import List

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import LedgerSnapshot, Transaction
from banking_ledger.parsers.csv_ledger import CsvLedgerParser
from banking_ledger.repositories.base import KeyValueStore
from banking_ledger.services.ledger_service import LedgerService


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests that don't need SQLite"""

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        return self.data.pop(key, None) is not None


def make_transaction(
    txn_id: str,
    amount: str,
    transaction_type: TransactionType = TransactionType.WITHDRAWAL,
    description: str = "Test Purchase",
    txn_date: date = date(2025, 12, 1),
) -> Transaction:
    return Transaction(
        id=txn_id,
        type=transaction_type,
        amount=Decimal(amount),
        description=description,
        date=txn_date,
    )


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()

@pytest.fixture
def csv_parser() -> CsvLedgerParser:
    """Create a parser instance for each test"""
    return CsvLedgerParser()

@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Three transactions, newest first as the ledger keeps them"""
    return [
        make_transaction("t3", "40.00", TransactionType.WITHDRAWAL, "Groceries", date(2025, 12, 3)),
        make_transaction("t2", "250.00", TransactionType.DEPOSIT, "Salary", date(2025, 12, 2)),
        make_transaction("t1", "15.50", TransactionType.WITHDRAWAL, "Coffee beans", date(2025, 12, 1)),
    ]

@pytest.fixture
def empty_service() -> LedgerService:
    """Ledger with balance 100 and no transactions, no persistence"""
    return LedgerService(initial_snapshot=LedgerSnapshot(balance=Decimal("100")))

@pytest.fixture
def service(sample_transactions) -> LedgerService:
    """Ledger with balance 500 and the sample transactions, no persistence"""
    return LedgerService(
        initial_snapshot=LedgerSnapshot(
            balance=Decimal("500"),
            transactions=tuple(sample_transactions),
        )
    )

@pytest.fixture
def make_txn():
    """Factory for transactions with sensible defaults"""
    return make_transaction
