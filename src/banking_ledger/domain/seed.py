"""
Sample ledger used on first start, before anything has been saved.
"""
from datetime import date
from decimal import Decimal
from typing import List

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import LedgerSnapshot, Transaction

INITIAL_BALANCE = Decimal("5847.32")

# (id, type, amount, description, date)
_SEED_ROWS = [
    ("txn-1", TransactionType.DEPOSIT, "3500.00", "Salary", date(2025, 12, 1)),
    ("txn-2", TransactionType.WITHDRAWAL, "89.99", "Amazon Order", date(2025, 12, 2)),
    ("txn-3", TransactionType.WITHDRAWAL, "45.50", "Grocery Shopping", date(2025, 12, 3)),
    ("txn-4", TransactionType.WITHDRAWAL, "120.00", "Electricity Bill", date(2025, 12, 4)),
    ("txn-5", TransactionType.WITHDRAWAL, "250.00", "Rent Share", date(2025, 12, 5)),
    ("txn-6", TransactionType.WITHDRAWAL, "14.99", "Netflix Subscription", date(2025, 12, 6)),
    ("txn-7", TransactionType.DEPOSIT, "150.00", "Refund", date(2025, 12, 7)),
    ("txn-8", TransactionType.WITHDRAWAL, "32.80", "Restaurant", date(2025, 12, 8)),
    ("txn-9", TransactionType.WITHDRAWAL, "199.00", "Electronics Store", date(2025, 12, 9)),
    ("txn-10", TransactionType.DEPOSIT, "500.00", "Freelance Payment", date(2025, 12, 10)),
    ("txn-11", TransactionType.WITHDRAWAL, "65.00", "Gas Station", date(2025, 12, 11)),
    ("txn-12", TransactionType.WITHDRAWAL, "25.99", "Book Store", date(2025, 12, 12)),
    ("txn-13", TransactionType.WITHDRAWAL, "55.00", "Internet Bill", date(2025, 12, 14)),
]


def seed_transactions() -> List[Transaction]:
    return [
        Transaction(
            id=txn_id,
            type=txn_type,
            amount=Decimal(amount),
            description=description,
            date=txn_date,
        )
        for txn_id, txn_type, amount, description, txn_date in _SEED_ROWS
    ]


def seed_snapshot(initial_balance: Decimal = INITIAL_BALANCE) -> LedgerSnapshot:
    """Default dataset: the sample transactions with the configured balance"""
    return LedgerSnapshot(
        balance=initial_balance,
        transactions=tuple(seed_transactions()),
    )
