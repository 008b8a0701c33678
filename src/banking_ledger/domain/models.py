import secrets
import string
import time
from dataclasses import dataclass, field
from decimal import Decimal, DecimalException
from datetime import date
from typing import Optional, Tuple
from banking_ledger.domain.enums import FilterType, TransactionType

_ID_ALPHABET = string.ascii_lowercase + string.digits

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("1000000000000")


def generate_id() -> str:
    """Create a transaction id like 'txn-1733140000000-k3j9x0a'"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"txn-{int(time.time() * 1000)}-{suffix}"


def parse_money(value) -> Optional[Decimal]:
    """
    Parse text into an amount rounded to cents.

    Returns:
        The signed amount, or None when it is not a finite number or its
        magnitude exceeds MAX_AMOUNT
    """
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite() or amount.copy_abs() > MAX_AMOUNT:
            return None
        return amount.quantize(CENTS)
    except DecimalException:
        return None


@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single ledger entry"""
    id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: date

    @property
    def signed_amount(self) -> Decimal:
        """Return amount with sign, i.e. the effect on the balance"""
        return self.amount if self.type == TransactionType.DEPOSIT else -self.amount

    def __repr__(self):
        sign = "+" if self.type == TransactionType.DEPOSIT else "-"
        return f"Transaction({self.id}, {self.date}, {self.description[:30]}, {sign}{self.amount})"


@dataclass(frozen=True)
class TransactionFilter:
    """
    View-only filter over the ledger.

    Date bounds are inclusive, None means unbounded.
    """
    type: FilterType = FilterType.ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search_term: str = ""

    def matches(self, transaction: Transaction) -> bool:
        if not self.type.matches(transaction.type):
            return False
        if self.date_from and transaction.date < self.date_from:
            return False
        if self.date_to and transaction.date > self.date_to:
            return False
        if self.search_term:
            if self.search_term.lower() not in transaction.description.lower():
                return False
        return True

    @property
    def is_default(self) -> bool:
        return self == TransactionFilter()


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    The persisted part of the ledger: running balance plus transactions.

    Transactions are kept newest-first in insertion order.
    """
    balance: Decimal
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    @property
    def net_effect(self) -> Decimal:
        """Sum of the signed effects of every transaction present"""
        return sum((t.signed_amount for t in self.transactions), Decimal("0"))
