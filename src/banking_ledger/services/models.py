"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from banking_ledger.domain.models import Transaction


class LedgerErrorKind(Enum):
    """Recoverable failures reported back to the user as messages"""
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NEGATIVE_BALANCE = "negative_balance"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AddResult:
    """
    Outcome of validating a new transaction.

    On success `delta` is the signed change to apply to the balance.
    On failure `delta` is zero and `error` holds the user-facing message.
    """
    delta: Decimal = Decimal("0")
    error: Optional[str] = None
    error_kind: Optional[LedgerErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UpdateResult:
    """
    Outcome of validating an edit.

    `new_balance` is the balance to apply on success, and the
    untouched current balance on failure.
    """
    new_balance: Decimal
    error: Optional[str] = None
    error_kind: Optional[LedgerErrorKind] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class PageView:
    """One page of the filtered, date-sorted ledger"""
    visible: List[Transaction] = field(default_factory=list)
    total_matched: int = 0
    page_count: int = 1
    page: int = 1

    @property
    def is_empty(self) -> bool:
        return not self.visible

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def has_previous(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class BalanceSummary:
    """
    Balance card figures.

    Income and expenses are totals over the transactions currently in the
    ledger, independent of any filter.
    """
    balance: Decimal
    total_income: Decimal
    total_expenses: Decimal

    @classmethod
    def from_transactions(cls, balance: Decimal, transactions: List[Transaction]) -> "BalanceSummary":
        income = sum((t.amount for t in transactions if t.signed_amount > 0), Decimal("0"))
        expenses = sum((t.amount for t in transactions if t.signed_amount < 0), Decimal("0"))
        return cls(balance=balance, total_income=income, total_expenses=expenses)

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0


@dataclass
class ImportResult:
    """
    Result of importing a CSV file into the ledger.
    """
    imported: List[Transaction] = field(default_factory=list)
    delta: Decimal = Decimal("0")
    filepath: str = ""

    @property
    def count(self) -> int:
        return len(self.imported)

    @property
    def success(self) -> bool:
        """Import is successful if at least one transaction is imported"""
        return self.count > 0

    def __str__(self) -> str:
        if not self.success:
            return "No valid transactions found"
        return f"Imported {self.count} transactions"
