from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple

from banking_ledger.domain.actions import LastAction
from banking_ledger.domain.models import LedgerSnapshot, Transaction, TransactionFilter


@dataclass(frozen=True)
class LedgerState:
    """Immutable value the ledger state machine transforms"""
    snapshot: LedgerSnapshot
    filter: TransactionFilter = field(default_factory=TransactionFilter)
    current_page: int = 1
    last_action: Optional[LastAction] = None
    editing: Optional[Transaction] = None
    reusing: Optional[Transaction] = None

    @property
    def balance(self) -> Decimal:
        return self.snapshot.balance

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self.snapshot.transactions

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> "LedgerState":
        return cls(snapshot=snapshot)
