"""
Operations accepted by the ledger state machine and the undo records it keeps.

Every operation is its own dataclass so the reducer can dispatch with
``match`` and have the type checker prove every variant is handled.
Operations that change the balance carry values already checked by
``banking_ledger.services.validation``.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from banking_ledger.domain.models import LedgerSnapshot, Transaction


# Undo records

@dataclass(frozen=True)
class AddedTransaction:
    transaction: Transaction
    previous_balance: Decimal


@dataclass(frozen=True)
class DeletedTransaction:
    transaction: Transaction
    previous_balance: Decimal
    position: int = 0 # index the transaction was removed from


@dataclass(frozen=True)
class EditedTransaction:
    transaction: Transaction
    previous_balance: Decimal
    old_transaction: Transaction


LastAction = Union[AddedTransaction, DeletedTransaction, EditedTransaction]


# Operations

@dataclass(frozen=True)
class AddTransaction:
    transaction: Transaction
    delta: Decimal


@dataclass(frozen=True)
class DeleteTransaction:
    transaction_id: str


@dataclass(frozen=True)
class UpdateTransaction:
    transaction: Transaction
    new_balance: Decimal
    old_transaction: Transaction


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class ImportTransactions:
    transactions: Tuple[Transaction, ...]
    delta: Decimal


@dataclass(frozen=True)
class SetFilter:
    """Partial filter update, keys are TransactionFilter field names"""
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResetFilter:
    pass


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SetEditing:
    transaction: Optional[Transaction]


@dataclass(frozen=True)
class SetReusing:
    transaction: Optional[Transaction]


@dataclass(frozen=True)
class LoadSaved:
    snapshot: LedgerSnapshot


LedgerOperation = Union[
    AddTransaction,
    DeleteTransaction,
    UpdateTransaction,
    Undo,
    ImportTransactions,
    SetFilter,
    ResetFilter,
    SetPage,
    SetEditing,
    SetReusing,
    LoadSaved,
]
