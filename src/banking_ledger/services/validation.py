"""
Balance checks run before any mutation reaches the ledger state machine.

All functions are pure: they compute what a mutation would do to the
balance and report a message when it is not allowed. Nothing here touches
ledger state.
"""
from decimal import Decimal
from typing import Iterable, Optional

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import Transaction
from banking_ledger.services.models import AddResult, LedgerErrorKind, UpdateResult

DEFAULT_CURRENCY = "EUR"

TRANSACTION_NOT_FOUND = "Transaction not found"


def validate_add(
    transaction: Transaction,
    current_balance: Decimal,
    currency: str = DEFAULT_CURRENCY,
) -> AddResult:
    """
    Validate and calculate the balance change for adding a transaction.

    Args:
        transaction: The new transaction
        current_balance: Balance before the transaction is applied
        currency: Currency code used in the error message

    Returns:
        AddResult with the signed delta, or an insufficient balance error
        when a withdrawal exceeds what is available.
    """
    if transaction.type == TransactionType.WITHDRAWAL and transaction.amount > current_balance:
        return AddResult(
            error=f"Insufficient balance. Available: {current_balance:.2f} {currency}",
            error_kind=LedgerErrorKind.INSUFFICIENT_BALANCE,
        )

    return AddResult(delta=transaction.signed_amount)


def validate_update(
    new_transaction: Transaction,
    old_transaction: Optional[Transaction],
    current_balance: Decimal,
    currency: str = DEFAULT_CURRENCY,
) -> UpdateResult:
    """
    Validate and calculate the new balance for replacing a transaction.

    The old transaction's effect is removed and the new one applied.
    An edit that would take the balance below zero, or one whose original
    is missing from the ledger, is rejected and the result carries the
    unchanged balance.
    """
    if old_transaction is None:
        return UpdateResult(
            new_balance=current_balance,
            error=TRANSACTION_NOT_FOUND,
            error_kind=LedgerErrorKind.NOT_FOUND,
        )

    new_balance = current_balance - old_transaction.signed_amount + new_transaction.signed_amount

    if new_balance < 0:
        return UpdateResult(
            new_balance=current_balance,
            error=f"This would result in negative balance: {new_balance:.2f} {currency}",
            error_kind=LedgerErrorKind.NEGATIVE_BALANCE,
        )

    return UpdateResult(new_balance=new_balance)


def compute_import_delta(transactions: Iterable[Transaction]) -> Decimal:
    """
    Total balance change for a batch import.

    Imports are applied whole and are not checked against going negative.
    """
    return sum((t.signed_amount for t in transactions), Decimal("0"))
