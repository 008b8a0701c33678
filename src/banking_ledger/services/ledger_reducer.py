"""
Ledger state machine.

`apply` is the single place where ledger state changes. It takes the current
`LedgerState` and one operation and returns a new state; the input state is
never modified. Operations that move the balance arrive already validated,
so there is no error path in here.
"""
from dataclasses import replace
from typing import Optional, assert_never

from banking_ledger.domain.actions import (
    AddedTransaction,
    AddTransaction,
    DeletedTransaction,
    DeleteTransaction,
    EditedTransaction,
    ImportTransactions,
    LastAction,
    LedgerOperation,
    LoadSaved,
    ResetFilter,
    SetEditing,
    SetFilter,
    SetPage,
    SetReusing,
    Undo,
    UpdateTransaction,
)
from banking_ledger.domain.models import LedgerSnapshot, Transaction, TransactionFilter
from banking_ledger.domain.state import LedgerState


def apply(state: LedgerState, operation: LedgerOperation) -> LedgerState:
    """
    Apply an operation and return the resulting state.

    Args:
        state: Current ledger state
        operation: One of the operations in `banking_ledger.domain.actions`

    Returns:
        A new LedgerState, or `state` itself for no-op operations
        (deleting an unknown id, undo with nothing to undo).
    """
    snapshot = state.snapshot

    match operation:
        case AddTransaction(transaction=txn, delta=delta):
            return replace(
                state,
                snapshot=LedgerSnapshot(
                    balance=snapshot.balance + delta,
                    transactions=(txn, *snapshot.transactions),
                ),
                last_action=AddedTransaction(txn, snapshot.balance),
                current_page=1,
            )

        case DeleteTransaction(transaction_id=txn_id):
            position = _index_of(snapshot.transactions, txn_id)
            if position is None:
                return state

            txn = snapshot.transactions[position]
            return replace(
                state,
                snapshot=LedgerSnapshot(
                    balance=snapshot.balance - txn.signed_amount,
                    transactions=tuple(t for t in snapshot.transactions if t.id != txn_id),
                ),
                last_action=DeletedTransaction(txn, snapshot.balance, position),
            )

        case UpdateTransaction(transaction=txn, new_balance=new_balance, old_transaction=old):
            return replace(
                state,
                snapshot=LedgerSnapshot(
                    balance=new_balance,
                    transactions=_replace_by_id(snapshot.transactions, txn),
                ),
                last_action=EditedTransaction(txn, snapshot.balance, old),
                editing=None,
            )

        case Undo():
            if state.last_action is None:
                return state
            return replace(
                state,
                snapshot=_reverse(snapshot, state.last_action),
                last_action=None,
            )

        case ImportTransactions(transactions=imported, delta=delta):
            return replace(
                state,
                snapshot=LedgerSnapshot(
                    balance=snapshot.balance + delta,
                    transactions=(*imported, *snapshot.transactions),
                ),
                last_action=None,
                current_page=1,
            )

        case SetFilter(changes=changes):
            return replace(state, filter=replace(state.filter, **changes), current_page=1)

        case ResetFilter():
            return replace(state, filter=TransactionFilter(), current_page=1)

        case SetPage(page=page):
            return replace(state, current_page=page)

        case SetEditing(transaction=txn):
            return replace(state, editing=txn)

        case SetReusing(transaction=txn):
            return replace(state, reusing=txn)

        case LoadSaved(snapshot=saved):
            return replace(state, snapshot=saved)

        case _:
            assert_never(operation)


def _reverse(snapshot: LedgerSnapshot, action: LastAction) -> LedgerSnapshot:
    """Exactly undo the recorded mutation, restoring the balance it saw"""
    match action:
        case AddedTransaction(transaction=txn):
            transactions = tuple(t for t in snapshot.transactions if t.id != txn.id)
        case DeletedTransaction(transaction=txn, position=position):
            # Reinsert where it was removed; position 0 is the front
            transactions = (
                *snapshot.transactions[:position],
                txn,
                *snapshot.transactions[position:],
            )
        case EditedTransaction(old_transaction=old):
            transactions = _replace_by_id(snapshot.transactions, old)
        case _:
            assert_never(action)

    return LedgerSnapshot(balance=action.previous_balance, transactions=transactions)


def _replace_by_id(transactions, txn: Transaction):
    return tuple(txn if t.id == txn.id else t for t in transactions)


def _index_of(transactions, transaction_id: str) -> Optional[int]:
    for i, txn in enumerate(transactions):
        if txn.id == transaction_id:
            return i
    return None
