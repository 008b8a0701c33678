from datetime import date
from decimal import Decimal
from typing import Optional

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import Transaction, generate_id, parse_money


class TransactionInputError(ValueError):
    """Raised when user input can't become a transaction."""
    pass


def build_transaction(
    transaction_type: TransactionType,
    amount: str | Decimal,
    description: str,
    txn_date: Optional[date] = None,
    transaction_id: Optional[str] = None,
) -> Transaction:
    """
    Turn form input into a Transaction.

    Args:
        transaction_type: Deposit or withdrawal
        amount: Amount as typed; must be greater than zero and at most MAX_AMOUNT,
            rounded to cents
        description: Free text; trimmed and must not be blank
        txn_date: Defaults to today
        transaction_id: Keep an existing id when editing, otherwise a new one is generated

    Raises:
        TransactionInputError: With the message to show next to the form
    """
    value = parse_money(amount)
    if value is None or value <= 0:
        raise TransactionInputError("Please enter a valid amount")

    description = (description or "").strip()
    if not description:
        raise TransactionInputError("Please enter a description")

    return Transaction(
        id=transaction_id or generate_id(),
        type=transaction_type,
        amount=value,
        description=description,
        date=txn_date or date.today(),
    )


def reuse_transaction(template: Transaction) -> Transaction:
    """New transaction copying a past one's type, amount and description, dated today"""
    return build_transaction(
        transaction_type=template.type,
        amount=template.amount,
        description=template.description,
    )
