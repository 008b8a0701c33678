import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import LedgerSnapshot, Transaction
from banking_ledger.repositories.base import CorruptSnapshotError, KeyValueStore, LedgerRepository

STORAGE_KEY = "banking_dashboard"

class KeyValueLedgerRepository(LedgerRepository):
    """
    Stores the ledger snapshot as one JSON document under a fixed key.

    Document shape:
        {
            "balance": "5847.32",
            "transactions": [
                {"id": "txn-1", "type": "deposit", "amount": "3500.00",
                 "description": "Salary", "date": "2025-12-01"}
            ]
        }

    Amounts are written as strings to keep Decimal precision; numbers are
    accepted on load.
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[LedgerSnapshot]:
        """Decode the stored snapshot, None if nothing was saved."""
        raw = self.store.get(self.key)
        if raw is None:
            return None

        try:
            return self._dict_to_snapshot(json.loads(raw))
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            raise CorruptSnapshotError(f"Stored ledger under '{self.key}' is unreadable: {e}")

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Replace the stored snapshot."""
        self.store.set(self.key, json.dumps(self._snapshot_to_dict(snapshot)))

    def _snapshot_to_dict(self, snapshot: LedgerSnapshot) -> Dict[str, Any]:
        return {
            "balance": str(snapshot.balance),
            "transactions": [
                {
                    "id": txn.id,
                    "type": txn.type.value,
                    "amount": str(txn.amount),
                    "description": txn.description,
                    "date": txn.date.isoformat(),
                }
                for txn in snapshot.transactions
            ],
        }

    def _dict_to_snapshot(self, data: Dict[str, Any]) -> LedgerSnapshot:
        """Convert a decoded JSON document to a LedgerSnapshot."""
        transactions = tuple(
            Transaction(
                id=str(item["id"]),
                type=TransactionType(item["type"]),
                amount=Decimal(str(item["amount"])),
                description=item["description"],
                date=date.fromisoformat(item["date"]),
            )
            for item in data["transactions"]
        )
        return LedgerSnapshot(
            balance=Decimal(str(data["balance"])),
            transactions=transactions,
        )
