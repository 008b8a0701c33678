from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

from banking_ledger.domain.actions import (
    AddTransaction,
    DeleteTransaction,
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
from banking_ledger.domain.seed import seed_snapshot
from banking_ledger.domain.state import LedgerState
from banking_ledger.logging_setup import get_logger
from banking_ledger.parsers.csv_ledger import CsvLedgerParser, export_csv
from banking_ledger.repositories.base import LedgerRepository
from banking_ledger.services import ledger_reducer
from banking_ledger.services.models import BalanceSummary, ImportResult, PageView
from banking_ledger.services.projection import DEFAULT_PAGE_SIZE, project
from banking_ledger.services.validation import (
    DEFAULT_CURRENCY,
    TRANSACTION_NOT_FOUND,
    compute_import_delta,
    validate_add,
    validate_update,
)

logger = get_logger(__name__)

class LedgerService:
    """
    One user's ledger session.

    Validates user actions, feeds them to the ledger state machine and
    saves the snapshot after every change to balance or transactions.
    Each instance owns its own state; nothing is shared between instances.

    Usage:
        service = LedgerService(repository)
        error = service.add_transaction(txn)
        if error:
            print(error)
        service.undo()
    """

    def __init__(
        self,
        repository: Optional[LedgerRepository] = None,
        initial_snapshot: Optional[LedgerSnapshot] = None,
        currency: str = DEFAULT_CURRENCY,
        page_size: int = DEFAULT_PAGE_SIZE,
        parser: Optional[CsvLedgerParser] = None,
    ):
        """
        Args:
            repository: Where snapshots are loaded from and saved to. None disables persistence.
            initial_snapshot: Dataset used when nothing is saved. Defaults to the sample ledger.
            currency: Currency code used in balance error messages
            page_size: Transactions per page in current_page_view()
            parser: CSV parser used by import_csv
        """
        self.repository = repository
        self.currency = currency
        self.page_size = page_size
        self._parser = parser or CsvLedgerParser()

        self._state = LedgerState.from_snapshot(initial_snapshot or seed_snapshot())

        saved = self._load_saved()
        if saved is not None and saved.transactions:
            self._state = ledger_reducer.apply(self._state, LoadSaved(saved))

    # State

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def balance(self) -> Decimal:
        return self._state.balance

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._state.transactions

    @property
    def filter(self) -> TransactionFilter:
        return self._state.filter

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def last_action(self) -> Optional[LastAction]:
        return self._state.last_action

    @property
    def editing(self) -> Optional[Transaction]:
        return self._state.editing

    @property
    def reusing(self) -> Optional[Transaction]:
        return self._state.reusing

    @property
    def can_undo(self) -> bool:
        return self._state.last_action is not None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._state.snapshot.find(transaction_id)

    # Mutations

    def add_transaction(self, transaction: Transaction) -> Optional[str]:
        """
        Add a transaction at the top of the ledger.

        Returns:
            None on success, otherwise the error message. The ledger is
            unchanged on error.
        """
        result = validate_add(transaction, self.balance, self.currency)
        if not result.success:
            logger.info("Rejected add of %r: %s", transaction, result.error)
            return result.error

        self._dispatch(AddTransaction(transaction, result.delta))
        return None

    def delete_transaction(self, transaction_id: str) -> None:
        """Remove a transaction. Unknown ids are ignored."""
        self._dispatch(DeleteTransaction(transaction_id))

    def update_transaction(self, transaction: Transaction) -> Optional[str]:
        """
        Replace the transaction with the same id, keeping its position.

        Returns:
            None on success, otherwise the error message.
        """
        old_transaction = self.get_transaction(transaction.id)
        result = validate_update(transaction, old_transaction, self.balance, self.currency)
        if not result.success:
            logger.info("Rejected update of %s: %s", transaction.id, result.error)
            return result.error

        self._dispatch(UpdateTransaction(transaction, result.new_balance, old_transaction))
        return None

    def undo(self) -> None:
        """Reverse the last add, delete or edit. Does nothing if there is none."""
        self._dispatch(Undo())

    def import_transactions(self, transactions: Iterable[Transaction]) -> ImportResult:
        """
        Prepend a batch of transactions, keeping their order.

        Imports are not checked against the balance and cannot be undone.
        """
        batch = tuple(transactions)
        delta = compute_import_delta(batch)
        self._dispatch(ImportTransactions(batch, delta))
        return ImportResult(imported=list(batch), delta=delta)

    def import_csv(self, content: str, filepath: Path | str = "") -> ImportResult:
        """
        Parse CSV text and import the valid rows.

        Nothing is imported when no row is valid.

        Raises:
            CsvFormatError: If the file has no data rows or cannot be read
        """
        transactions = self._parser.parse(content)
        if not transactions:
            return ImportResult(filepath=str(filepath))

        result = self.import_transactions(transactions)
        result.filepath = str(filepath)
        logger.info("Imported %d transactions from %s", result.count, filepath or "<text>")
        return result

    def export_csv(self) -> str:
        """The whole ledger as CSV text, in ledger order"""
        return export_csv(self.transactions)

    # View

    def set_filter(self, **changes: Any) -> None:
        """
        Update some filter fields and go back to page 1.

        Example:
            service.set_filter(type=FilterType.DEPOSIT, search_term="sal")
        """
        self._dispatch(SetFilter(changes))

    def reset_filter(self) -> None:
        self._dispatch(ResetFilter())

    def set_page(self, page: int) -> None:
        """Jump to a page. The value is not clamped here."""
        self._dispatch(SetPage(page))

    def set_editing(self, transaction: Optional[Transaction]) -> None:
        self._dispatch(SetEditing(transaction))

    def set_reusing(self, transaction: Optional[Transaction]) -> None:
        self._dispatch(SetReusing(transaction))

    def current_page_view(self) -> PageView:
        return project(self.transactions, self.filter, self.current_page, self.page_size)

    def summary(self) -> BalanceSummary:
        return BalanceSummary.from_transactions(self.balance, list(self.transactions))

    # Internals

    def _dispatch(self, operation: LedgerOperation) -> None:
        previous = self._state
        self._state = ledger_reducer.apply(previous, operation)

        if self._state.snapshot is not previous.snapshot:
            self._save()

    def _load_saved(self) -> Optional[LedgerSnapshot]:
        if self.repository is None:
            return None
        try:
            return self.repository.load()
        except Exception as e:
            logger.warning("Ignoring saved ledger, using defaults: %s", e)
            return None

    def _save(self) -> None:
        if self.repository is None:
            return
        try:
            self.repository.save(self._state.snapshot)
        except Exception as e:
            logger.warning("Could not save ledger: %s", e)
