import pytest
from decimal import Decimal

from banking_ledger.database.connection import DatabaseConfig, DatabaseManager
from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import LedgerSnapshot
from banking_ledger.domain.seed import seed_snapshot
from banking_ledger.repositories.base import CorruptSnapshotError
from banking_ledger.repositories.ledger_repository import STORAGE_KEY, KeyValueLedgerRepository
from banking_ledger.repositories.sqlite_key_value_store import SQLiteKeyValueStore
from banking_ledger.services.ledger_service import LedgerService

@pytest.fixture
def test_db(tmp_path):
    """
    Create a real test database.

    The schema is created on first connect, in pytest's tmp_path.
    """
    db_manager = DatabaseManager(DatabaseConfig(tmp_path / "test.db"))

    yield db_manager

    db_manager.close()

@pytest.fixture
def store(test_db):
    return SQLiteKeyValueStore(test_db)

@pytest.fixture
def repo(store):
    return KeyValueLedgerRepository(store)


@pytest.mark.integration
class TestSQLiteKeyValueStore:
    """Uses a real temp db."""

    def test_missing_key(self, store):
        assert store.get("nothing") is None

    def test_set_and_get(self, store):
        store.set("theme", "dark")

        assert store.get("theme") == "dark"

    def test_set_replaces(self, store):
        store.set("theme", "dark")
        store.set("theme", "light")

        assert store.get("theme") == "light"

    def test_delete(self, store):
        store.set("theme", "dark")

        assert store.delete("theme") is True
        assert store.delete("theme") is False
        assert store.get("theme") is None

    def test_values_survive_reconnect(self, tmp_path):
        config = DatabaseConfig(tmp_path / "ledger.db")
        with DatabaseManager(config) as db:
            SQLiteKeyValueStore(db).set("k", "v")

        with DatabaseManager(config) as db:
            assert SQLiteKeyValueStore(db).get("k") == "v"

    def test_schema_version_recorded(self, test_db):
        row = test_db.get_connection().execute("SELECT MAX(version) AS v FROM schema_version").fetchone()

        assert row["v"] == 1


@pytest.mark.integration
class TestKeyValueLedgerRepository:

    def test_load_when_nothing_saved(self, repo):
        assert repo.load() is None

    def test_save_and_load(self, repo):
        snapshot = seed_snapshot()

        repo.save(snapshot)

        assert repo.load() == snapshot

    def test_amounts_keep_precision(self, repo, make_txn):
        snapshot = LedgerSnapshot(balance=Decimal("0.10"), transactions=(make_txn("a", "0.30"),))

        repo.save(snapshot)
        loaded = repo.load()

        assert loaded.balance == Decimal("0.10")
        assert loaded.transactions[0].amount == Decimal("0.30")
        assert loaded.transactions[0].type == TransactionType.WITHDRAWAL

    def test_numeric_amounts_are_accepted(self, repo, store):
        store.set(STORAGE_KEY, (
            '{"balance": 150.5, "transactions": [{"id": "txn-1", "type": "deposit",'
            ' "amount": 50, "description": "Tip", "date": "2025-12-01"}]}'
        ))

        loaded = repo.load()

        assert loaded.balance == Decimal("150.5")
        assert loaded.transactions[0].amount == Decimal("50")

    @pytest.mark.parametrize("raw", [
        "{not json",
        '{"balance": "1"}',
        '{"balance": "x", "transactions": []}',
        '{"balance": "1", "transactions": [{"id": "a", "type": "loan", "amount": "1", "description": "d", "date": "2025-12-01"}]}',
    ])
    def test_corrupt_value(self, repo, store, raw):
        store.set(STORAGE_KEY, raw)

        with pytest.raises(CorruptSnapshotError):
            repo.load()


@pytest.mark.integration
class TestLedgerServicePersistence:
    """A new session picks up where the last one stopped"""

    def test_changes_survive_new_session(self, repo, make_txn):
        first = LedgerService(repo)
        first.add_transaction(make_txn("extra", "10.00"))

        second = LedgerService(repo)

        assert second.balance == first.balance
        assert second.transactions[0].id == "extra"
        assert not second.can_undo

    def test_corrupt_storage_starts_from_sample(self, repo, store):
        store.set(STORAGE_KEY, "{broken")

        service = LedgerService(repo)

        assert service.balance == Decimal("5847.32")
