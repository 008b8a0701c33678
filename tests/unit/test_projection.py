import pytest
from datetime import date, timedelta

from banking_ledger.domain.enums import FilterType, TransactionType
from banking_ledger.domain.models import TransactionFilter
from banking_ledger.services.projection import filter_transactions, page_count, project, sort_by_date


@pytest.fixture
def many_transactions(make_txn):
    """45 transactions, one per day, stored oldest first"""
    return [
        make_txn(f"t{i}", "1.00", TransactionType.WITHDRAWAL, f"Item {i}", date(2025, 1, 1) + timedelta(days=i))
        for i in range(45)
    ]


@pytest.mark.unit
class TestFilter:
    """Test transaction filtering"""

    def test_default_filter_keeps_everything(self, sample_transactions):
        assert filter_transactions(sample_transactions, TransactionFilter()) == sample_transactions

    def test_filter_by_type(self, sample_transactions):
        result = filter_transactions(sample_transactions, TransactionFilter(type=FilterType.DEPOSIT))

        assert [t.id for t in result] == ["t2"]

    def test_date_bounds_are_inclusive(self, sample_transactions):
        f = TransactionFilter(date_from=date(2025, 12, 1), date_to=date(2025, 12, 2))

        result = filter_transactions(sample_transactions, f)

        assert [t.id for t in result] == ["t2", "t1"]

    def test_search_is_case_insensitive_substring(self, sample_transactions):
        result = filter_transactions(sample_transactions, TransactionFilter(search_term="BEAN"))

        assert [t.id for t in result] == ["t1"]

    def test_criteria_combine(self, sample_transactions):
        f = TransactionFilter(type=FilterType.WITHDRAWAL, search_term="s", date_from=date(2025, 12, 2))

        result = filter_transactions(sample_transactions, f)

        assert [t.id for t in result] == ["t3"]

    def test_inverted_range_matches_nothing(self, sample_transactions):
        f = TransactionFilter(date_from=date(2025, 12, 3), date_to=date(2025, 12, 1))

        assert filter_transactions(sample_transactions, f) == []


@pytest.mark.unit
class TestSort:

    def test_newest_first(self, sample_transactions):
        result = sort_by_date(reversed(sample_transactions))

        assert [t.id for t in result] == ["t3", "t2", "t1"]

    def test_same_day_keeps_ledger_order(self, make_txn):
        a = make_txn("a", "1", txn_date=date(2025, 12, 5))
        b = make_txn("b", "1", txn_date=date(2025, 12, 5))
        older = make_txn("c", "1", txn_date=date(2025, 12, 1))

        result = sort_by_date([older, a, b])

        assert [t.id for t in result] == ["a", "b", "c"]


@pytest.mark.unit
class TestPagination:

    @pytest.mark.parametrize("total,expected", [(0, 1), (1, 1), (20, 1), (21, 2), (45, 3)])
    def test_page_count(self, total, expected):
        assert page_count(total, 20) == expected

    def test_first_page(self, many_transactions):
        view = project(many_transactions, TransactionFilter(), page=1)

        assert len(view.visible) == 20
        assert view.visible[0].id == "t44"
        assert view.total_matched == 45
        assert view.page_count == 3
        assert view.has_next
        assert not view.has_previous

    def test_last_page_is_partial(self, many_transactions):
        view = project(many_transactions, TransactionFilter(), page=3)

        assert [t.id for t in view.visible] == ["t4", "t3", "t2", "t1", "t0"]
        assert not view.has_next

    def test_page_past_end_is_empty(self, many_transactions):
        view = project(many_transactions, TransactionFilter(), page=7)

        assert view.is_empty
        assert view.page == 7
        assert view.page_count == 3

    def test_custom_page_size(self, sample_transactions):
        view = project(sample_transactions, TransactionFilter(), page=2, page_size=2)

        assert [t.id for t in view.visible] == ["t1"]
        assert view.page_count == 2

    def test_empty_ledger(self):
        view = project([], TransactionFilter(), page=1)

        assert view.is_empty
        assert view.total_matched == 0
        assert view.page_count == 1

    def test_invalid_page_size(self, sample_transactions):
        with pytest.raises(ValueError):
            project(sample_transactions, TransactionFilter(), page=1, page_size=0)

    def test_total_counts_filtered_only(self, sample_transactions):
        view = project(sample_transactions, TransactionFilter(type=FilterType.WITHDRAWAL), page=1)

        assert view.total_matched == 2
