import math
from typing import Iterable, List

from banking_ledger.domain.models import Transaction, TransactionFilter
from banking_ledger.services.models import PageView

DEFAULT_PAGE_SIZE = 20


def filter_transactions(
    transactions: Iterable[Transaction],
    transaction_filter: TransactionFilter,
) -> List[Transaction]:
    """Keep the transactions matching type, date bounds and search term"""
    return [t for t in transactions if transaction_filter.matches(t)]


def sort_by_date(transactions: Iterable[Transaction]) -> List[Transaction]:
    """Newest first. Same-day transactions keep their ledger order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def project(
    transactions: Iterable[Transaction],
    transaction_filter: TransactionFilter,
    page: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PageView:
    """
    Compute the visible page of the ledger.

    Args:
        transactions: Full ledger, in store order
        transaction_filter: Active filter
        page: 1-based page number, used as given
        page_size: Transactions per page

    Returns:
        PageView with the visible slice, the number of matches and the
        number of pages (at least 1)

    Example:
        view = project(state.transactions, TransactionFilter(search_term="sal"), page=1)
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")

    matched = sort_by_date(filter_transactions(transactions, transaction_filter))
    start = (page - 1) * page_size

    return PageView(
        visible=matched[max(start, 0):max(start + page_size, 0)],
        total_matched=len(matched),
        page_count=page_count(len(matched), page_size),
        page=page,
    )
