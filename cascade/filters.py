from enum import Enum
from typing import Callable, Iterable, Iterator, Tuple

from cascade.domain import Transaction
from cascade.functional import pipe


class TransactionFilter(Enum):
    ALL = "All"
    INCOME = "Income"
    EXPENSES = "Expenses"

    @classmethod
    def parse(cls, label: str) -> "TransactionFilter":
        for kind in cls:
            if kind.value.lower() == label.strip().lower():
                return kind
        raise ValueError(f"Unknown transaction filter: {label!r}")


FILTER_OPTIONS = tuple(kind.value for kind in TransactionFilter)


def matches_search(text: str) -> Callable[[Transaction], bool]:
    needle = text.casefold()

    def _filter(t: Transaction) -> bool:
        if not needle:
            return True
        return needle in t.title.casefold() or needle in t.category.casefold()

    return _filter


def matches_kind(kind: TransactionFilter) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        if kind is TransactionFilter.INCOME:
            return t.amount > 0
        if kind is TransactionFilter.EXPENSES:
            return t.amount < 0
        return True

    return _filter


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def filter_transactions(
    trans: Iterable[Transaction],
    search: str = "",
    kind: TransactionFilter = TransactionFilter.ALL,
) -> Tuple[Transaction, ...]:
    """Ordered subsequence of `trans` matching both the search text and the kind."""
    return pipe(
        trans,
        lambda ts: iter_transactions(ts, matches_search(search)),
        lambda ts: iter_transactions(ts, matches_kind(kind)),
        tuple,
    )


class TransactionLedger:
    """Holds the seed list and the two filter inputs; `visible` is recomputed on each read."""

    def __init__(self, transactions: Iterable[Transaction]):
        self._transactions: Tuple[Transaction, ...] = tuple(transactions)
        self.search_text = ""
        self.selected_filter = TransactionFilter.ALL

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def select(self, label: str) -> None:
        self.selected_filter = TransactionFilter.parse(label)

    @property
    def visible(self) -> Tuple[Transaction, ...]:
        return filter_transactions(self._transactions, self.search_text, self.selected_filter)
