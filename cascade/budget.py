import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd

from cascade.domain import BudgetCategory

WARNING_THRESHOLD = 0.90


def category_ratio(b: BudgetCategory) -> float:
    """spent / limit. A category without a positive limit is unbounded once anything is spent."""
    return b.percentage


def is_over_threshold(b: BudgetCategory, threshold: float = WARNING_THRESHOLD) -> bool:
    return category_ratio(b) >= threshold


def has_limit(b: BudgetCategory) -> bool:
    return b.limit > 0


def progress_fraction(ratio: float) -> float:
    if math.isnan(ratio):
        return 0.0
    return max(0.0, min(ratio, 1.0))


def percent_label(b: BudgetCategory) -> str:
    if not has_limit(b):
        return "No limit set"
    return f"{int(category_ratio(b) * 100)}%"


def spent_label(b: BudgetCategory) -> str:
    return f"${int(b.spent)} of ${int(b.limit)}"


@dataclass(frozen=True)
class BudgetRow:
    category: BudgetCategory
    ratio: float
    over_threshold: bool


@dataclass(frozen=True)
class BudgetSummary:
    total_spent: float
    total_limit: float
    overall_ratio: float
    rows: Tuple[BudgetRow, ...]

    @property
    def flagged(self) -> Tuple[BudgetRow, ...]:
        return tuple(r for r in self.rows if r.over_threshold)

    @property
    def total_label(self) -> str:
        return f"${int(self.total_spent)} / ${int(self.total_limit)}"


def total_spent(categories: Iterable[BudgetCategory]) -> float:
    return sum(b.spent for b in categories)


def total_limit(categories: Iterable[BudgetCategory]) -> float:
    return sum(b.limit for b in categories)


def overall_ratio(categories: Sequence[BudgetCategory]) -> float:
    limit = total_limit(categories)
    if limit <= 0:
        return 0.0
    return total_spent(categories) / limit


def summarize_budget(categories: Sequence[BudgetCategory]) -> BudgetSummary:
    rows = tuple(
        BudgetRow(category=b, ratio=category_ratio(b), over_threshold=is_over_threshold(b))
        for b in categories
    )
    return BudgetSummary(
        total_spent=total_spent(categories),
        total_limit=total_limit(categories),
        overall_ratio=overall_ratio(categories),
        rows=rows,
    )


# --- month navigation


def shift_month(d: date, delta: int) -> date:
    """Move `d` by `delta` calendar months, clamping to the end of shorter months."""
    return (pd.Timestamp(d) + pd.DateOffset(months=delta)).date()


def month_label(d: date) -> str:
    return d.strftime("%B %Y")


class BudgetTracker:
    """Budget screen state: the seed categories plus the selected month."""

    def __init__(self, categories: Iterable[BudgetCategory], selected_month: Optional[date] = None):
        self.categories: Tuple[BudgetCategory, ...] = tuple(categories)
        self.selected_month = selected_month or date.today()

    def previous_month(self) -> date:
        self.selected_month = shift_month(self.selected_month, -1)
        return self.selected_month

    def next_month(self) -> date:
        self.selected_month = shift_month(self.selected_month, 1)
        return self.selected_month

    @property
    def month_label(self) -> str:
        return month_label(self.selected_month)

    @property
    def summary(self) -> BudgetSummary:
        return summarize_budget(self.categories)
