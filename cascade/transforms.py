import json
from dataclasses import dataclass
from functools import reduce
from typing import Any, Dict, Tuple

from cascade.domain import BudgetCategory, Transaction


@dataclass(frozen=True)
class Seed:
    transactions: Tuple[Transaction, ...]
    budgets: Tuple[BudgetCategory, ...]
    overview: Dict[str, Any]
    transaction_categories: Tuple[str, ...]
    suggestions: Tuple[str, ...]


def load_seed(path: str) -> Seed:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    transactions = tuple(Transaction(**t) for t in data["transactions"])
    budgets = tuple(BudgetCategory(**b) for b in data["budgets"])

    return Seed(
        transactions=transactions,
        budgets=budgets,
        overview=data.get("overview", {}),
        transaction_categories=tuple(data.get("transaction_categories", ())),
        suggestions=tuple(data.get("suggestions", ())),
    )


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.amount > 0, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.amount < 0, trans))


def transaction_amounts(trans: Tuple[Transaction, ...]) -> Tuple[float, ...]:
    return tuple(map(lambda t: t.amount, trans))


def total_income(trans: Tuple[Transaction, ...]) -> float:
    return sum(transaction_amounts(income_transactions(trans)))


def total_spending(trans: Tuple[Transaction, ...]) -> float:
    """Absolute value of everything spent."""
    return -sum(transaction_amounts(expense_transactions(trans)))


def net_amount(trans: Tuple[Transaction, ...]) -> float:
    return reduce(lambda acc, t: acc + t.amount, trans, 0.0)
