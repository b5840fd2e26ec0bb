from cascade.config import DEFAULT_SEED_PATH
from cascade.domain import Transaction
from cascade.transforms import (
    expense_transactions,
    income_transactions,
    load_seed,
    net_amount,
    total_income,
    total_spending,
    transaction_amounts,
)


def make_sample():
    return (
        Transaction("Salary", 1000.0, "Income", "Today"),
        Transaction("Lunch", -12.5, "Food", "Today"),
        Transaction("Bus", -2.5, "Transportation", "Yesterday"),
    )


def test_load_seed_counts():
    seed = load_seed(str(DEFAULT_SEED_PATH))
    assert len(seed.transactions) == 6
    assert len(seed.budgets) == 6
    assert seed.overview["balance"] == 5842.50
    assert "Other" in seed.transaction_categories
    assert len(seed.suggestions) == 4


def test_seed_budget_spent_total():
    seed = load_seed(str(DEFAULT_SEED_PATH))
    assert sum(b.spent for b in seed.budgets) == 2000
    assert sum(b.limit for b in seed.budgets) == 2800


def test_seed_first_transaction_keeps_order():
    seed = load_seed(str(DEFAULT_SEED_PATH))
    assert seed.transactions[0].title == "Grocery Shopping"
    assert seed.transactions[-1].title == "Freelance Work"


def test_income_and_expense_split():
    trans = make_sample()
    assert [t.title for t in income_transactions(trans)] == ["Salary"]
    assert [t.title for t in expense_transactions(trans)] == ["Lunch", "Bus"]


def test_transaction_amounts():
    assert transaction_amounts(make_sample()) == (1000.0, -12.5, -2.5)


def test_totals():
    trans = make_sample()
    assert total_income(trans) == 1000.0
    assert total_spending(trans) == 15.0
    assert net_amount(trans) == 985.0


def test_totals_empty():
    assert total_income(()) == 0
    assert total_spending(()) == 0
    assert net_amount(()) == 0.0
