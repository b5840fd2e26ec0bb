from datetime import date

from cascade.forms import TRANSACTION_CATEGORIES, BudgetForm, TransactionForm


def test_transaction_form_defaults():
    form = TransactionForm()
    assert form.category == "Food"
    assert form.is_expense
    assert form.date == date.today()
    assert not form.is_valid


def test_transaction_form_requires_title_and_amount():
    result = TransactionForm(title="Lunch").validate()
    assert result.is_left()
    assert result.get_error()["fields"] == ["amount"]

    result = TransactionForm(amount="12").validate()
    assert result.get_error()["fields"] == ["title"]


def test_transaction_form_valid():
    form = TransactionForm(title="Lunch", amount="12.50", category="Food")
    assert form.is_valid
    assert form.validate().is_right()


def test_transaction_save_is_noop():
    form = TransactionForm(title="Lunch", amount="12.50")
    assert form.save() == form
    assert TransactionForm(title="Lunch").save() is None


def test_budget_form_validation():
    assert not BudgetForm().is_valid
    assert not BudgetForm(category_name="Travel").is_valid
    assert BudgetForm(category_name="Travel", amount="200").is_valid

    missing = BudgetForm(amount="200").validate().get_error()
    assert missing["error"] == "missing_fields"
    assert missing["message"] == "Required: category_name"


def test_budget_form_save():
    form = BudgetForm(category_name="Travel", amount="200")
    assert form.save() is form
    assert BudgetForm().save() is None


def test_categories():
    assert TRANSACTION_CATEGORIES[0] == "Food"
    assert "Income" in TRANSACTION_CATEGORIES
    assert len(TRANSACTION_CATEGORIES) == 7
