import pytest

from cascade.config import DEFAULT_SEED_PATH
from cascade.domain import User
from cascade.overview import AccountOverview, format_money, format_signed
from cascade.profile import DEFAULT_EMAIL, DEFAULT_NAME, ProfileSettings
from cascade.transforms import load_seed


def make_overview():
    return AccountOverview.from_seed(load_seed(str(DEFAULT_SEED_PATH)).overview)


def test_overview_from_seed():
    overview = make_overview()
    assert overview.balance == 5842.50
    assert overview.balance_label == "$5,842.50"
    assert overview.income_label == "+$3,240"
    assert overview.spending_label == "-$1,234"
    assert overview.selected_time_frame == "This Month"
    assert overview.quick_actions == ("Add Transaction", "View Reports", "Set Budget")


def test_spending_category_shares_add_up():
    overview = make_overview()
    assert sum(c.percentage for c in overview.spending_categories) == pytest.approx(1.0)


def test_category_rows():
    rows = make_overview().category_rows()
    assert rows[0] == ("Food & Dining", "$485.50", 0.35)
    assert len(rows) == 4


def test_select_time_frame():
    overview = make_overview()
    overview.select_time_frame("This Year")
    assert overview.selected_time_frame == "This Year"
    with pytest.raises(ValueError):
        overview.select_time_frame("Last Decade")


def test_format_helpers():
    assert format_money(-4.5) == "-$4.50"
    assert format_money(1234.567) == "$1,234.57"
    assert format_signed(3240) == "+$3,240"
    assert format_signed(-1234) == "-$1,234"


def test_profile_defaults():
    profile = ProfileSettings.for_user(None)
    assert profile.name == DEFAULT_NAME
    assert profile.email == DEFAULT_EMAIL
    assert profile.notifications_enabled
    assert not profile.dark_mode_enabled


def test_profile_for_user():
    profile = ProfileSettings.for_user(User("uid", "kari@example.com"))
    assert profile.name == "kari"
    assert profile.email == "kari@example.com"


def test_profile_toggles_return_copies():
    profile = ProfileSettings()
    toggled = profile.toggle_notifications().toggle_dark_mode()
    assert not toggled.notifications_enabled
    assert toggled.dark_mode_enabled
    assert profile.notifications_enabled
