from typing import Any, Dict, Tuple

from cascade.domain import SpendingCategory


def format_money(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_signed(amount: float) -> str:
    """Whole-dollar figure with an explicit sign, e.g. "+$3,240"."""
    sign = "-" if amount < 0 else "+"
    return f"{sign}${abs(amount):,.0f}"


class AccountOverview:
    def __init__(
        self,
        balance: float,
        income: float,
        spending: float,
        monthly_spending: float,
        spending_categories: Tuple[SpendingCategory, ...],
        time_frames: Tuple[str, ...] = ("This Week", "This Month", "This Year"),
        selected_time_frame: str = "This Month",
        quick_actions: Tuple[str, ...] = (),
    ):
        self.balance = balance
        self.income = income
        self.spending = spending
        self.monthly_spending = monthly_spending
        self.spending_categories = spending_categories
        self.time_frames = time_frames
        self.quick_actions = quick_actions
        self.selected_time_frame = ""
        self.select_time_frame(selected_time_frame)

    @classmethod
    def from_seed(cls, data: Dict[str, Any]) -> "AccountOverview":
        cats = tuple(SpendingCategory(**c) for c in data.get("spending_categories", ()))
        return cls(
            balance=data["balance"],
            income=data["income"],
            spending=data["spending"],
            monthly_spending=data.get("monthly_spending", data["spending"]),
            spending_categories=cats,
            time_frames=tuple(data.get("time_frames", ("This Week", "This Month", "This Year"))),
            selected_time_frame=data.get("default_time_frame", "This Month"),
            quick_actions=tuple(data.get("quick_actions", ())),
        )

    def select_time_frame(self, frame: str) -> None:
        if frame not in self.time_frames:
            raise ValueError(f"Unknown time frame: {frame!r}")
        self.selected_time_frame = frame

    @property
    def balance_label(self) -> str:
        return format_money(self.balance)

    @property
    def income_label(self) -> str:
        return format_signed(self.income)

    @property
    def spending_label(self) -> str:
        return format_signed(-self.spending)

    def category_rows(self) -> Tuple[Tuple[str, str, float], ...]:
        """(name, amount label, bar fraction) for each spending category."""
        return tuple((c.name, format_money(c.amount), c.percentage) for c in self.spending_categories)
