from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Transaction:
    title: str
    amount: float    # + for income, - for expense
    category: str
    date: str        # display label, e.g. "Today" or "Feb 15"
    icon: str = ""

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


# A budget line: how much of a category's limit has been used
@dataclass(frozen=True)
class BudgetCategory:
    name: str
    spent: float
    limit: float
    icon: str = ""

    @property
    def percentage(self) -> float:
        if self.limit <= 0:
            return float("inf") if self.spent > 0 else 0.0
        return self.spent / self.limit


@dataclass(frozen=True)
class SpendingCategory:
    name: str
    amount: float
    percentage: float  # share of the period's spending, 0..1


@dataclass(frozen=True)
class ChatMessage:
    content: str
    is_user: bool
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class User:
    uid: str
    email: str
    id_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)


@dataclass(frozen=True)
class AuthSession:
    """Snapshot of the identity state shown to screens.

    The authenticated flag and the user are only ever replaced together,
    through `signed_in` / `signed_out`.
    """

    is_authenticated: bool
    user: Optional[User]
    error_message: str = ""

    @classmethod
    def signed_out(cls, error_message: str = "") -> "AuthSession":
        return cls(is_authenticated=False, user=None, error_message=error_message)

    @classmethod
    def signed_in(cls, user: User) -> "AuthSession":
        return cls(is_authenticated=True, user=user)

    def with_error(self, message: str) -> "AuthSession":
        return AuthSession(self.is_authenticated, self.user, message)
