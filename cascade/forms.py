import datetime
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cascade.functional import Either, Left, Right

TRANSACTION_CATEGORIES: Tuple[str, ...] = (
    "Food", "Transportation", "Entertainment", "Shopping", "Bills", "Income", "Other",
)


@dataclass(frozen=True)
class TransactionForm:
    title: str = ""
    amount: str = ""
    category: str = "Food"
    is_expense: bool = True
    date: datetime.date = field(default_factory=datetime.date.today)

    def validate(self) -> Either[dict, "TransactionForm"]:
        missing = [name for name in ("title", "amount") if not getattr(self, name)]
        if missing:
            return Left({
                "error": "missing_fields",
                "message": f"Required: {', '.join(missing)}",
                "fields": missing,
            })
        return Right(self)

    @property
    def is_valid(self) -> bool:
        return self.validate().is_right()

    def save(self) -> Optional["TransactionForm"]:
        """Accepts a valid form and discards it; the ledger is sample data and is never appended to."""
        return self.validate().get_or_else(None)


@dataclass(frozen=True)
class BudgetForm:
    category_name: str = ""
    amount: str = ""

    def validate(self) -> Either[dict, "BudgetForm"]:
        missing = [name for name in ("category_name", "amount") if not getattr(self, name)]
        if missing:
            return Left({
                "error": "missing_fields",
                "message": f"Required: {', '.join(missing)}",
                "fields": missing,
            })
        return Right(self)

    @property
    def is_valid(self) -> bool:
        return self.validate().is_right()

    def save(self) -> Optional["BudgetForm"]:
        return self.validate().get_or_else(None)
