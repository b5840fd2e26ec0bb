from dataclasses import dataclass, replace
from typing import Optional

from cascade.domain import User

DEFAULT_NAME = "John Doe"
DEFAULT_EMAIL = "john.doe@example.com"


@dataclass(frozen=True)
class ProfileSettings:
    name: str = DEFAULT_NAME
    email: str = DEFAULT_EMAIL
    notifications_enabled: bool = True
    dark_mode_enabled: bool = False

    @classmethod
    def for_user(cls, user: Optional[User]) -> "ProfileSettings":
        if user is None or not user.email:
            return cls()
        return cls(name=user.email.split("@", 1)[0], email=user.email)

    def toggle_notifications(self) -> "ProfileSettings":
        return replace(self, notifications_enabled=not self.notifications_enabled)

    def toggle_dark_mode(self) -> "ProfileSettings":
        return replace(self, dark_mode_enabled=not self.dark_mode_enabled)
