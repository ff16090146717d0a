import re

from legallens.accounts.exceptions import AccountValidationError
from legallens.logging.logger import Log
from legallens.storage.models import UserRecord
from legallens.storage.repositories.users_repository import UsersRepository

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
DEFAULT_DISPLAY_NAME = "User"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Local sign-in: validates input, records the user, tracks the session.

    Passwords are checked for length only and never stored.
    """

    def __init__(self, users_repo: UsersRepository) -> None:
        self._users_repo = users_repo

    def sign_in(
        self,
        email: str,
        password: str,
        name: str | None = None,
        register: bool = False,
    ) -> UserRecord:
        """Validate credentials, upsert the user and make it the current user.

        Raises:
            AccountValidationError: on a malformed e-mail, a short password, or
                a registration without a name.
        """
        normalized = normalize_email(email)
        if not _EMAIL_PATTERN.match(normalized):
            raise AccountValidationError("Please enter a valid email address.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AccountValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        display_name = (name or "").strip()
        if register and not display_name:
            raise AccountValidationError("Please enter your full name.")

        existing = next(
            (u for u in self._users_repo.list_users() if u.id == normalized), None
        )
        if not display_name and existing is None:
            display_name = DEFAULT_DISPLAY_NAME
        user = self._users_repo.save(
            UserRecord(id=normalized, email=normalized, name=display_name)
        )
        self._users_repo.set_current_user(user)
        Log.info("User signed in", user_id=user.id)
        return user

    def sign_out(self) -> None:
        self._users_repo.set_current_user(None)

    def current_user(self) -> UserRecord | None:
        return self._users_repo.get_current_user()
