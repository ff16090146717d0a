import pytest

from legallens.accounts.exceptions import AccountValidationError
from legallens.accounts.service import AccountService, normalize_email
from legallens.storage.backend import LocalStore
from legallens.storage.repositories.users_repository import UsersRepository


def _make_service(store: LocalStore) -> AccountService:
    return AccountService(UsersRepository(store))


class TestSignIn:
    def test_normalizes_email_and_sets_current_user(self, store: LocalStore) -> None:
        service = _make_service(store)
        user = service.sign_in("  Ann@Example.COM ", "secret1", name="Ann")
        assert user.id == "ann@example.com"
        assert user.email == "ann@example.com"
        assert user.name == "Ann"
        assert service.current_user() == user

    def test_sign_in_without_name_uses_default(self, store: LocalStore) -> None:
        user = _make_service(store).sign_in("bob@example.com", "secret1")
        assert user.name == "User"

    def test_sign_in_keeps_registered_name(self, store: LocalStore) -> None:
        service = _make_service(store)
        service.sign_in("ann@example.com", "secret1", name="Ann", register=True)
        user = service.sign_in("ann@example.com", "secret1")
        assert user.name == "Ann"
        assert len(UsersRepository(store).list_users()) == 1

    @pytest.mark.parametrize("email", ["", "ann", "ann@", "ann@example", "a b@example.com"])
    def test_invalid_email(self, store: LocalStore, email: str) -> None:
        with pytest.raises(AccountValidationError, match="valid email"):
            _make_service(store).sign_in(email, "secret1")

    def test_short_password(self, store: LocalStore) -> None:
        with pytest.raises(AccountValidationError, match="at least 6 characters"):
            _make_service(store).sign_in("ann@example.com", "12345")

    def test_register_requires_name(self, store: LocalStore) -> None:
        with pytest.raises(AccountValidationError, match="full name"):
            _make_service(store).sign_in("ann@example.com", "secret1", name="  ", register=True)
        assert UsersRepository(store).list_users() == []


class TestSession:
    def test_sign_out_clears_current_user(self, store: LocalStore) -> None:
        service = _make_service(store)
        service.sign_in("ann@example.com", "secret1")
        service.sign_out()
        assert service.current_user() is None

    def test_normalize_email(self) -> None:
        assert normalize_email(" A@B.Co ") == "a@b.co"
