"""
Unit tests for the account service
"""

import pytest

from accounts import AccountStore, AccountError
from auth import hash_password


@pytest.fixture
def store():
    s = AccountStore()
    s.register_farmer("Ravi@Example.com", "seeds123", "Ravi")
    s.register_buyer("meena@example.com", "market1", None)
    s.create_admin_account("root@example.com", "rootpw", "Root")
    return s


class TestRegistration:

    def test_farmer_profile(self, store):
        profile = store.get_profile("ravi@example.com")

        assert profile["user_type"] == "farmer"
        assert profile["role"] == "user"
        assert profile["name"] == "Ravi"
        assert profile["password_hash"] == hash_password("seeds123")
        assert profile["password_hash"] != "seeds123"

    def test_duplicate_email_rejected(self, store):
        with pytest.raises(AccountError) as exc:
            store.register_buyer("RAVI@example.com", "x")

        assert exc.value.status_code == 409
        assert "already exists" in exc.value.message

    def test_ensure_admin_is_idempotent(self, store):
        store.ensure_admin("root@example.com", "other")

        assert store.user_stats() == {"admins": 1, "farmers": 1, "buyers": 1}


class TestLogin:

    def test_login_success(self, store):
        profile = store.login("ravi@example.com", "seeds123", "farmer")

        assert profile["email"] == "Ravi@Example.com"

    def test_unknown_account(self, store):
        with pytest.raises(AccountError, match="No account found. Please sign up first."):
            store.login("nobody@example.com", "x", "buyer")

    def test_unknown_admin(self, store):
        with pytest.raises(AccountError, match="No admin account found"):
            store.login("nobody@example.com", "x", "admin")

    def test_wrong_password(self, store):
        with pytest.raises(AccountError, match="Invalid credentials"):
            store.login("ravi@example.com", "wrong", "farmer")

    def test_wrong_user_type(self, store):
        with pytest.raises(AccountError, match="not registered as a buyer"):
            store.login("ravi@example.com", "seeds123", "buyer")

    def test_non_admin_login_as_admin(self, store):
        with pytest.raises(AccountError, match="does not have admin privileges") as exc:
            store.login("meena@example.com", "market1", "admin")

        assert exc.value.status_code == 401


class TestRoles:

    def test_role_checks(self, store):
        assert store.is_farmer("ravi@example.com")
        assert not store.is_buyer("ravi@example.com")
        assert store.is_buyer("meena@example.com")
        assert store.is_admin("root@example.com")
        assert not store.is_admin("ravi@example.com")

    def test_unknown_principal_is_guest(self, store):
        assert store.get_role("ghost@example.com") == "guest"
        assert not store.is_farmer("ghost@example.com")

    def test_assign_role(self, store):
        store.assign_role("meena@example.com", "admin")

        assert store.is_admin("meena@example.com")

    def test_assign_unknown_role(self, store):
        with pytest.raises(AccountError, match="Unknown role"):
            store.assign_role("meena@example.com", "superuser")

    def test_change_user_type_to_admin_grants_role(self, store):
        store.change_user_type("ravi@example.com", "admin")

        assert store.get_role("ravi@example.com") == "admin"

    def test_demoting_admin_drops_role(self, store):
        store.change_user_type("root@example.com", "buyer")

        assert store.get_role("root@example.com") == "user"
        assert store.is_buyer("root@example.com")

    def test_missing_user(self, store):
        with pytest.raises(AccountError, match="User not found") as exc:
            store.change_user_type("ghost@example.com", "farmer")

        assert exc.value.status_code == 404


class TestAdminOperations:

    def test_list_users_and_stats(self, store):
        principals = [p for p, _ in store.list_users()]

        assert principals == ["ravi@example.com", "meena@example.com", "root@example.com"]
        assert store.user_stats() == {"admins": 1, "farmers": 1, "buyers": 1}

    def test_delete_account(self, store):
        store.delete_account("meena@example.com")

        assert store.get_profile("meena@example.com") is None
        with pytest.raises(AccountError):
            store.delete_account("meena@example.com")

    def test_save_profile(self, store):
        store.save_profile("ravi@example.com", name="Ravi Kumar", password="newpass")

        assert store.get_profile("ravi@example.com")["name"] == "Ravi Kumar"
        assert store.login("ravi@example.com", "newpass", "farmer")
