"""
KrishiSetu - In-memory account service.
Farmers and buyers register themselves; admins manage everyone else.
Accounts are keyed by principal (the lower-cased email). Nothing is persisted.
"""
from typing import Any, Dict, List, Optional, Tuple

from auth import hash_password, verify_password
from logger import get_logger

logger = get_logger(__name__)

USER_TYPES = ("admin", "farmer", "buyer")
ROLES = ("admin", "user", "guest")


class AccountError(Exception):
    """Account operation failed; the message is safe to show to the user."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def principal_for(email: str) -> str:
    return email.strip().lower()


class AccountStore:
    def __init__(self):
        self._profiles: Dict[str, Dict[str, Any]] = {}

    # --- Registration & login ---

    def _create(self, email: str, password: str, name: Optional[str], user_type: str, role: str) -> Dict[str, Any]:
        principal = principal_for(email)
        if not principal:
            raise AccountError("Email is required")
        if principal in self._profiles:
            raise AccountError("An account with this email already exists", status_code=409)
        profile = {
            "user_type": user_type,
            "name": name or None,
            "role": role,
            "email": email.strip(),
            "password_hash": hash_password(password),
        }
        self._profiles[principal] = profile
        logger.info("Registered %s account %s", user_type, principal)
        return profile

    def register_farmer(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._create(email, password, name, "farmer", "user")

    def register_buyer(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._create(email, password, name, "buyer", "user")

    def create_admin_account(self, email: str, password: str, name: Optional[str] = None) -> Dict[str, Any]:
        return self._create(email, password, name, "admin", "admin")

    def ensure_admin(self, email: str, password: str) -> None:
        """Seed the bootstrap admin if it does not exist yet."""
        if principal_for(email) not in self._profiles:
            self.create_admin_account(email, password, "Administrator")

    def login(self, email: str, password: str, user_type: str) -> Dict[str, Any]:
        """
        Check credentials and that the account is of the expected type.
        Returns the profile on success, raises AccountError (401) otherwise.
        """
        profile = self._profiles.get(principal_for(email))
        if profile is None:
            logger.warning("Login for unknown account %s", principal_for(email))
            if user_type == "admin":
                raise AccountError("No admin account found", status_code=401)
            raise AccountError("No account found. Please sign up first.", status_code=401)
        if not verify_password(password, profile["password_hash"]):
            logger.warning("Invalid password for %s", principal_for(email))
            raise AccountError("Invalid credentials", status_code=401)
        if profile["user_type"] != user_type:
            if user_type == "admin":
                raise AccountError("This account does not have admin privileges", status_code=401)
            raise AccountError(f"This account is not registered as a {user_type}", status_code=401)
        logger.info("%s logged in as %s", principal_for(email), user_type)
        return profile

    # --- Caller profile ---

    def get_profile(self, principal: str) -> Optional[Dict[str, Any]]:
        return self._profiles.get(principal)

    def _require(self, principal: str) -> Dict[str, Any]:
        profile = self._profiles.get(principal)
        if profile is None:
            raise AccountError("User not found", status_code=404)
        return profile

    def save_profile(self, principal: str, name: Optional[str] = None, password: Optional[str] = None) -> Dict[str, Any]:
        """Update the caller's display name and/or password. Type and role are admin-managed."""
        profile = self._require(principal)
        if name is not None:
            profile["name"] = name or None
        if password:
            profile["password_hash"] = hash_password(password)
        return profile

    def get_role(self, principal: str) -> str:
        profile = self._profiles.get(principal)
        return profile["role"] if profile else "guest"

    def is_admin(self, principal: str) -> bool:
        return self.get_role(principal) == "admin"

    def is_farmer(self, principal: str) -> bool:
        profile = self._profiles.get(principal)
        return bool(profile) and profile["user_type"] == "farmer"

    def is_buyer(self, principal: str) -> bool:
        profile = self._profiles.get(principal)
        return bool(profile) and profile["user_type"] == "buyer"

    # --- Admin operations ---

    def list_users(self) -> List[Tuple[str, Dict[str, Any]]]:
        return list(self._profiles.items())

    def user_stats(self) -> Dict[str, int]:
        stats = {"admins": 0, "farmers": 0, "buyers": 0}
        for profile in self._profiles.values():
            stats[profile["user_type"] + "s"] += 1
        return stats

    def assign_role(self, principal: str, role: str) -> Dict[str, Any]:
        if role not in ROLES:
            raise AccountError(f"Unknown role: {role}")
        profile = self._require(principal)
        profile["role"] = role
        logger.info("Role of %s set to %s", principal, role)
        return profile

    def change_user_type(self, principal: str, user_type: str) -> Dict[str, Any]:
        """Switch account type. Promoting to admin grants the admin role; demoting drops it."""
        if user_type not in USER_TYPES:
            raise AccountError(f"Unknown user type: {user_type}")
        profile = self._require(principal)
        profile["user_type"] = user_type
        if user_type == "admin":
            profile["role"] = "admin"
        elif profile["role"] == "admin":
            profile["role"] = "user"
        logger.info("User type of %s changed to %s", principal, user_type)
        return profile

    def delete_account(self, principal: str) -> None:
        self._require(principal)
        del self._profiles[principal]
        logger.info("Deleted account %s", principal)
