"""Authentication package."""

from finance_tracker.auth.passwords import PasswordHasher
from finance_tracker.auth.service import AuthContext, AuthService
from finance_tracker.auth.tokens import TokenService

__all__ = ["AuthContext", "AuthService", "PasswordHasher", "TokenService"]
