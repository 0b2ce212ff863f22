"""
Authentication Service

Owns everything about who the caller is:
1. Registration and login (issue a token)
2. Resolving a bearer token to a user (the auth gate)
3. Profile, password and account changes

DESIGN DECISION: The resolved identity is returned as an explicit
AuthContext that callers pass along. Nothing is stashed in globals.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from finance_tracker.audit import AuditLogger
from finance_tracker.auth.passwords import PasswordHasher
from finance_tracker.auth.tokens import INVALID_TOKEN_MESSAGE, TokenService
from finance_tracker.config import AuthSettings
from finance_tracker.errors import AuthError, ConflictError, ValidationError
from finance_tracker.models.base import utcnow
from finance_tracker.models.user import (
    AuthResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    User,
    UserPublic,
)
from finance_tracker.services.storage import (
    DuplicateError,
    TransactionStorageInterface,
    UserStorageInterface,
)
from finance_tracker.validation import validate_password


MISSING_TOKEN_MESSAGE = "No token, authorization denied"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_IN_USE_MESSAGE = "Email is already registered"


@dataclass(frozen=True)
class AuthContext:
    """The authenticated identity for one request."""

    user: User

    @property
    def user_id(self) -> UUID:
        return self.user.id


class AuthService:
    """Registration, login, the token gate and account management."""

    def __init__(
        self,
        user_storage: UserStorageInterface,
        transaction_storage: TransactionStorageInterface,
        settings: AuthSettings,
        tokens: Optional[TokenService] = None,
        passwords: Optional[PasswordHasher] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = user_storage
        self._transactions = transaction_storage
        self._settings = settings
        self._tokens = tokens or TokenService(settings)
        self._passwords = passwords or PasswordHasher(settings.bcrypt_rounds)
        self._audit_logger = audit_logger

    def _check_password(self, password: str) -> None:
        result = validate_password(password, self._settings.min_password_length)
        if not result.is_valid:
            raise ValidationError(result.first_message)

    def _issue(self, user: User) -> AuthResponse:
        return AuthResponse(
            token=self._tokens.issue(user.id),
            user=user.to_public(),
        )

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Create an account and log it in.

        Raises:
            ValidationError: If the password breaks the policy
            ConflictError: If the email is already registered
        """
        self._check_password(request.password)

        if await self._users.get_user_by_email(request.email) is not None:
            raise ConflictError(EMAIL_IN_USE_MESSAGE)

        user = User(
            name=request.name,
            email=request.email,
            password_hash=self._passwords.hash(request.password),
        )
        try:
            await self._users.create_user(user)
        except DuplicateError:
            raise ConflictError(EMAIL_IN_USE_MESSAGE)

        if self._audit_logger:
            await self._audit_logger.log_user_registered(user.id, user.email)

        return self._issue(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Exchange email and password for a token.

        Unknown email and wrong password fail the same way.
        """
        user = await self._users.get_user_by_email(request.email)
        if user is None or not self._passwords.verify(
            request.password, user.password_hash
        ):
            if self._audit_logger:
                await self._audit_logger.log_login_failed(request.email)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if self._audit_logger:
            await self._audit_logger.log_user_logged_in(user.id)

        return self._issue(user)

    async def authenticate(self, token: Optional[str]) -> AuthContext:
        """
        Resolve a bearer token to the user it belongs to.

        Fails closed: a valid token whose user has since been deleted is
        rejected.
        """
        if not token:
            raise AuthError(MISSING_TOKEN_MESSAGE)

        user_id = self._tokens.verify(token)
        user = await self._users.get_user_by_id(user_id)
        if user is None:
            raise AuthError(INVALID_TOKEN_MESSAGE)

        return AuthContext(user=user)

    async def get_profile(self, ctx: AuthContext) -> UserPublic:
        return ctx.user.to_public()

    async def update_profile(
        self,
        ctx: AuthContext,
        update: ProfileUpdate,
    ) -> UserPublic:
        """Change name and/or email. Absent fields keep their value."""
        changes = {}
        if update.name is not None:
            changes["name"] = update.name
        if update.email is not None and update.email != ctx.user.email:
            changes["email"] = update.email

        if not changes:
            return ctx.user.to_public()

        user = ctx.user.model_copy(update={**changes, "updated_at": utcnow()})
        try:
            await self._users.update_user(user)
        except DuplicateError:
            raise ConflictError(EMAIL_IN_USE_MESSAGE)

        if self._audit_logger:
            await self._audit_logger.log_profile_updated(user.id, sorted(changes))

        return user.to_public()

    async def change_password(
        self,
        ctx: AuthContext,
        change: PasswordChange,
    ) -> None:
        """
        Replace the password after checking the current one.

        A wrong current password is a validation failure, not an auth
        failure: the caller is still logged in.
        """
        if not self._passwords.verify(change.current_password, ctx.user.password_hash):
            raise ValidationError("Current password is incorrect")

        self._check_password(change.new_password)

        user = ctx.user.model_copy(update={
            "password_hash": self._passwords.hash(change.new_password),
            "updated_at": utcnow(),
        })
        await self._users.update_user(user)

        if self._audit_logger:
            await self._audit_logger.log_password_changed(user.id)

    async def delete_account(self, ctx: AuthContext) -> int:
        """
        Delete the account and every transaction it owns.

        Transactions go first so a failure never leaves orphans behind a
        missing user. Returns the number of transactions removed.
        """
        removed = await self._transactions.delete_transactions_for_user(ctx.user_id)
        await self._users.delete_user(ctx.user_id)

        if self._audit_logger:
            await self._audit_logger.log_account_deleted(ctx.user_id, removed)

        return removed
