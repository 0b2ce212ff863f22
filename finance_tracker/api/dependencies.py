"""FastAPI dependencies: the component bundle, the token gate, the ownership check."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from finance_tracker.auth import AuthContext
from finance_tracker.models.transaction import Transaction
from finance_tracker.orchestrator import AppComponents


# auto_error is off so that a missing header reaches AuthService and gets
# the same {"message": ...} body as every other auth failure.
bearer_scheme = HTTPBearer(auto_error=False)


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    components: AppComponents = Depends(get_components),
) -> AuthContext:
    token = credentials.credentials if credentials else None
    return await components.auth_service.authenticate(token)


async def get_owned_transaction(
    transaction_id: str,
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
) -> Transaction:
    return await components.transaction_service.get_owned(ctx, transaction_id)
