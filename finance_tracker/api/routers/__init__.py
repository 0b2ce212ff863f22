"""HTTP routers."""

from finance_tracker.api.routers.auth_router import auth_router
from finance_tracker.api.routers.transactions_router import transactions_router

__all__ = ["auth_router", "transactions_router"]
