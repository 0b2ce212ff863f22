"""Transaction routes. Every route requires a bearer token."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from finance_tracker.api.dependencies import (
    get_auth_context,
    get_components,
    get_owned_transaction,
)
from finance_tracker.auth import AuthContext
from finance_tracker.models.stats import TransactionStats
from finance_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionPatch,
)
from finance_tracker.models.user import MessageResponse
from finance_tracker.orchestrator import AppComponents


transactions_router = APIRouter(prefix="/transactions", tags=["transactions"])


@transactions_router.get("", response_model=list[Transaction])
async def list_transactions(
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.transaction_service.list_for_user(ctx)


# Registered before /{transaction_id} so "stats" is not read as an id
@transactions_router.get("/stats", response_model=TransactionStats)
async def get_stats(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.statistics_service.get_stats(ctx, start_date, end_date)


@transactions_router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction: Transaction = Depends(get_owned_transaction),
):
    return transaction


@transactions_router.post(
    "",
    response_model=Transaction,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    body: TransactionDraft,
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.transaction_service.create(ctx, body)


@transactions_router.put("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    body: TransactionPatch,
    transaction: Transaction = Depends(get_owned_transaction),
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.transaction_service.update(ctx, transaction, body)


@transactions_router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction: Transaction = Depends(get_owned_transaction),
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    message = await components.transaction_service.delete(ctx, transaction)
    return MessageResponse(message=message)
