"""Account routes: register, login, profile, password."""

from fastapi import APIRouter, Depends, status

from finance_tracker.api.dependencies import get_auth_context, get_components
from finance_tracker.auth import AuthContext
from finance_tracker.models.user import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserPublic,
)
from finance_tracker.orchestrator import AppComponents


auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    components: AppComponents = Depends(get_components),
):
    return await components.auth_service.register(body)


@auth_router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    components: AppComponents = Depends(get_components),
):
    return await components.auth_service.login(body)


@auth_router.get("/profile", response_model=UserPublic)
async def get_profile(
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.auth_service.get_profile(ctx)


@auth_router.put("/profile", response_model=UserPublic)
async def update_profile(
    body: ProfileUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    return await components.auth_service.update_profile(ctx, body)


@auth_router.put("/password", response_model=MessageResponse)
async def change_password(
    body: PasswordChange,
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    await components.auth_service.change_password(ctx, body)
    return MessageResponse(message="Password updated")


@auth_router.delete("/profile", response_model=MessageResponse)
async def delete_account(
    ctx: AuthContext = Depends(get_auth_context),
    components: AppComponents = Depends(get_components),
):
    await components.auth_service.delete_account(ctx)
    return MessageResponse(message="Account deleted")
