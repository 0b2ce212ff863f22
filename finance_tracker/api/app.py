"""
HTTP Application

Builds the FastAPI app around an AppComponents bundle.

Every error leaves the app as {"message": str}:
- FinanceTrackerError subclasses carry their own status code
- Request body/query validation failures become 400
- Storage failures are answered as InternalError (500, generic message)
- Anything else unexpected becomes 500 as well; details go to the log only
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finance_tracker.api.routers import auth_router, transactions_router
from finance_tracker.audit import configure_logging
from finance_tracker.config import get_settings
from finance_tracker.errors import AuthError, FinanceTrackerError, InternalError
from finance_tracker.orchestrator import AppComponents, create_app_components
from finance_tracker.services.storage import StorageError


logger = structlog.get_logger("finance_tracker.api")

WELCOME_MESSAGE = "Welcome to Finance Tracker API"
UNEXPECTED_FAILURE_MESSAGE = "Something went wrong!"


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc looks like ("body", "amount") or ("query", "startDate")
    fields = [str(part) for part in first.get("loc", ())[1:]]
    message = first.get("msg", "Invalid request")
    if fields:
        return f"{'.'.join(fields)}: {message}"
    return message


async def handle_app_error(request: Request, exc: FinanceTrackerError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def handle_request_validation(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _first_validation_message(exc)},
    )


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    await request.app.state.components.audit_logger.log_error(
        error_type=type(exc).__name__,
        error_message=str(exc),
        details={"path": request.url.path},
    )
    # the backend detail stays in the log
    return await handle_app_error(request, InternalError())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": UNEXPECTED_FAILURE_MESSAGE},
    )


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        components: Pre-built bundle (tests pass one over in-memory
                    storage). Built from settings when omitted.
    """
    app_settings = get_settings().app
    configure_logging(app_settings.log_level)

    components = components or create_app_components()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await components.startup()
        try:
            yield
        finally:
            await components.shutdown()

    app = FastAPI(
        title="Finance Tracker API",
        debug=app_settings.debug_mode,
        lifespan=lifespan,
    )
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FinanceTrackerError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/")
    async def root():
        return {"message": WELCOME_MESSAGE}

    app.include_router(auth_router, prefix=app_settings.api_prefix)
    app.include_router(transactions_router, prefix=app_settings.api_prefix)

    return app
