"""Entry point for `finance-tracker-api`."""

import structlog
import uvicorn

from finance_tracker.config import get_settings, validate_all_settings


logger = structlog.get_logger("finance_tracker.api")

# Settings groups each backend cannot start without
REQUIRED_SETTINGS = {
    "memory": ("app", "auth"),
    "mongodb": ("app", "auth", "mongo"),
    "google_sheets": ("app", "auth", "google_sheets"),
}


def check_settings(backend: str) -> list[str]:
    """Return the error of every required settings group that fails to load."""
    status = validate_all_settings()
    errors = []
    for name in REQUIRED_SETTINGS.get(backend, ("app", "auth")):
        if not status[name]:
            errors.append(f"{name}: {status[f'{name}_error']}")
    return errors


def run() -> None:
    settings = get_settings().app
    errors = check_settings(settings.storage_backend)
    if errors:
        for error in errors:
            logger.error("settings_invalid", detail=error)
        raise SystemExit(1)

    logger.info("api_starting", backend=settings.storage_backend, port=settings.port)
    uvicorn.run(
        "finance_tracker.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
