"""
Startup Security Validation.

Checks security invariants before the application accepts traffic.
If any check fails, the application refuses to start with a clear
error message.

Called during FastAPI lifespan initialization.
"""

from mynote.backend.core.config import get_app_config, get_settings
from mynote.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""

    pass


def run_startup_checks() -> None:
    """
    Validate all security invariants at startup.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = get_app_config()
    environment = app_config.application.environment

    errors = collect_startup_errors(app_config, get_settings())

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked: {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": environment, "checks_run": 3},
    )


def collect_startup_errors(app_config, settings) -> list[str]:
    """Every failed check as a readable message; empty when all pass."""
    errors: list[str] = []
    _check_secret_strength(settings, app_config.security, errors)
    _check_admin_credentials(settings, app_config.security, errors)
    _check_production_safety(
        app_config, app_config.application.environment == "production", errors,
    )
    return errors


def _check_secret_strength(settings, security_config, errors: list[str]) -> None:
    """The token signing secret must be long enough."""
    jwt_min = security_config.secrets_validation.jwt_secret_min_length
    if len(settings.jwt_secret) < jwt_min:
        errors.append(
            f"JWT_SECRET is {len(settings.jwt_secret)} chars, minimum is {jwt_min}"
        )


def _check_admin_credentials(settings, security_config, errors: list[str]) -> None:
    """The single admin identity must be configured."""
    if not settings.admin_username.strip():
        errors.append("ADMIN_USERNAME is empty")

    password_min = security_config.secrets_validation.admin_password_min_length
    if len(settings.admin_password) < password_min:
        errors.append(
            f"ADMIN_PASSWORD is {len(settings.admin_password)} chars, minimum is {password_min}"
        )


def _check_production_safety(app_config, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app_config.features.api_detailed_errors:
        errors.append("api_detailed_errors is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    localhost_origins = [o for o in app.cors.origins if "localhost" in o]
    if localhost_origins:
        errors.append(
            f"CORS origins contain localhost in production: {localhost_origins}"
        )
