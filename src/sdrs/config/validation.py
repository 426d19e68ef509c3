"""Configuration validation for startup checks.

Validates that required configuration is present and consistent before the
application starts accepting requests.

Usage:
    from sdrs.config.validation import validate_or_raise

    # During startup
    validate_or_raise(settings)
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from sdrs.config.settings import Environment, Settings, get_settings
from sdrs.utils.exceptions import ConfigurationError

logger = structlog.get_logger("sdrs.config")


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # App cannot start
    WARNING = "warning"


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []
    results.extend(_validate_database(settings))
    results.extend(_validate_environment(settings))
    results.extend(_validate_retention(settings))
    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    for warning in (r for r in results if r.severity == ValidationSeverity.WARNING):
        logger.warning("configuration_warning", detail=str(warning))


# =============================================================================
# Validators
# =============================================================================


def _validate_database(settings: Settings) -> list[ValidationResult]:
    """Validate database configuration."""
    results: list[ValidationResult] = []

    if not settings.DATABASE_URL:
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.ERROR,
                message="Database URL is not configured",
                suggestion="Set DATABASE_URL environment variable",
            )
        )
    elif not settings.DATABASE_URL.startswith(("postgresql", "sqlite")):
        results.append(
            ValidationResult(
                field="DATABASE_URL",
                severity=ValidationSeverity.WARNING,
                message=f"Unexpected database type in URL: {settings.DATABASE_URL[:20]}...",
                suggestion="Use a postgresql+asyncpg:// or sqlite+aiosqlite:// URL",
            )
        )

    if settings.DATABASE_POOL_SIZE < 1:
        results.append(
            ValidationResult(
                field="DATABASE_POOL_SIZE",
                severity=ValidationSeverity.ERROR,
                message="Pool size must be at least 1",
            )
        )

    if settings.DATABASE_MAX_OVERFLOW < 0:
        results.append(
            ValidationResult(
                field="DATABASE_MAX_OVERFLOW",
                severity=ValidationSeverity.ERROR,
                message="Max overflow cannot be negative",
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.ENVIRONMENT == Environment.PRODUCTION:
        if settings.DEBUG:
            results.append(
                ValidationResult(
                    field="DEBUG",
                    severity=ValidationSeverity.WARNING,
                    message="Debug mode is enabled in production",
                    suggestion="Set DEBUG=false for production deployments",
                )
            )
        if settings.is_sqlite:
            results.append(
                ValidationResult(
                    field="DATABASE_URL",
                    severity=ValidationSeverity.WARNING,
                    message="SQLite is not recommended for production",
                )
            )

    return results


def _validate_retention(settings: Settings) -> list[ValidationResult]:
    """Validate retention rule settings."""
    if not settings.GLOBAL_RULE_PROJECT_ID.strip():
        return [
            ValidationResult(
                field="GLOBAL_RULE_PROJECT_ID",
                severity=ValidationSeverity.ERROR,
                message="Global rule project id cannot be blank",
            )
        ]
    return []
