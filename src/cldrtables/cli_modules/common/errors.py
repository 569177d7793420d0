"""CLI error handling utilities.

Commands raise ``CLIError`` subclasses; ``error_boundary`` prints them as a
red ``Error:`` line plus an optional yellow ``Hint:`` line and exits with
the error code.
"""

from __future__ import annotations

import functools
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

import typer

from cldrtables.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(Enum):
    """Standard CLI exit codes."""

    # General errors (1-9)
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    UNKNOWN_LOCALE = 3
    UNKNOWN_KEY = 4

    # File errors (10-19)
    FILE_NOT_FOUND = 10
    FILE_NOT_WRITABLE = 12
    INVALID_FILE_FORMAT = 13

    # Validation errors (20-29)
    VALIDATION_FAILED = 20

    # Configuration errors (30-39)
    CONFIG_INVALID = 31

    # Data errors (50-59)
    DATA_ERROR = 50


# =============================================================================
# Exception Classes
# =============================================================================


class CLIError(Exception):
    """Base exception for CLI errors.

    Attributes:
        message: Error message
        code: Error code
        details: Additional error details
        hint: Helpful hint for resolution
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.hint = hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        return "\n".join(parts)


class UnknownLocaleError(CLIError):
    """No table exists for a locale."""

    def __init__(self, locale: str, bundle: str) -> None:
        super().__init__(
            message=f"Unknown locale: {locale}",
            code=ErrorCode.UNKNOWN_LOCALE,
            details={"locale": locale, "bundle": bundle},
            hint=f"Run 'cldrtables locales --bundle {bundle}' to list available locales.",
        )


class UnknownKeyError(CLIError):
    """A locale's table lacks a key."""

    def __init__(self, locale: str, key: str, bundle: str) -> None:
        super().__init__(
            message=f"Unknown key {key!r} for locale {locale}",
            code=ErrorCode.UNKNOWN_KEY,
            details={"locale": locale, "key": key, "bundle": bundle},
            hint=f"Run 'cldrtables keys {locale}' to list the keys of this table.",
        )


class DataPathNotFoundError(CLIError):
    """The configured data directory or registry file does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            message=f"Data path not found: {path}",
            code=ErrorCode.FILE_NOT_FOUND,
            details={"path": str(path)},
            hint="Check --data-dir or CLDRTABLES_DATA_DIR.",
        )
        self.path = path


class ValidationError(CLIError):
    """Shape validation found violations."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_FAILED,
            details={"errors": errors or []},
        )
        self.errors = errors or []


# =============================================================================
# Decorator
# =============================================================================


F = TypeVar("F", bound=Callable[..., Any])


def _echo_error(message: str, hint: str | None = None) -> None:
    typer.echo(typer.style(f"Error: {message}", fg="red"), err=True)
    if hint:
        typer.echo(typer.style(f"Hint: {hint}", fg="yellow"), err=True)


def error_boundary(func: F) -> F:
    """Convert exceptions raised by a command into CLI errors.

    Library ``LoadError`` and ``ConfigError`` map to their own exit codes;
    anything unexpected is logged and exits with GENERAL_ERROR.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except CLIError as e:
            _echo_error(e.message, e.hint)
            raise typer.Exit(e.code.value)
        except LoadError as e:
            _echo_error(str(e), "Check --data-dir or CLDRTABLES_DATA_DIR.")
            raise typer.Exit(ErrorCode.DATA_ERROR.value)
        except ConfigError as e:
            _echo_error(str(e), "Check the CLDRTABLES_* environment variables.")
            raise typer.Exit(ErrorCode.CONFIG_INVALID.value)
        except Exception as e:
            logger.exception("Unexpected error")
            _echo_error(str(e))
            raise typer.Exit(ErrorCode.GENERAL_ERROR.value)

    return wrapper  # type: ignore


# =============================================================================
# Validation Helpers
# =============================================================================


def require_data_path(path: Path) -> Path:
    """Require that a data directory or registry file exists.

    Raises:
        DataPathNotFoundError: If nothing exists at the path.
    """
    if not path.exists():
        raise DataPathNotFoundError(path)
    return path


def require_writable(path: Path) -> Path:
    """Require that the parent directory of an output path exists.

    Raises:
        CLIError: If the directory is missing.
    """
    parent = path.parent if path.parent != Path("") else Path(".")
    if not parent.is_dir():
        raise CLIError(
            f"Output directory not found: {parent}",
            code=ErrorCode.FILE_NOT_WRITABLE,
            details={"path": str(path)},
            hint="Create the directory first.",
        )
    return path
