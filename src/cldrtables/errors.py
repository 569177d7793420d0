"""Exception hierarchy for cldrtables.

Lookup misses are not exceptions: ``Registry.get`` returns
``UnknownLocale`` / ``UnknownKey`` values (see ``cldrtables.lookup``).
The classes here cover the remaining failure modes:

- ``LoadError``: a data source is missing, malformed, or fails validation.
- ``ResourceNotFoundError``: raised only when a caller asks a missing
  lookup to ``unwrap()``.
- ``KeyFormatError``: a resource key cannot be decomposed.
- ``ConfigError``: settings cannot be read.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class CLDRTablesError(Exception):
    """Base exception for cldrtables."""

    pass


class LoadError(CLDRTablesError):
    """A data source could not be loaded.

    Attributes:
        message: Error message
        path: Source path (file, directory or logical name)
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        details: list[str] | None = None,
    ) -> None:
        self.message = message
        self.path = str(path) if path is not None else None
        self.details = details or []
        super().__init__(self._render())

    def _render(self) -> str:
        text = f"{self.path}: {self.message}" if self.path else self.message
        if self.details:
            shown = self.details[:10]
            text += "\n  " + "\n  ".join(shown)
            if len(self.details) > len(shown):
                text += f"\n  ... and {len(self.details) - len(shown)} more"
        return text


class ResourceNotFoundError(CLDRTablesError, LookupError):
    """Raised by ``Lookup.unwrap()`` for a missing locale or key."""

    def __init__(self, locale: str, key: str | None = None, bundle: Any = None) -> None:
        self.locale = locale
        self.key = key
        self.bundle = bundle
        if key is None:
            message = f"Unknown locale: {locale!r}"
        else:
            message = f"Unknown key {key!r} for locale {locale!r}"
        if bundle is not None:
            message += f" in {getattr(bundle, 'value', bundle)}"
        super().__init__(message)


class KeyFormatError(CLDRTablesError, ValueError):
    """A resource key does not follow the key naming convention."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Malformed resource key {key!r}: {reason}")


class ConfigError(CLDRTablesError):
    """Settings could not be read or parsed."""

    pass
