"""Lookup results.

A lookup either finds a value or reports why it did not. Absence is an
expected outcome, so it is returned, not raised:

    result = registry.get("fi", "field.year")
    if result.found:
        label = result.value

    registry.get("xx", "DayNames")        # UnknownLocale(locale='xx', ...)
    registry.get("fi", "NoSuchKey")       # UnknownKey(locale='fi', ...)

An empty string is a real value (the 13th month-name slot), so a miss
never looks like ``""``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar, Union

from cldrtables.errors import ResourceNotFoundError
from cldrtables.types import BundleKind, Value

T = TypeVar("T")


@dataclass(frozen=True)
class Found:
    """A key was present.

    Attributes:
        value: The stored string or tuple of strings.
        locale: Locale of the table that held the key.
        key: The looked-up key.
        bundle: Bundle the table belongs to.
    """

    value: Value
    locale: str
    key: str
    bundle: BundleKind = BundleKind.FORMAT_DATA

    found = True

    def value_or(self, default: T) -> Value:
        return self.value

    def unwrap(self) -> Value:
        return self.value


@dataclass(frozen=True)
class UnknownLocale:
    """No table exists for the requested locale."""

    locale: str
    key: str
    bundle: BundleKind = BundleKind.FORMAT_DATA

    found = False
    value = None

    def value_or(self, default: T) -> T:
        return default

    def unwrap(self) -> Value:
        raise ResourceNotFoundError(self.locale, bundle=self.bundle)


@dataclass(frozen=True)
class UnknownKey:
    """The locale's table exists but lacks the requested key."""

    locale: str
    key: str
    bundle: BundleKind = BundleKind.FORMAT_DATA

    found = False
    value = None

    def value_or(self, default: T) -> T:
        return default

    def unwrap(self) -> Value:
        raise ResourceNotFoundError(self.locale, self.key, bundle=self.bundle)


Lookup = Union[Found, UnknownLocale, UnknownKey]
