"""Type definitions for cldrtables."""

from __future__ import annotations

from enum import Enum
from typing import Union

# A table value: a single string or an ordered, fixed-length run of strings.
Value = Union[str, tuple[str, ...]]


class BundleKind(str, Enum):
    """Resource bundle families sharing the key -> value table shape."""

    FORMAT_DATA = "FormatData"
    LOCALE_NAMES = "LocaleNames"
    CURRENCY_NAMES = "CurrencyNames"
    TIMEZONE_NAMES = "TimeZoneNames"

    @property
    def directory(self) -> str:
        """Directory name used for this bundle in on-disk layouts."""
        return {
            BundleKind.FORMAT_DATA: "format_data",
            BundleKind.LOCALE_NAMES: "locale_names",
            BundleKind.CURRENCY_NAMES: "currency_names",
            BundleKind.TIMEZONE_NAMES: "timezone_names",
        }[self]

    @classmethod
    def from_string(cls, value: "str | BundleKind") -> "BundleKind":
        """Convert a bundle name or directory name to BundleKind.

        Args:
            value: "FormatData", "format_data", "format-data" (case-insensitive).

        Returns:
            BundleKind enum value.

        Raises:
            ValueError: If the name matches no bundle.
        """
        if isinstance(value, BundleKind):
            return value
        wanted = value.replace("-", "").replace("_", "").lower()
        for kind in cls:
            if wanted in (kind.value.lower(), kind.directory.replace("_", "")):
                return kind
        raise ValueError(
            f"Unknown bundle {value!r}. "
            f"Expected one of: {', '.join(k.value for k in cls)}"
        )


class CalendarSystem(str, Enum):
    """Non-Gregorian calendar systems used as key prefixes.

    Gregorian data carries no prefix.
    """

    BUDDHIST = "buddhist"
    ISLAMIC = "islamic"
    ISLAMIC_CIVIL = "islamic-civil"
    ISLAMIC_UMALQURA = "islamic-umalqura"
    JAPANESE = "japanese"
    ROC = "roc"


class Width(str, Enum):
    """Width variants for eras and AM/PM markers."""

    NARROW = "narrow"
    ABBREVIATED = "abbreviated"
    LONG = "long"


class NumberSymbol(int, Enum):
    """Index into a ``<numberingSystem>.NumberElements`` array."""

    DECIMAL = 0
    GROUP = 1
    LIST = 2
    PERCENT = 3
    ZERO_DIGIT = 4
    DIGIT = 5
    MINUS = 6
    EXPONENT = 7
    PER_MILLE = 8
    INFINITY = 9
    NAN = 10


class TimeZoneNameIndex(int, Enum):
    """Index into a TimeZoneNames zone array."""

    LONG_STANDARD = 0
    SHORT_STANDARD = 1
    LONG_DAYLIGHT = 2
    SHORT_DAYLIGHT = 3
    LONG_GENERIC = 4
    SHORT_GENERIC = 5


CALENDAR_PREFIXES: frozenset[str] = frozenset(c.value for c in CalendarSystem)
WIDTH_PREFIXES: frozenset[str] = frozenset(w.value for w in Width)


class Severity(str, Enum):
    """Severity levels for table shape violations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return [Severity.LOW, Severity.MEDIUM, Severity.HIGH].index(self)

    def __ge__(self, other: "Severity") -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: "Severity") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "Severity") -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: "Severity") -> bool:
        return self.rank < other.rank
