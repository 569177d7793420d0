"""Resource key naming convention.

Keys are the wire format consumers rely on, so they are never rewritten:
``ResourceKey.parse(key)`` decomposes a key and ``str()`` on the result
reproduces it exactly.

Grammar (FormatData):

    field.<name> | calendarname.<system> | timezone.<subkey>
    <numberingSystem>.NumberElements
    [java.time.][<calendar>.][standalone. | <width>.]<name>

Examples:
    >>> ResourceKey.parse("buddhist.narrow.Eras")
    ResourceKey(name='Eras', calendar='buddhist', width='narrow', ...)
    >>> build_key("DayNames", calendar="islamic")
    'islamic.DayNames'
    >>> ResourceKey.parse("java.NumberElements").numbering_system
    'java'
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from cldrtables.errors import KeyFormatError
from cldrtables.types import CALENDAR_PREFIXES, WIDTH_PREFIXES, CalendarSystem, Width

JAVA_TIME_PREFIX = "java.time"
STANDALONE_PREFIX = "standalone"
NUMBER_ELEMENTS = "NumberElements"

# Namespaces whose remainder is an opaque, possibly dotted, name.
NAMESPACES: frozenset[str] = frozenset(
    {"field", "calendarname", "timezone", "key", "type"}
)

_NUMBERING_SYSTEM_RE = re.compile(r"^[a-z][a-z0-9]*$")

MONTH_SETS: frozenset[str] = frozenset(
    {"MonthNames", "MonthAbbreviations", "MonthNarrows"}
)
DAY_SETS: frozenset[str] = frozenset({"DayNames", "DayAbbreviations", "DayNarrows"})
QUARTER_SETS: frozenset[str] = frozenset(
    {"QuarterNames", "QuarterAbbreviations", "QuarterNarrows"}
)
PATTERN_SETS: frozenset[str] = frozenset(
    {"DatePatterns", "TimePatterns", "DateTimePatterns"}
)
# Names whose values vary by calendar system.
CALENDAR_DATA: frozenset[str] = (
    MONTH_SETS | DAY_SETS | QUARTER_SETS | PATTERN_SETS | {"Eras", "AmPmMarkers"}
)


@dataclass(frozen=True)
class ResourceKey:
    """A decomposed resource key.

    Attributes:
        name: Base name ("DayNames", "Eras", "year", "regionFormat.standard").
        calendar: Calendar system prefix, None for Gregorian.
        width: Width variant ("narrow", "abbreviated", "long").
        standalone: True for the standalone (vs. format-context) form.
        numbering_system: Numbering system for NumberElements keys.
        namespace: Scalar namespace ("field", "calendarname", "timezone", ...).
        java_time: True for the ``java.time.`` alternate pattern set.
    """

    name: str
    calendar: str | None = None
    width: str | None = None
    standalone: bool = False
    numbering_system: str | None = None
    namespace: str | None = None
    java_time: bool = False

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        if self.numbering_system:
            return f"{self.numbering_system}.{self.name}"
        parts = []
        if self.java_time:
            parts.append(JAVA_TIME_PREFIX)
        if self.calendar:
            parts.append(self.calendar)
        if self.standalone:
            parts.append(STANDALONE_PREFIX)
        elif self.width:
            parts.append(self.width)
        parts.append(self.name)
        return ".".join(parts)

    @property
    def is_gregorian(self) -> bool:
        return self.calendar is None

    @property
    def is_number_elements(self) -> bool:
        return self.numbering_system is not None

    @property
    def is_calendar_data(self) -> bool:
        """True for names that carry a calendar dimension (DayNames, Eras, ...)."""
        return self.namespace is None and self.name in CALENDAR_DATA

    @property
    def expected_length(self) -> int | None:
        """Fixed array length for this key, or None if unconstrained."""
        if self.namespace:
            return None
        if self.numbering_system:
            return 11
        if self.name in MONTH_SETS:
            return 13
        if self.name in DAY_SETS:
            return 7
        if self.name in QUARTER_SETS or self.name in PATTERN_SETS:
            return 4
        if self.name == "NumberPatterns":
            return 3
        if self.name == "AmPmMarkers":
            return 2
        return None

    @property
    def is_scalar(self) -> bool:
        """True for keys whose value is always a single string."""
        return (
            self.namespace in ("field", "calendarname", "timezone")
            or (self.namespace is None and self.name == "DefaultNumberingSystem")
        )

    def with_calendar(self, calendar: CalendarSystem | str | None) -> "ResourceKey":
        """Return the same key addressed to another calendar system."""
        value = calendar.value if isinstance(calendar, CalendarSystem) else calendar
        if value is not None and value not in CALENDAR_PREFIXES:
            raise KeyFormatError(str(self), f"unknown calendar system {value!r}")
        return ResourceKey(
            name=self.name,
            calendar=value,
            width=self.width,
            standalone=self.standalone,
            numbering_system=self.numbering_system,
            namespace=self.namespace,
            java_time=self.java_time,
        )

    @classmethod
    def build(
        cls,
        name: str,
        *,
        calendar: CalendarSystem | str | None = None,
        width: Width | str | None = None,
        standalone: bool = False,
        java_time: bool = False,
    ) -> "ResourceKey":
        """Compose a key from its parts; see ``build_key``."""
        cal = calendar.value if isinstance(calendar, CalendarSystem) else calendar
        wid = width.value if isinstance(width, Width) else width
        if cal is not None and cal not in CALENDAR_PREFIXES:
            raise KeyFormatError(name, f"unknown calendar system {cal!r}")
        if wid is not None and wid not in WIDTH_PREFIXES:
            raise KeyFormatError(name, f"unknown width {wid!r}")
        if standalone and wid is not None:
            raise KeyFormatError(name, "standalone and width are exclusive")
        if not name or "." in name:
            raise KeyFormatError(name, "name must be a single non-empty segment")
        return cls(
            name=name,
            calendar=cal,
            width=wid,
            standalone=standalone,
            java_time=java_time,
        )

    @classmethod
    def parse(cls, key: str) -> "ResourceKey":
        """Decompose a resource key.

        Args:
            key: Resource key string.

        Returns:
            Parsed ResourceKey; ``str()`` of it equals ``key``.

        Raises:
            KeyFormatError: If the key is empty or has empty segments.
        """
        if not key:
            raise KeyFormatError(key, "empty key")

        head, sep, rest = key.partition(".")
        if head in NAMESPACES and sep:
            if not rest:
                raise KeyFormatError(key, f"missing name after {head!r}")
            return cls(name=rest, namespace=head)

        parts = key.split(".")
        if any(not p for p in parts):
            raise KeyFormatError(key, "empty segment")

        # "java.NumberElements" is the Javanese numbering system, so this
        # check must precede the java.time prefix.
        if (
            len(parts) == 2
            and parts[1] == NUMBER_ELEMENTS
            and _NUMBERING_SYSTEM_RE.match(parts[0])
        ):
            return cls(name=NUMBER_ELEMENTS, numbering_system=parts[0])

        java_time = False
        if len(parts) > 2 and parts[0] == "java" and parts[1] == "time":
            java_time = True
            parts = parts[2:]

        calendar = None
        if len(parts) > 1 and parts[0] in CALENDAR_PREFIXES:
            calendar = parts.pop(0)

        standalone = False
        width = None
        if len(parts) > 1 and parts[0] == STANDALONE_PREFIX:
            standalone = True
            parts.pop(0)
        elif len(parts) > 1 and parts[0] in WIDTH_PREFIXES:
            width = parts.pop(0)

        if len(parts) != 1:
            raise KeyFormatError(key, f"unexpected segments {'.'.join(parts[:-1])!r}")

        return cls(
            name=parts[0],
            calendar=calendar,
            width=width,
            standalone=standalone,
            java_time=java_time,
        )


def build_key(
    name: str,
    *,
    calendar: CalendarSystem | str | None = None,
    width: Width | str | None = None,
    standalone: bool = False,
    java_time: bool = False,
) -> str:
    """Compose a resource key from its parts.

    Args:
        name: Base name, e.g. "MonthNames".
        calendar: Calendar system; None for Gregorian.
        width: Width variant for eras and AM/PM markers.
        standalone: Standalone form of month/day/quarter names.
        java_time: The java.time alternate pattern set.

    Returns:
        Key string.

    Raises:
        KeyFormatError: For unknown calendar/width values or conflicting parts.
    """
    return str(
        ResourceKey.build(
            name,
            calendar=calendar,
            width=width,
            standalone=standalone,
            java_time=java_time,
        )
    )


def number_elements_key(numbering_system: str) -> str:
    """Key of the decimal symbol set for a numbering system ("latn", "arab")."""
    if not _NUMBERING_SYSTEM_RE.match(numbering_system):
        raise KeyFormatError(
            f"{numbering_system}.{NUMBER_ELEMENTS}", "invalid numbering system"
        )
    return f"{numbering_system}.{NUMBER_ELEMENTS}"


def field_key(field_name: str) -> str:
    """Key of a calendar field label ("year" -> "field.year")."""
    return f"field.{field_name}"
