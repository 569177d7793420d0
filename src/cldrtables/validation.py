"""Shape validation for locale tables.

Checks that every array has the fixed length its key implies and that
scalar-only namespaces hold strings:

- month sets: 13 entries, the 13th an empty placeholder
- day sets: 7 entries
- quarter sets and Date/Time/DateTime pattern sets: 4 entries
- ``<numberingSystem>.NumberElements``: 11 symbols, single-character zero digit
- ``NumberPatterns``: 3 entries; ``AmPmMarkers``: 2 entries
- ``field.*``, ``calendarname.*``, ``timezone.*``, ``DefaultNumberingSystem``:
  strings
- TimeZoneNames zone arrays: 6 names; ``timezone.excity.*``: strings

Usage:
    from cldrtables.validation import validate_registry

    report = validate_registry(registry)
    for violation in report.at_least(Severity.MEDIUM):
        print(violation)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from cldrtables.errors import KeyFormatError
from cldrtables.keys import MONTH_SETS, ResourceKey
from cldrtables.table import LocaleTable
from cldrtables.types import BundleKind, NumberSymbol, Severity, TimeZoneNameIndex

logger = logging.getLogger(__name__)

TIMEZONE_NAME_COUNT = len(TimeZoneNameIndex)


@dataclass(frozen=True)
class ShapeViolation:
    """A single shape problem found in a table."""

    locale: str
    bundle: BundleKind
    key: str
    rule: str
    severity: Severity
    expected: Any | None = None
    actual: Any | None = None

    def __str__(self) -> str:
        text = f"[{self.severity.value}] {self.bundle.value}/{self.locale} {self.key}: {self.rule}"
        if self.expected is not None:
            text += f" (expected {self.expected}, got {self.actual})"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "locale": self.locale,
            "bundle": self.bundle.value,
            "key": self.key,
            "rule": self.rule,
            "severity": self.severity.value,
        }
        if self.expected is not None:
            result["expected"] = self.expected
        if self.actual is not None:
            result["actual"] = self.actual
        return result


@dataclass
class ValidationReport:
    """Violations collected over one or more tables."""

    violations: list[ShapeViolation] = field(default_factory=list)
    tables_checked: int = 0
    keys_checked: int = 0

    def __iter__(self) -> Iterator[ShapeViolation]:
        return iter(self.violations)

    def __len__(self) -> int:
        return len(self.violations)

    def at_least(self, severity: Severity) -> list[ShapeViolation]:
        """Violations at or above a severity."""
        return [v for v in self.violations if v.severity >= severity]

    def has_errors(self, threshold: Severity = Severity.MEDIUM) -> bool:
        return bool(self.at_least(threshold))

    def extend(self, other: "ValidationReport") -> None:
        self.violations.extend(other.violations)
        self.tables_checked += other.tables_checked
        self.keys_checked += other.keys_checked

    def to_dict(self) -> dict[str, Any]:
        return {
            "tables_checked": self.tables_checked,
            "keys_checked": self.keys_checked,
            "violations": [v.to_dict() for v in self.violations],
        }


def _format_data_violations(table: LocaleTable) -> Iterator[ShapeViolation]:
    def violation(key: str, rule: str, severity: Severity, **kw: Any) -> ShapeViolation:
        return ShapeViolation(table.locale, table.bundle, key, rule, severity, **kw)

    for key, value in table.items():
        try:
            parsed = ResourceKey.parse(key)
        except KeyFormatError as e:
            yield violation(key, f"unrecognized key: {e.reason}", Severity.LOW)
            continue

        if parsed.is_scalar:
            if not isinstance(value, str):
                yield violation(key, "scalar key holds an array", Severity.HIGH)
            continue

        expected = parsed.expected_length
        if expected is None:
            continue
        if isinstance(value, str):
            yield violation(key, "array key holds a string", Severity.HIGH)
            continue
        if len(value) != expected:
            yield violation(
                key, "wrong array length", Severity.HIGH, expected=expected, actual=len(value)
            )
            continue

        if parsed.name in MONTH_SETS and value[12] != "":
            yield violation(
                key, "13th month slot must be empty", Severity.MEDIUM,
                expected="", actual=value[12],
            )
        if parsed.is_number_elements and len(value[NumberSymbol.ZERO_DIGIT]) != 1:
            yield violation(
                key, "zero digit must be a single character", Severity.MEDIUM,
                expected=1, actual=len(value[NumberSymbol.ZERO_DIGIT]),
            )

    default_ns = table.get("DefaultNumberingSystem")
    if isinstance(default_ns, str) and f"{default_ns}.NumberElements" not in table:
        # Tables may inherit the symbols from a parent locale.
        yield violation(
            "DefaultNumberingSystem",
            f"no {default_ns}.NumberElements in this table",
            Severity.LOW,
        )


def _timezone_violations(table: LocaleTable) -> Iterator[ShapeViolation]:
    for key, value in table.items():
        if key.startswith("timezone."):
            if not isinstance(value, str):
                yield ShapeViolation(
                    table.locale, table.bundle, key, "scalar key holds an array", Severity.HIGH
                )
        elif isinstance(value, str):
            yield ShapeViolation(
                table.locale, table.bundle, key, "zone names must be an array", Severity.HIGH
            )
        elif len(value) != TIMEZONE_NAME_COUNT:
            yield ShapeViolation(
                table.locale, table.bundle, key, "wrong array length", Severity.HIGH,
                expected=TIMEZONE_NAME_COUNT, actual=len(value),
            )


def _display_name_violations(table: LocaleTable) -> Iterator[ShapeViolation]:
    for key, value in table.items():
        if not isinstance(value, str):
            yield ShapeViolation(
                table.locale, table.bundle, key, "display name must be a string", Severity.HIGH
            )


_CHECKS = {
    BundleKind.FORMAT_DATA: _format_data_violations,
    BundleKind.TIMEZONE_NAMES: _timezone_violations,
    BundleKind.LOCALE_NAMES: _display_name_violations,
    BundleKind.CURRENCY_NAMES: _display_name_violations,
}


def validate_table(table: LocaleTable) -> ValidationReport:
    """Validate one table.

    Args:
        table: Table to check.

    Returns:
        ValidationReport for the table.
    """
    violations = list(_CHECKS[table.bundle](table))
    return ValidationReport(violations=violations, tables_checked=1, keys_checked=len(table))


def validate_tables(tables: Iterable[LocaleTable]) -> ValidationReport:
    """Validate several tables into one report."""
    report = ValidationReport()
    for table in tables:
        report.extend(validate_table(table))
    return report


def validate_registry(
    registry: Any,
    bundles: Iterable[BundleKind] | None = None,
) -> ValidationReport:
    """Validate every table of a registry.

    Args:
        registry: Registry to check (all its tables get loaded).
        bundles: Restrict to these bundles; default all bundles.

    Returns:
        ValidationReport.
    """
    selected = list(bundles) if bundles is not None else registry.bundles()
    report = ValidationReport()
    for bundle in selected:
        for locale in registry.locales(bundle):
            table = registry.table(locale, bundle)
            if table is not None:
                report.extend(validate_table(table))
    logger.debug(
        "Validated %d tables, %d violations", report.tables_checked, len(report.violations)
    )
    return report
