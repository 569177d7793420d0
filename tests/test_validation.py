"""Tests for table shape validation."""

from __future__ import annotations

import pytest

from cldrtables import BundleKind, LocaleTable, Severity
from cldrtables.validation import (
    ShapeViolation,
    ValidationReport,
    validate_registry,
    validate_table,
    validate_tables,
)

LATN = [".", ",", ";", "%", "0", "#", "-", "E", "‰", "∞", "NaN"]


def _rules(report: ValidationReport) -> list[tuple[str, Severity]]:
    return [(v.key, v.severity) for v in report]


# =============================================================================
# FormatData rules
# =============================================================================


class TestFormatDataRules:
    """Test FormatData shape rules."""

    def test_valid_table(self, fi_entries):
        report = validate_table(LocaleTable("fi", fi_entries))
        assert len(report) == 0
        assert report.tables_checked == 1
        assert report.keys_checked == len(fi_entries)

    @pytest.mark.parametrize(
        "key,length",
        [
            ("MonthNames", 12),
            ("islamic.standalone.MonthAbbreviations", 14),
            ("DayNarrows", 6),
            ("roc.QuarterNames", 3),
            ("java.time.DatePatterns", 5),
            ("latn.NumberElements", 10),
            ("NumberPatterns", 2),
            ("narrow.AmPmMarkers", 3),
        ],
    )
    def test_wrong_lengths(self, key, length):
        report = validate_table(LocaleTable("fi", {key: [""] * length}))
        [violation] = report.violations
        assert violation.key == key
        assert violation.severity is Severity.HIGH
        assert violation.actual == length
        assert violation.expected != length

    def test_string_where_array_expected(self):
        report = validate_table(LocaleTable("fi", {"DayNames": "sunnuntaina"}))
        assert _rules(report) == [("DayNames", Severity.HIGH)]
        assert "holds a string" in report.violations[0].rule

    def test_array_where_scalar_expected(self):
        table = LocaleTable("fi", {
            "field.year": ["vuosi"],
            "calendarname.roc": ["x"],
            "DefaultNumberingSystem": ["latn"],
        })
        assert [s for _, s in _rules(validate_table(table))] == [Severity.HIGH] * 3

    def test_thirteenth_month_must_be_empty(self):
        report = validate_table(LocaleTable("fi", {"MonthNarrows": ["M"] * 13}))
        [violation] = report.violations
        assert violation.severity is Severity.MEDIUM
        assert violation.actual == "M"

    def test_zero_digit_single_character(self):
        symbols = list(LATN)
        symbols[4] = "00"
        report = validate_table(LocaleTable("th", {"latn.NumberElements": symbols}))
        assert _rules(report) == [("latn.NumberElements", Severity.MEDIUM)]

    def test_unparseable_key_is_low(self):
        report = validate_table(LocaleTable("fi", {"foo.bar.DayNames": "x"}))
        assert _rules(report) == [("foo.bar.DayNames", Severity.LOW)]

    def test_default_numbering_system_without_symbols(self):
        table = LocaleTable("sd", {"DefaultNumberingSystem": "arab", "latn.NumberElements": LATN})
        assert _rules(validate_table(table)) == [("DefaultNumberingSystem", Severity.LOW)]

    def test_eras_are_not_length_checked(self):
        table = LocaleTable("ja", {"japanese.Eras": ["西暦", "明治", "大正", "昭和", "平成"]})
        assert len(validate_table(table)) == 0


# =============================================================================
# Other bundles
# =============================================================================


class TestOtherBundles:
    """Test TimeZoneNames and display-name rules."""

    def test_zone_arrays(self):
        table = LocaleTable(
            "en",
            {
                "America/Los_Angeles": ["a"] * 6,
                "PST": ["a"] * 5,
                "EST": "Eastern",
                "timezone.excity.America/St_Johns": "St. John’s",
                "timezone.excity.Asia/Tokyo": ["Tokyo"],
            },
            bundle=BundleKind.TIMEZONE_NAMES,
        )
        report = validate_table(table)
        assert _rules(report) == [
            ("PST", Severity.HIGH),
            ("EST", Severity.HIGH),
            ("timezone.excity.Asia/Tokyo", Severity.HIGH),
        ]

    def test_display_names_are_strings(self):
        table = LocaleTable(
            "so", {"PT": "Bortuqaal", "pt": ["Boortaqiis"]}, bundle=BundleKind.LOCALE_NAMES
        )
        assert _rules(validate_table(table)) == [("pt", Severity.HIGH)]

    def test_currency_names_are_strings(self):
        table = LocaleTable("ps", {"AFN": "؋", "afn": ["x"]}, bundle=BundleKind.CURRENCY_NAMES)
        assert _rules(validate_table(table)) == [("afn", Severity.HIGH)]


# =============================================================================
# Reports
# =============================================================================


class TestReport:
    """Test ValidationReport and ShapeViolation."""

    def test_thresholds(self):
        report = validate_tables([
            LocaleTable("fi", {"MonthNarrows": ["M"] * 13}),
            LocaleTable("sd", {"DefaultNumberingSystem": "arab"}),
        ])
        assert report.tables_checked == 2
        assert len(report.at_least(Severity.LOW)) == 2
        assert len(report.at_least(Severity.MEDIUM)) == 1
        assert report.has_errors()
        assert not report.has_errors(Severity.HIGH)

    def test_violation_rendering(self):
        violation = ShapeViolation(
            "fi", BundleKind.FORMAT_DATA, "DayNames", "wrong array length",
            Severity.HIGH, expected=7, actual=6,
        )
        assert str(violation) == (
            "[high] FormatData/fi DayNames: wrong array length (expected 7, got 6)"
        )
        assert violation.to_dict() == {
            "locale": "fi",
            "bundle": "FormatData",
            "key": "DayNames",
            "rule": "wrong array length",
            "severity": "high",
            "expected": 7,
            "actual": 6,
        }

    def test_report_to_dict(self):
        report = validate_table(LocaleTable("fi", {"field.year": "vuosi"}))
        assert report.to_dict() == {"tables_checked": 1, "keys_checked": 1, "violations": []}


# =============================================================================
# Bundled data
# =============================================================================


class TestBundledData:
    """The shipped tables satisfy every shape rule."""

    def test_only_known_low_violation(self, package_registry):
        report = validate_registry(package_registry)
        assert report.tables_checked == 75 + 27 + 3 + 26
        assert [(v.locale, v.key, v.severity) for v in report] == [
            ("sd", "DefaultNumberingSystem", Severity.LOW)
        ]

    def test_root_table_is_well_formed(self, package_registry):
        root = package_registry.table("root")
        assert len(root) == 168
        assert len(validate_table(root)) == 0

    def test_restrict_bundles(self, package_registry):
        report = validate_registry(package_registry, [BundleKind.CURRENCY_NAMES])
        assert report.tables_checked == 3
        assert len(report) == 0
