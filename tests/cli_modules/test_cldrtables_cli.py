"""Tests for the cldrtables CLI."""

import json

import pytest
from typer.testing import CliRunner

from cldrtables import BundleKind, load_registry
from cldrtables.cli import app


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


@pytest.fixture
def bad_data_dir(data_dir, table_writer):
    """A data directory with one table of the wrong shape."""
    table_writer(data_dir, "format_data", "sv", {
        "bundle": "FormatData",
        "locale": "sv",
        "entries": {"DayNames": ["sön", "mån"]},
    })
    return data_dir


# =============================================================================
# get
# =============================================================================


class TestGetCommand:
    """Tests for get command."""

    def test_string_value(self, runner):
        result = runner.invoke(app, ["get", "fi", "field.year"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "vuosi"

    def test_array_value(self, runner):
        result = runner.invoke(app, ["get", "fi", "DayNames"])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert len(lines) == 7
        assert lines[0] == "sunnuntaina"

    def test_json(self, runner):
        result = runner.invoke(app, ["get", "ar", "arab.NumberElements", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["locale"] == "ar"
        assert data["value"][4] == "٠"

    def test_other_bundle(self, runner):
        result = runner.invoke(app, ["get", "so", "PT", "--bundle", "LocaleNames"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "Bortuqaal"

    def test_unknown_locale(self, runner):
        result = runner.invoke(app, ["get", "xx", "DayNames"])
        assert result.exit_code == 3
        assert "Unknown locale" in result.output

    def test_unknown_key(self, runner):
        result = runner.invoke(app, ["get", "fi", "NoSuchKey"])
        assert result.exit_code == 4
        assert "NoSuchKey" in result.output

    def test_fallback(self, runner):
        assert runner.invoke(app, ["get", "bs_Cyrl_BA", "field.year"]).exit_code == 3
        result = runner.invoke(app, ["get", "bs_Cyrl_BA", "field.year", "--fallback"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "година"

    def test_fallback_follows_parent_locales(self, runner):
        result = runner.invoke(
            app, ["get", "es_MX", "Europe/Paris", "--bundle", "TimeZoneNames", "--fallback"]
        )
        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "hora estándar de Europa central"

    def test_fallback_reaches_root(self, runner):
        result = runner.invoke(app, ["get", "az_Cyrl", "field.zone", "--fallback"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "Zone"

    def test_invalid_bundle(self, runner):
        result = runner.invoke(app, ["get", "fi", "field.year", "--bundle", "Collation"])
        assert result.exit_code == 2

    def test_data_dir(self, runner, data_dir):
        result = runner.invoke(app, ["--data-dir", str(data_dir), "get", "th", "field.year"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "ปี"

    def test_missing_data_dir(self, runner, tmp_path):
        result = runner.invoke(app, ["--data-dir", str(tmp_path / "nope"), "get", "fi", "x"])
        assert result.exit_code == 10
        assert "not found" in result.output

    def test_malformed_data_file(self, runner, data_dir, table_writer):
        table_writer(data_dir, "format_data", "ar", "[]")
        result = runner.invoke(app, ["--data-dir", str(data_dir), "get", "ar", "field.year"])
        assert result.exit_code == 50


# =============================================================================
# locales / keys
# =============================================================================


class TestListingCommands:
    """Tests for locales and keys commands."""

    def test_locales(self, runner):
        result = runner.invoke(app, ["locales"])
        assert result.exit_code == 0
        locales = result.stdout.split()
        assert len(locales) == 75
        assert "yue_Hans" in locales

    def test_locales_json(self, runner):
        result = runner.invoke(app, ["locales", "--bundle", "currency_names", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == ["gsw", "mzn", "ps"]

    def test_keys_with_prefix(self, runner):
        result = runner.invoke(app, ["keys", "fi", "--prefix", "field."])
        assert result.exit_code == 0
        keys = result.stdout.split()
        assert "field.year" in keys
        assert all(k.startswith("field.") for k in keys)

    def test_keys_unknown_locale(self, runner):
        result = runner.invoke(app, ["keys", "xx"])
        assert result.exit_code == 3


# =============================================================================
# validate
# =============================================================================


class TestValidateCommand:
    """Tests for validate command."""

    def test_bundled_data_passes(self, runner):
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 0
        assert "Checked 131 tables" in result.stdout

    def test_fail_on_low(self, runner):
        result = runner.invoke(app, ["validate", "--fail-on", "low"])
        assert result.exit_code == 20

    def test_json_report(self, runner):
        result = runner.invoke(app, ["validate", "--bundle", "FormatData", "--json"])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["tables_checked"] == 75
        assert [v["locale"] for v in report["violations"]] == ["sd"]

    def test_bad_shapes_fail(self, runner, bad_data_dir):
        result = runner.invoke(app, ["--data-dir", str(bad_data_dir), "validate"])
        assert result.exit_code == 20
        assert "violation" in result.output

    def test_invalid_severity(self, runner):
        result = runner.invoke(app, ["validate", "--fail-on", "fatal"])
        assert result.exit_code == 2


# =============================================================================
# export / coverage
# =============================================================================


class TestExportCommand:
    """Tests for export command."""

    def test_export_json(self, runner, data_dir, tmp_path):
        output = tmp_path / "registry.json"
        result = runner.invoke(app, ["--data-dir", str(data_dir), "export", str(output)])
        assert result.exit_code == 0
        assert output.exists()

        exported = load_registry(output)
        original = load_registry(data_dir)
        assert exported.table("fi") == original.table("fi")
        assert exported.locales(BundleKind.TIMEZONE_NAMES) == ["en"]

    def test_export_selected_bundle_yaml(self, runner, data_dir, tmp_path):
        output = tmp_path / "registry.yaml"
        result = runner.invoke(
            app,
            ["--data-dir", str(data_dir), "export", str(output), "--bundle", "TimeZoneNames"],
        )
        assert result.exit_code == 0
        assert load_registry(output).bundles() == [BundleKind.TIMEZONE_NAMES]

    def test_unknown_suffix(self, runner, tmp_path):
        result = runner.invoke(app, ["export", str(tmp_path / "registry.txt")])
        assert result.exit_code == 13

    def test_format_overrides_suffix(self, runner, data_dir, tmp_path):
        output = tmp_path / "registry.txt"
        result = runner.invoke(
            app, ["--data-dir", str(data_dir), "export", str(output), "--format", "json"]
        )
        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["format"] == "cldrtables/1"

    def test_missing_output_directory(self, runner, tmp_path):
        result = runner.invoke(app, ["export", str(tmp_path / "no" / "registry.json")])
        assert result.exit_code == 12


class TestCoverageCommand:
    """Tests for coverage command."""

    def test_json(self, runner, data_dir):
        result = runner.invoke(app, ["--data-dir", str(data_dir), "coverage", "--json"])
        assert result.exit_code == 0
        rows = {row["locale"]: row for row in json.loads(result.stdout)}
        assert rows["fi"]["keys"] == 4
        assert rows["th"]["missing"] == 3

    def test_table(self, runner, data_dir):
        result = runner.invoke(app, ["--data-dir", str(data_dir), "coverage"])
        assert result.exit_code == 0
        assert "FormatData coverage" in result.stdout
        assert "th" in result.stdout
