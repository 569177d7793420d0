"""Tests for table sources."""

from __future__ import annotations

import logging

import pytest

from cldrtables import BundleKind, LoadError, LocaleTable
from cldrtables.codec import encode_registry, write_document
from cldrtables.sources import (
    DirectorySource,
    FileSource,
    MemorySource,
    PackageSource,
    resolve_source,
)


class TestPackageSource:
    """Test the bundled data."""

    def test_bundles(self):
        assert PackageSource().bundles() == list(BundleKind)

    def test_locale_counts(self):
        source = PackageSource()
        assert len(source.list_locales(BundleKind.FORMAT_DATA)) == 75
        assert len(source.list_locales(BundleKind.LOCALE_NAMES)) == 27
        assert len(source.list_locales(BundleKind.CURRENCY_NAMES)) == 3
        assert len(source.list_locales(BundleKind.TIMEZONE_NAMES)) == 26

    def test_load(self):
        table = PackageSource().load("fi")
        assert table is not None
        assert table.locale == "fi"
        assert table["field.year"] == "vuosi"

    def test_load_other_bundle(self):
        table = PackageSource().load("so", BundleKind.LOCALE_NAMES)
        assert table["PT"] == "Bortuqaal"

    def test_shared_arrays_alias(self):
        table = PackageSource().load("fi")
        assert table["DayNames"] is table["buddhist.DayNames"]

    def test_missing_locale(self):
        assert PackageSource().load("xx") is None


class TestDirectorySource:
    """Test DirectorySource."""

    def test_layout(self, data_dir):
        source = DirectorySource(data_dir)
        assert source.bundles() == [BundleKind.FORMAT_DATA, BundleKind.TIMEZONE_NAMES]
        assert source.list_locales() == ["fi", "th"]
        assert source.list_locales(BundleKind.LOCALE_NAMES) == []

    def test_load(self, data_dir):
        table = DirectorySource(data_dir).load("th")
        assert table["latn.NumberElements"][4] == "0"

    def test_missing_directory(self, tmp_path):
        with pytest.raises(LoadError, match="not found"):
            DirectorySource(tmp_path / "nope")

    def test_malformed_file(self, data_dir, table_writer):
        table_writer(data_dir, "format_data", "ar", "{not json")
        source = DirectorySource(data_dir)
        assert "ar" in source.list_locales()
        with pytest.raises(LoadError) as exc_info:
            source.load("ar")
        assert exc_info.value.path.endswith("format_data/ar.json")

    def test_file_name_must_match_locale(self, data_dir, table_writer):
        table_writer(data_dir, "format_data", "sv", {"locale": "fi", "entries": {}})
        with pytest.raises(LoadError, match="does not match"):
            DirectorySource(data_dir).load("sv")

    def test_yaml_table(self, data_dir, table_writer):
        table_writer(
            data_dir, "format_data", "sv",
            "bundle: FormatData\nlocale: sv\nentries:\n  field.year: år\n",
            suffix=".yaml",
        )
        assert DirectorySource(data_dir).load("sv")["field.year"] == "år"

    def test_duplicate_documents_warn(self, data_dir, table_writer, caplog):
        table_writer(data_dir, "format_data", "fi", "locale: fi\nentries: {}\n", suffix=".yml")
        with caplog.at_level(logging.WARNING, logger="cldrtables"):
            locales = DirectorySource(data_dir).list_locales()
        assert locales.count("fi") == 1
        assert "another document" in caplog.text

    def test_other_files_ignored(self, data_dir):
        (data_dir / "format_data" / "README.txt").write_text("notes")
        assert DirectorySource(data_dir).list_locales() == ["fi", "th"]


class TestFileSource:
    """Test FileSource."""

    def test_load(self, tmp_path, fi_entries):
        tables = [
            LocaleTable("fi", fi_entries),
            LocaleTable("so", {"PT": "Bortuqaal"}, bundle=BundleKind.LOCALE_NAMES),
        ]
        path = write_document(encode_registry(tables), tmp_path / "registry.json")
        source = FileSource(path)
        assert source.bundles() == [BundleKind.FORMAT_DATA, BundleKind.LOCALE_NAMES]
        assert source.list_locales() == ["fi"]
        assert source.load("fi") == tables[0]
        assert source.load("xx") is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError, match="File not found"):
            FileSource(tmp_path / "missing.json")


class TestMemorySource:
    """Test MemorySource."""

    def test_dicts(self, sample_data):
        source = MemorySource(sample_data)
        assert source.bundles() == [BundleKind.FORMAT_DATA, BundleKind.LOCALE_NAMES]
        assert source.list_locales() == ["bs", "bs_Cyrl", "fi"]
        assert source.load("fi")["field.year"] == "vuosi"

    def test_tables(self, fi_entries):
        table = LocaleTable("fi", fi_entries)
        assert MemorySource({BundleKind.FORMAT_DATA: {"fi": table}}).load("fi") is table

    def test_unknown_bundle(self):
        with pytest.raises(LoadError, match="Unknown bundle"):
            MemorySource({"Collation": {}})

    def test_bad_value(self):
        with pytest.raises(LoadError, match="FormatData/fi"):
            MemorySource({"FormatData": {"fi": {"field.year": 2024}}})


class TestResolveSource:
    """Test resolve_source."""

    def test_none_is_package(self):
        assert isinstance(resolve_source(None), PackageSource)

    def test_directory(self, data_dir):
        assert isinstance(resolve_source(data_dir), DirectorySource)
        assert isinstance(resolve_source(str(data_dir)), DirectorySource)

    def test_file(self, tmp_path):
        path = write_document(encode_registry([]), tmp_path / "empty.json")
        assert isinstance(resolve_source(path), FileSource)

    def test_source_passthrough(self, sample_data):
        source = MemorySource(sample_data)
        assert resolve_source(source) is source

    def test_missing(self, tmp_path):
        with pytest.raises(LoadError, match="not found"):
            resolve_source(tmp_path / "missing")
