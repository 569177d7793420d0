"""Shared fixtures for cldrtables tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from cldrtables import Registry, reset_registry


MONTHS = [
    "tammikuuta", "helmikuuta", "maaliskuuta", "huhtikuuta", "toukokuuta", "kesäkuuta",
    "heinäkuuta", "elokuuta", "syyskuuta", "lokakuuta", "marraskuuta", "joulukuuta", "",
]
DAYS = [
    "sunnuntaina", "maanantaina", "tiistaina", "keskiviikkona",
    "torstaina", "perjantaina", "lauantaina",
]
LATN = [".", ",", ";", "%", "0", "#", "-", "E", "‰", "∞", "NaN"]


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Isolate tests from the environment and from each other."""
    for name in ("CLDRTABLES_DATA_DIR", "CLDRTABLES_LAZY", "CLDRTABLES_VALIDATE",
                 "CLDRTABLES_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_registry()
    yield
    reset_registry()
    logger = logging.getLogger("cldrtables")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def package_registry() -> Registry:
    """Registry over the bundled data, shared across the session."""
    return Registry()


@pytest.fixture
def fi_entries() -> dict[str, Any]:
    """A small Finnish FormatData table with shared arrays."""
    days = list(DAYS)
    return {
        "MonthNames": list(MONTHS),
        "DayNames": days,
        "buddhist.DayNames": days,
        "latn.NumberElements": list(LATN),
        "field.year": "vuosi",
        "calendarname.buddhist": "buddhalainen kalenteri",
    }


@pytest.fixture
def sample_data(fi_entries) -> dict[str, Any]:
    """MemorySource input spanning two bundles."""
    return {
        "FormatData": {
            "fi": fi_entries,
            "bs_Cyrl": {"field.year": "година", "DayNames": list(DAYS)},
            "bs": {"field.year": "godina", "field.month": "mjesec"},
        },
        "LocaleNames": {
            "so": {"PT": "Bortuqaal", "pt": "Boortaqiis"},
        },
    }


def write_table(root: Path, bundle_dir: str, locale: str, doc: Any, suffix: str = ".json") -> Path:
    """Write one table document into a bundle layout."""
    directory = root / bundle_dir
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{locale}{suffix}"
    if isinstance(doc, str):
        path.write_text(doc, encoding="utf-8")
    else:
        path.write_text(json.dumps(doc, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """A directory layout with two FormatData tables and one TimeZoneNames table."""
    root = tmp_path / "data"
    write_table(root, "format_data", "fi", {
        "bundle": "FormatData",
        "locale": "fi",
        "shared": {"DayNames": DAYS},
        "entries": {
            "DayNames": {"$ref": "DayNames"},
            "islamic.DayNames": {"$ref": "DayNames"},
            "MonthNames": MONTHS,
            "field.year": "vuosi",
        },
    })
    write_table(root, "format_data", "th", {
        "bundle": "FormatData",
        "locale": "th",
        "entries": {"latn.NumberElements": LATN, "field.year": "ปี"},
    })
    write_table(root, "timezone_names", "en", {
        "bundle": "TimeZoneNames",
        "locale": "en",
        "shared": {
            "America_Pacific": [
                "Pacific Standard Time", "PST", "Pacific Daylight Time",
                "PDT", "Pacific Time", "PT",
            ],
        },
        "entries": {
            "America/Los_Angeles": {"$ref": "America_Pacific"},
            "PST": {"$ref": "America_Pacific"},
            "timezone.excity.America/St_Johns": "St. John’s",
        },
    })
    return root


@pytest.fixture
def table_writer():
    """Return the ``write_table`` helper."""
    return write_table
