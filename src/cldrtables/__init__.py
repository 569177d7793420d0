"""cldrtables - CLDR locale resource tables for calendar, number and name data."""

from cldrtables.errors import (
    CLDRTablesError,
    ConfigError,
    KeyFormatError,
    LoadError,
    ResourceNotFoundError,
)
from cldrtables.types import (
    BundleKind,
    CalendarSystem,
    NumberSymbol,
    Severity,
    TimeZoneNameIndex,
    Value,
    Width,
)
from cldrtables.keys import ResourceKey, build_key, field_key, number_elements_key
from cldrtables.locale import (
    LocaleTag,
    normalize_locale,
    parent_locale,
    parent_locale_fallback,
    truncation_fallback,
)
from cldrtables.lookup import Found, Lookup, UnknownKey, UnknownLocale
from cldrtables.table import LocaleTable
from cldrtables.sources import (
    DirectorySource,
    FileSource,
    MemorySource,
    PackageSource,
    TableSource,
)
from cldrtables.registry import (
    Registry,
    dump_registry,
    get,
    get_registry,
    load_registry,
    reset_registry,
    set_registry,
)
from cldrtables.validation import (
    ShapeViolation,
    ValidationReport,
    validate_registry,
    validate_table,
)
from cldrtables.frames import coverage_frame, registry_frame
from cldrtables.config import Settings, get_settings
from cldrtables.log import configure_logging

# Version: Single source of truth from pyproject.toml
try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("cldr-tables")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev"

__all__ = [
    # Lookup
    "Registry",
    "load_registry",
    "dump_registry",
    "get",
    "get_registry",
    "set_registry",
    "reset_registry",
    "LocaleTable",
    "Found",
    "UnknownLocale",
    "UnknownKey",
    "Lookup",
    # Keys and locales
    "ResourceKey",
    "build_key",
    "field_key",
    "number_elements_key",
    "LocaleTag",
    "normalize_locale",
    "parent_locale",
    "parent_locale_fallback",
    "truncation_fallback",
    # Types
    "BundleKind",
    "CalendarSystem",
    "NumberSymbol",
    "Severity",
    "TimeZoneNameIndex",
    "Value",
    "Width",
    # Sources
    "TableSource",
    "PackageSource",
    "DirectorySource",
    "FileSource",
    "MemorySource",
    # Validation and views
    "ShapeViolation",
    "ValidationReport",
    "validate_table",
    "validate_registry",
    "registry_frame",
    "coverage_frame",
    # Settings and logging
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "CLDRTablesError",
    "LoadError",
    "ResourceNotFoundError",
    "KeyFormatError",
    "ConfigError",
]
