"""Serialization of tables and registries.

Table document:

    {
      "bundle": "FormatData",
      "locale": "fi",
      "shared": {"DayNames": ["sunnuntaina", ...]},
      "entries": {
        "DayNames": {"$ref": "DayNames"},
        "islamic.DayNames": {"$ref": "DayNames"},
        "field.year": "vuosi"
      }
    }

Every ``$ref`` to one shared array decodes to the same tuple object, and
encoding re-detects identity-shared tuples, so aliasing survives a round
trip. Registry document:

    {"format": "cldrtables/1", "bundles": {"FormatData": {"fi": <table>}}}

Documents are JSON, or YAML when PyYAML is installed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from cldrtables.errors import LoadError
from cldrtables.table import LocaleTable
from cldrtables.types import BundleKind

try:
    import yaml
    from yaml.constructor import ConstructorError

    HAS_YAML = True
except ImportError:
    HAS_YAML = False


logger = logging.getLogger(__name__)

REGISTRY_FORMAT = "cldrtables/1"
REF = "$ref"


# =============================================================================
# Document I/O
# =============================================================================


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """json object_pairs_hook that refuses repeated keys."""
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key {key!r}")
        result[key] = value
    return result


if HAS_YAML:

    class _UniqueKeyLoader(yaml.SafeLoader):
        """SafeLoader that refuses repeated mapping keys."""

        def construct_mapping(self, node, deep=False):  # type: ignore[override]
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                if key in seen:
                    raise ConstructorError(
                        None, None, f"duplicate key {key!r}", key_node.start_mark
                    )
                seen.add(key)
            return super().construct_mapping(node, deep=deep)


def detect_format(path: Path) -> str:
    """Return "json" or "yaml" from a file suffix.

    Raises:
        LoadError: If the suffix is unsupported.
    """
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    raise LoadError(f"Unsupported document format: {suffix or '(none)'}", path)


def parse_document(text: str, fmt: str = "json", path: Path | str | None = None) -> Any:
    """Parse document text.

    Args:
        text: Document text.
        fmt: "json" or "yaml".
        path: Source path for error messages.

    Returns:
        Parsed document.

    Raises:
        LoadError: On syntax errors, duplicate keys, or missing PyYAML.
    """
    if fmt == "json":
        try:
            return json.loads(text, object_pairs_hook=_reject_duplicates)
        except ValueError as e:
            raise LoadError(f"Invalid JSON: {e}", path) from e
    if fmt == "yaml":
        if not HAS_YAML:
            raise LoadError(
                "PyYAML is required for YAML documents. Install with: pip install pyyaml",
                path,
            )
        try:
            return yaml.load(text, Loader=_UniqueKeyLoader)
        except yaml.YAMLError as e:
            raise LoadError(f"Invalid YAML: {e}", path) from e
    raise LoadError(f"Unsupported document format: {fmt}", path)


def read_document(path: Path | str) -> Any:
    """Read and parse a JSON or YAML document.

    Raises:
        LoadError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    fmt = detect_format(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LoadError("File not found", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"Cannot read file: {e}", path) from e
    return parse_document(text, fmt, path)


def dump_document(data: Any, fmt: str = "json") -> str:
    """Serialize a document to text."""
    if fmt == "json":
        return json.dumps(data, ensure_ascii=False, indent=2) + "\n"
    if fmt == "yaml":
        if not HAS_YAML:
            raise ImportError(
                "PyYAML is required for YAML documents. Install with: pip install pyyaml"
            )
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    raise ValueError(f"Unsupported document format: {fmt}")


def write_document(data: Any, path: Path | str, fmt: str | None = None) -> Path:
    """Write a document, choosing the format from the suffix if not given."""
    path = Path(path)
    fmt = fmt or detect_format(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_document(data, fmt), encoding="utf-8")
    return path


# =============================================================================
# Table Documents
# =============================================================================


def _string_list(value: Any, where: str, path: Path | str | None) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise LoadError(f"{where} must be a list of strings", path)
    return tuple(value)


def decode_table(
    doc: Any,
    *,
    path: Path | str | None = None,
    bundle: BundleKind | None = None,
    locale: str | None = None,
) -> LocaleTable:
    """Build a LocaleTable from a table document.

    Args:
        doc: Parsed table document.
        path: Source path for error messages.
        bundle: Expected bundle; a document naming another bundle is rejected.
        locale: Expected locale; used when the document omits "locale".

    Returns:
        LocaleTable.

    Raises:
        LoadError: If the document is malformed.
    """
    if not isinstance(doc, dict):
        raise LoadError("Table document must be an object", path)

    doc_locale = doc.get("locale", locale)
    if not isinstance(doc_locale, str) or not doc_locale:
        raise LoadError("Table document has no locale", path)
    if locale is not None and doc_locale != locale:
        raise LoadError(f"Locale {doc_locale!r} does not match expected {locale!r}", path)

    try:
        doc_bundle = BundleKind.from_string(doc.get("bundle", bundle or BundleKind.FORMAT_DATA))
    except (ValueError, AttributeError) as e:
        raise LoadError(f"Invalid bundle: {e}", path) from e
    if bundle is not None and doc_bundle is not bundle:
        raise LoadError(
            f"Bundle {doc_bundle.value!r} does not match expected {bundle.value!r}", path
        )

    raw_shared = doc.get("shared") or {}
    if not isinstance(raw_shared, dict):
        raise LoadError("'shared' must be an object", path)
    shared = {
        name: _string_list(value, f"shared array {name!r}", path)
        for name, value in raw_shared.items()
    }

    entries = doc.get("entries")
    if not isinstance(entries, dict):
        raise LoadError("Table document has no 'entries' object", path)

    pairs: list[tuple[str, Any]] = []
    for key, value in entries.items():
        if isinstance(value, str):
            pairs.append((key, value))
        elif isinstance(value, list):
            pairs.append((key, _string_list(value, f"entry {key!r}", path)))
        elif isinstance(value, dict) and set(value) == {REF}:
            ref = value[REF]
            if ref not in shared:
                raise LoadError(f"Entry {key!r} references unknown shared array {ref!r}", path)
            pairs.append((key, shared[ref]))
        else:
            raise LoadError(
                f"Entry {key!r} must be a string, a list of strings or a {REF} object", path
            )

    try:
        return LocaleTable(doc_locale, pairs, bundle=doc_bundle)
    except (TypeError, ValueError) as e:
        raise LoadError(str(e), path) from e


def encode_table(table: LocaleTable, share: bool = True) -> dict[str, Any]:
    """Convert a LocaleTable to a table document.

    Args:
        table: Table to encode.
        share: Emit identity-shared arrays once under "shared".

    Returns:
        Table document (plain dicts, lists and strings).
    """
    shared: dict[str, list[str]] = {}
    names_by_id: dict[int, str] = {}
    if share:
        for group in table.shared_groups():
            name = group[0]
            shared[name] = list(table[name])
            names_by_id[id(table[name])] = name

    entries: dict[str, Any] = {}
    for key, value in table.entries.items():
        if isinstance(value, tuple):
            name = names_by_id.get(id(value))
            entries[key] = {REF: name} if name is not None else list(value)
        else:
            entries[key] = value

    return {
        "bundle": table.bundle.value,
        "locale": table.locale,
        "shared": shared,
        "entries": entries,
    }


def loads_table(text: str, fmt: str = "json", **kwargs: Any) -> LocaleTable:
    """Parse a table document from text."""
    return decode_table(parse_document(text, fmt, kwargs.get("path")), **kwargs)


def dumps_table(table: LocaleTable, fmt: str = "json", share: bool = True) -> str:
    """Serialize a table document to text."""
    return dump_document(encode_table(table, share=share), fmt)


# =============================================================================
# Registry Documents
# =============================================================================


def encode_registry(tables: Iterable[LocaleTable], share: bool = True) -> dict[str, Any]:
    """Build a consolidated registry document from tables."""
    bundles: dict[str, dict[str, Any]] = {}
    for table in tables:
        bundles.setdefault(table.bundle.value, {})[table.locale] = encode_table(
            table, share=share
        )
    return {"format": REGISTRY_FORMAT, "bundles": bundles}


def decode_registry(
    doc: Any,
    path: Path | str | None = None,
) -> dict[BundleKind, dict[str, LocaleTable]]:
    """Decode a consolidated registry document.

    Raises:
        LoadError: If the document or any table in it is malformed.
    """
    if not isinstance(doc, dict):
        raise LoadError("Registry document must be an object", path)
    fmt = doc.get("format")
    if fmt != REGISTRY_FORMAT:
        raise LoadError(f"Unsupported registry format {fmt!r}, expected {REGISTRY_FORMAT!r}", path)
    bundles = doc.get("bundles")
    if not isinstance(bundles, dict):
        raise LoadError("Registry document has no 'bundles' object", path)

    result: dict[BundleKind, dict[str, LocaleTable]] = {}
    for bundle_name, tables in bundles.items():
        try:
            bundle = BundleKind.from_string(bundle_name)
        except ValueError as e:
            raise LoadError(str(e), path) from e
        if not isinstance(tables, dict):
            raise LoadError(f"Bundle {bundle_name!r} must map locales to tables", path)
        decoded = result.setdefault(bundle, {})
        for locale, table_doc in tables.items():
            decoded[locale] = decode_table(
                table_doc,
                path=f"{path or '<registry>'}#{bundle.value}/{locale}",
                bundle=bundle,
                locale=locale,
            )
    logger.debug(
        "Decoded registry document %s: %s",
        path or "<memory>",
        ", ".join(f"{b.value}={len(t)}" for b, t in result.items()),
    )
    return result
