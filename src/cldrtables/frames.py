"""Tabular views of a registry as polars DataFrames.

Example:
    >>> from cldrtables import load_registry
    >>> from cldrtables.frames import coverage_frame
    >>> coverage_frame(load_registry()).sort("missing").head(3)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import polars as pl

from cldrtables.errors import KeyFormatError
from cldrtables.keys import ResourceKey
from cldrtables.types import BundleKind

if TYPE_CHECKING:
    from cldrtables.registry import Registry


REGISTRY_SCHEMA: dict[str, Any] = {
    "locale": pl.Utf8,
    "bundle": pl.Utf8,
    "key": pl.Utf8,
    "calendar": pl.Utf8,
    "kind": pl.Utf8,
    "length": pl.Int64,
    "value": pl.Utf8,
    "values": pl.List(pl.Utf8),
}


def _calendar_of(key: str, bundle: BundleKind) -> str | None:
    if bundle is not BundleKind.FORMAT_DATA:
        return None
    try:
        parsed = ResourceKey.parse(key)
    except KeyFormatError:
        return None
    if not parsed.is_calendar_data:
        return None
    return parsed.calendar or "gregorian"


def registry_frame(
    registry: "Registry",
    bundle: BundleKind | str = BundleKind.FORMAT_DATA,
) -> pl.DataFrame:
    """Flatten every table of a bundle into one row per key.

    Columns: ``locale``, ``bundle``, ``key``, ``calendar`` (null for keys
    without a calendar dimension), ``kind`` ("string" or "array"),
    ``length`` (1 for strings), ``value`` (strings only) and ``values``
    (arrays only).

    Args:
        registry: Registry to read; all tables of the bundle get loaded.
        bundle: Bundle to flatten.

    Returns:
        polars DataFrame.
    """
    bundle = BundleKind.from_string(bundle)
    columns: dict[str, list[Any]] = {name: [] for name in REGISTRY_SCHEMA}
    for table in registry.tables(bundle):
        for key, value in table.items():
            is_array = isinstance(value, tuple)
            columns["locale"].append(table.locale)
            columns["bundle"].append(bundle.value)
            columns["key"].append(key)
            columns["calendar"].append(_calendar_of(key, bundle))
            columns["kind"].append("array" if is_array else "string")
            columns["length"].append(len(value) if is_array else 1)
            columns["value"].append(None if is_array else value)
            columns["values"].append(list(value) if is_array else None)
    return pl.DataFrame(columns, schema=REGISTRY_SCHEMA)


def coverage_frame(
    registry: "Registry",
    bundle: BundleKind | str = BundleKind.FORMAT_DATA,
) -> pl.DataFrame:
    """Per-locale key coverage.

    ``missing`` counts keys that some other locale of the bundle has and
    this one does not.

    Returns:
        DataFrame with columns ``locale``, ``keys``, ``arrays``,
        ``strings`` and ``missing``, sorted by locale.
    """
    frame = registry_frame(registry, bundle)
    total = frame["key"].n_unique()
    return (
        frame.group_by("locale")
        .agg(
            pl.len().cast(pl.Int64).alias("keys"),
            (pl.col("kind") == "array").sum().cast(pl.Int64).alias("arrays"),
            (pl.col("kind") == "string").sum().cast(pl.Int64).alias("strings"),
        )
        .with_columns((pl.lit(total, dtype=pl.Int64) - pl.col("keys")).alias("missing"))
        .sort("locale")
    )
