"""Registry of locale tables.

The registry maps ``(bundle, locale)`` to one immutable ``LocaleTable``.
Tables are loaded from a ``TableSource`` either all at once or on first
access; once built, a table is never replaced.

Usage:
    from cldrtables import load_registry

    registry = load_registry()
    registry.get("fi", "field.year")          # Found(value='vuosi', ...)
    registry.get("xx", "DayNames")            # UnknownLocale(...)
    registry.get("fi", "NoSuchKey")           # UnknownKey(...)

    # Module-level shortcut over a lazily created default registry
    from cldrtables import get
    get("th", "latn.NumberElements").value[4] # "0"
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from cldrtables.codec import encode_registry, write_document
from cldrtables.config import get_settings
from cldrtables.errors import LoadError
from cldrtables.locale import normalize_locale
from cldrtables.lookup import Found, Lookup, UnknownKey, UnknownLocale
from cldrtables.sources import TableSource, resolve_source
from cldrtables.table import LocaleTable
from cldrtables.types import BundleKind, Severity
from cldrtables.validation import validate_table

logger = logging.getLogger(__name__)

FallbackPolicy = Callable[[str], Iterable[str]]


class Registry:
    """Immutable-after-load mapping from locale to LocaleTable.

    Thread-safe: a single lock guards lazy loading, so concurrent first
    access to a locale builds its table exactly once.

    Example:
        registry = Registry(lazy=True)
        registry.get("ar", "arab.NumberElements").value[4]   # "٠"

        # Opt-in CLDR truncation fallback
        registry = Registry(fallback=truncation_fallback)
    """

    def __init__(
        self,
        source: TableSource | Path | str | None = None,
        *,
        lazy: bool = True,
        validate: bool = False,
        fallback: FallbackPolicy | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            source: Table source, data directory or registry document.
                None uses the tables bundled with the package.
            lazy: Load each table on first access. When False every table
                is loaded now.
            validate: Reject tables with shape violations of MEDIUM
                severity or above.
            fallback: Policy returning further locales to try when the
                requested one has no table or lacks the key.

        Raises:
            LoadError: If the source is missing, or (non-lazy) any table
                is malformed or fails validation.
        """
        self._source = resolve_source(source)
        self._validate = validate
        self._fallback = fallback
        self._lock = threading.RLock()
        self._tables: dict[tuple[BundleKind, str], LocaleTable] = {}
        self._locales: dict[BundleKind, frozenset[str]] = {}
        if not lazy:
            self.preload()

    @property
    def source(self) -> TableSource:
        return self._source

    def __repr__(self) -> str:
        return f"Registry(source={self._source!r}, loaded={len(self._tables)})"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _locale_set(self, bundle: BundleKind) -> frozenset[str]:
        known = self._locales.get(bundle)
        if known is None:
            with self._lock:
                known = self._locales.get(bundle)
                if known is None:
                    known = frozenset(self._source.list_locales(bundle))
                    self._locales[bundle] = known
        return known

    def _check(self, table: LocaleTable) -> None:
        report = validate_table(table)
        problems = report.at_least(Severity.MEDIUM)
        if problems:
            raise LoadError(
                f"{len(problems)} shape violation(s)",
                f"{self._source.name}#{table.bundle.value}/{table.locale}",
                details=[str(v) for v in problems],
            )

    def _load(self, bundle: BundleKind, locale: str) -> LocaleTable | None:
        slot = (bundle, locale)
        table = self._tables.get(slot)
        if table is not None:
            return table
        if locale not in self._locale_set(bundle):
            return None
        with self._lock:
            table = self._tables.get(slot)
            if table is not None:
                return table
            table = self._source.load(locale, bundle)
            if table is None:
                return None
            if self._validate:
                self._check(table)
            self._tables[slot] = table
            logger.debug("Registered %s/%s", bundle.value, locale)
            return table

    def preload(self, bundles: Iterable[BundleKind | str] | None = None) -> int:
        """Load every table of the given bundles (default: all).

        Returns:
            Number of tables now loaded for those bundles.

        Raises:
            LoadError: If any table is malformed or fails validation.
        """
        selected = (
            [BundleKind.from_string(b) for b in bundles] if bundles is not None else self.bundles()
        )
        count = 0
        for bundle in selected:
            for locale in self.locales(bundle):
                if self._load(bundle, locale) is not None:
                    count += 1
        logger.debug("Preloaded %d tables from %s", count, self._source.name)
        return count

    def is_loaded(self, locale: str, bundle: BundleKind | str = BundleKind.FORMAT_DATA) -> bool:
        """Whether the table has already been built."""
        return (BundleKind.from_string(bundle), locale) in self._tables

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _resolve(self, locale: str, bundle: BundleKind) -> str | None:
        if locale in self._locale_set(bundle):
            return locale
        try:
            return normalize_locale(locale)
        except ValueError:
            return None

    def get(
        self,
        locale: str,
        key: str,
        bundle: BundleKind | str = BundleKind.FORMAT_DATA,
    ) -> Lookup:
        """Look up a key for a locale.

        Args:
            locale: Locale tag (``fi``, ``bs_Cyrl``, ``bs-Cyrl``).
            key: Resource key (``field.year``, ``islamic.DayNames``).
            bundle: Bundle to look in.

        Returns:
            Found, UnknownLocale or UnknownKey.

        Raises:
            ValueError: If locale or key is empty.
        """
        if not locale:
            raise ValueError("locale must be a non-empty string")
        if not key:
            raise ValueError("key must be a non-empty string")
        bundle = BundleKind.from_string(bundle)

        resolved = self._resolve(locale, bundle)
        if resolved is None:
            return UnknownLocale(locale=locale, key=key, bundle=bundle)

        candidates = [resolved]
        if self._fallback is not None:
            candidates.extend(c for c in self._fallback(resolved) if c not in candidates)

        first_table: LocaleTable | None = None
        for candidate in candidates:
            table = self._load(bundle, candidate)
            if table is None:
                continue
            if first_table is None:
                first_table = table
            value = table.get(key)
            if value is not None:
                return Found(value=value, locale=table.locale, key=key, bundle=bundle)

        if first_table is None:
            return UnknownLocale(locale=locale, key=key, bundle=bundle)
        return UnknownKey(locale=first_table.locale, key=key, bundle=bundle)

    def table(
        self,
        locale: str,
        bundle: BundleKind | str = BundleKind.FORMAT_DATA,
    ) -> LocaleTable | None:
        """Return the table for a locale, or None. No fallback applies."""
        bundle = BundleKind.from_string(bundle)
        resolved = self._resolve(locale, bundle) if locale else None
        if resolved is None:
            return None
        return self._load(bundle, resolved)

    def __contains__(self, locale: object) -> bool:
        if not isinstance(locale, str) or not locale:
            return False
        resolved = self._resolve(locale, BundleKind.FORMAT_DATA)
        return resolved is not None and resolved in self._locale_set(BundleKind.FORMAT_DATA)

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def bundles(self) -> list[BundleKind]:
        """Bundles with at least one table."""
        return [b for b in self._source.bundles() if self._locale_set(b)]

    def locales(self, bundle: BundleKind | str = BundleKind.FORMAT_DATA) -> list[str]:
        """Sorted locale tags of a bundle."""
        return sorted(self._locale_set(BundleKind.from_string(bundle)))

    def tables(self, bundle: BundleKind | str | None = None) -> Iterator[LocaleTable]:
        """Iterate over tables, loading them as needed."""
        selected = [BundleKind.from_string(bundle)] if bundle is not None else self.bundles()
        for kind in selected:
            for locale in self.locales(kind):
                table = self._load(kind, locale)
                if table is not None:
                    yield table

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_document(
        self,
        bundles: Iterable[BundleKind | str] | None = None,
        share: bool = True,
    ) -> dict[str, Any]:
        """Build a consolidated registry document."""
        if bundles is None:
            tables: Iterable[LocaleTable] = self.tables()
        else:
            tables = [t for b in bundles for t in self.tables(b)]
        return encode_registry(tables, share=share)

    def dump(
        self,
        path: Path | str,
        fmt: str | None = None,
        *,
        bundles: Iterable[BundleKind | str] | None = None,
        share: bool = True,
    ) -> Path:
        """Write a consolidated registry document (JSON or YAML)."""
        written = write_document(self.to_document(bundles, share=share), path, fmt)
        logger.info("Wrote registry document %s", written)
        return written


# =============================================================================
# Convenience Functions
# =============================================================================


def load_registry(
    source: TableSource | Path | str | None = None,
    *,
    validate: bool = False,
    fallback: FallbackPolicy | None = None,
) -> Registry:
    """Eagerly load a registry.

    Args:
        source: Table source, data directory or registry document.
        validate: Reject tables with shape violations.
        fallback: Optional fallback policy.

    Returns:
        Fully loaded Registry.

    Raises:
        LoadError: If the source is missing or malformed.
    """
    return Registry(source, lazy=False, validate=validate, fallback=fallback)


def dump_registry(
    registry: Registry,
    path: Path | str,
    fmt: str | None = None,
    share: bool = True,
) -> Path:
    """Write a registry to a consolidated document."""
    return registry.dump(path, fmt, share=share)


_default_registry: Registry | None = None
_default_lock = threading.Lock()


def get_registry() -> Registry:
    """Get the default registry, creating it from settings on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            settings = get_settings()
            _default_registry = Registry(
                settings.data_dir,
                lazy=settings.lazy,
                validate=settings.validate,
            )
        return _default_registry


def set_registry(registry: Registry) -> None:
    """Replace the default registry."""
    global _default_registry
    with _default_lock:
        _default_registry = registry


def reset_registry() -> None:
    """Drop the default registry (mainly for testing)."""
    global _default_registry
    with _default_lock:
        _default_registry = None


def get(
    locale: str,
    key: str,
    bundle: BundleKind | str = BundleKind.FORMAT_DATA,
) -> Lookup:
    """Look up a key in the default registry."""
    return get_registry().get(locale, key, bundle)
