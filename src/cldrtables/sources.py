"""Table sources.

A source knows which locales it holds per bundle and can load one table
at a time, which lets the registry load lazily.

Layout used by ``PackageSource`` and ``DirectorySource``:

    <root>/
      format_data/
        fi.json
        th.json
      locale_names/
        so.json
      ...

``FileSource`` reads one consolidated registry document and
``MemorySource`` wraps in-memory dictionaries.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Protocol

from cldrtables.codec import decode_registry, decode_table, parse_document, read_document
from cldrtables.errors import LoadError
from cldrtables.table import LocaleTable
from cldrtables.types import BundleKind

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIXES: dict[str, str] = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


class TableSource(ABC):
    """Base class for table sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable description of the source."""
        pass

    @abstractmethod
    def bundles(self) -> list[BundleKind]:
        """Bundles this source has tables for."""
        pass

    @abstractmethod
    def list_locales(self, bundle: BundleKind = BundleKind.FORMAT_DATA) -> list[str]:
        """Sorted locale tags available for a bundle."""
        pass

    @abstractmethod
    def load(
        self,
        locale: str,
        bundle: BundleKind = BundleKind.FORMAT_DATA,
    ) -> LocaleTable | None:
        """Load one table.

        Args:
            locale: Bundle-form locale tag.
            bundle: Bundle to load from.

        Returns:
            The table, or None if the source has no table for the locale.

        Raises:
            LoadError: If the table exists but cannot be read or decoded.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class _Node(Protocol):
    """The part of ``Path`` / ``importlib.resources`` Traversable we use."""

    name: str

    def joinpath(self, *child: str) -> Any: ...
    def iterdir(self) -> Any: ...
    def is_dir(self) -> bool: ...
    def is_file(self) -> bool: ...
    def read_text(self, encoding: str | None = None) -> str: ...


class _LayoutSource(TableSource):
    """Source over a ``<root>/<bundle dir>/<locale>.<ext>`` tree."""

    def __init__(self, root: _Node, label: str) -> None:
        self._root = root
        self._label = label
        self._index: dict[BundleKind, dict[str, _Node]] = {}

    @property
    def name(self) -> str:
        return self._label

    def _files(self, bundle: BundleKind) -> dict[str, _Node]:
        cached = self._index.get(bundle)
        if cached is not None:
            return cached
        directory = self._root.joinpath(bundle.directory)
        if not directory.is_dir():
            return {}
        files: dict[str, _Node] = {}
        for item in directory.iterdir():
            suffix = Path(item.name).suffix.lower()
            if suffix in DOCUMENT_SUFFIXES and item.is_file():
                locale = item.name[: -len(suffix)]
                if locale in files:
                    logger.warning(
                        "Ignoring %s: another document for %s/%s exists",
                        item.name, bundle.value, locale,
                    )
                    continue
                files[locale] = item
        self._index[bundle] = files
        return files

    def bundles(self) -> list[BundleKind]:
        return [kind for kind in BundleKind if self._root.joinpath(kind.directory).is_dir()]

    def list_locales(self, bundle: BundleKind = BundleKind.FORMAT_DATA) -> list[str]:
        return sorted(self._files(bundle))

    def load(
        self,
        locale: str,
        bundle: BundleKind = BundleKind.FORMAT_DATA,
    ) -> LocaleTable | None:
        node = self._files(bundle).get(locale)
        if node is None:
            return None
        where = f"{self._label}/{bundle.directory}/{node.name}"
        try:
            text = node.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Cannot read file: {e}", where) from e
        fmt = DOCUMENT_SUFFIXES[Path(node.name).suffix.lower()]
        table = decode_table(
            parse_document(text, fmt, where),
            path=where,
            bundle=bundle,
            locale=locale,
        )
        logger.debug("Loaded %s table %s (%d keys) from %s", bundle.value, locale, len(table), where)
        return table


class PackageSource(_LayoutSource):
    """The CLDR tables shipped inside the cldrtables package."""

    def __init__(self, package: str = "cldrtables", subdirectory: str = "data") -> None:
        root = resources.files(package).joinpath(subdirectory)
        super().__init__(root, f"{package}:{subdirectory}")


class DirectorySource(_LayoutSource):
    """Tables stored on disk in the bundle directory layout."""

    def __init__(self, base_path: Path | str) -> None:
        """Initialize directory source.

        Args:
            base_path: Directory holding one subdirectory per bundle.

        Raises:
            LoadError: If base_path is not a directory.
        """
        base_path = Path(base_path)
        if not base_path.is_dir():
            raise LoadError("Data directory not found", base_path)
        super().__init__(base_path, str(base_path))
        self.base_path = base_path


class FileSource(TableSource):
    """A consolidated registry document (JSON or YAML)."""

    def __init__(self, path: Path | str) -> None:
        """Read and decode the document.

        Raises:
            LoadError: If the file is missing or malformed.
        """
        self.path = Path(path)
        self._tables = decode_registry(read_document(self.path), self.path)

    @property
    def name(self) -> str:
        return str(self.path)

    def bundles(self) -> list[BundleKind]:
        return [kind for kind in BundleKind if kind in self._tables]

    def list_locales(self, bundle: BundleKind = BundleKind.FORMAT_DATA) -> list[str]:
        return sorted(self._tables.get(bundle, {}))

    def load(
        self,
        locale: str,
        bundle: BundleKind = BundleKind.FORMAT_DATA,
    ) -> LocaleTable | None:
        return self._tables.get(bundle, {}).get(locale)


class MemorySource(TableSource):
    """In-memory tables, for tests and embedding.

    Example:
        source = MemorySource({
            "FormatData": {
                "fi": {"field.year": "vuosi"},
            },
        })
    """

    def __init__(
        self,
        data: Mapping[BundleKind | str, Mapping[str, Mapping[str, Any] | LocaleTable]],
    ) -> None:
        self._tables: dict[BundleKind, dict[str, LocaleTable]] = {}
        for bundle_name, tables in data.items():
            try:
                bundle = BundleKind.from_string(bundle_name)
            except ValueError as e:
                raise LoadError(str(e), "<memory>") from e
            decoded = self._tables.setdefault(bundle, {})
            for locale, entries in tables.items():
                if isinstance(entries, LocaleTable):
                    decoded[locale] = entries
                    continue
                try:
                    decoded[locale] = LocaleTable(locale, entries, bundle=bundle)
                except (TypeError, ValueError) as e:
                    raise LoadError(str(e), f"<memory>#{bundle.value}/{locale}") from e

    @property
    def name(self) -> str:
        return "<memory>"

    def bundles(self) -> list[BundleKind]:
        return [kind for kind in BundleKind if kind in self._tables]

    def list_locales(self, bundle: BundleKind = BundleKind.FORMAT_DATA) -> list[str]:
        return sorted(self._tables.get(bundle, {}))

    def load(
        self,
        locale: str,
        bundle: BundleKind = BundleKind.FORMAT_DATA,
    ) -> LocaleTable | None:
        return self._tables.get(bundle, {}).get(locale)


def resolve_source(source: TableSource | Path | str | None) -> TableSource:
    """Turn a path or None into a TableSource.

    None selects the bundled data, a directory a DirectorySource, and a
    file a FileSource.

    Raises:
        LoadError: If a path does not exist.
    """
    if source is None:
        return PackageSource()
    if isinstance(source, TableSource):
        return source
    path = Path(source)
    if path.is_dir():
        return DirectorySource(path)
    if path.is_file():
        return FileSource(path)
    raise LoadError("Data source not found", path)
