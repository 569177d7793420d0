"""Immutable per-locale resource table."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable, Iterator

from cldrtables.lookup import Found, Lookup, UnknownKey
from cldrtables.types import BundleKind, Value


def freeze_value(value: Any) -> Value:
    """Convert a raw value to its immutable form.

    Args:
        value: A string, or a list/tuple of strings.

    Returns:
        The string itself or a tuple of strings.

    Raises:
        TypeError: If the value is neither.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, tuple) and all(isinstance(v, str) for v in value):
        return value
    if isinstance(value, (list, tuple)):
        if not all(isinstance(v, str) for v in value):
            raise TypeError("array values must contain only strings")
        return tuple(value)
    raise TypeError(f"value must be a string or a list of strings, not {type(value).__name__}")


class LocaleTable(Mapping[str, Value]):
    """Read-only key -> value table for one locale of one bundle.

    Values are strings or tuples of strings. Several keys may hold the very
    same tuple object (e.g. ``MonthNames`` and ``buddhist.MonthNames``);
    since tuples are immutable this sharing cannot be observed through
    values, and ``to_dict()`` hands out independent lists.

    Example:
        table = LocaleTable("fi", {"field.year": "vuosi"})
        table["field.year"]            # "vuosi"
        table.lookup("NoSuchKey")      # UnknownKey(...)
    """

    __slots__ = ("_locale", "_bundle", "_entries")

    def __init__(
        self,
        locale: str,
        entries: Mapping[str, Any] | Iterable[tuple[str, Any]],
        bundle: BundleKind = BundleKind.FORMAT_DATA,
    ) -> None:
        """Initialize table.

        Args:
            locale: Bundle-form locale tag.
            entries: Mapping or (key, value) pairs; values are frozen.
            bundle: Bundle the table belongs to.

        Raises:
            ValueError: If locale is empty, a key is empty or repeated.
            TypeError: If a value is not a string or list of strings.
        """
        if not locale:
            raise ValueError("LocaleTable requires a locale")
        items = entries.items() if isinstance(entries, Mapping) else entries
        # Freeze each distinct source list once so that aliased input
        # arrays stay aliased. The source list is kept alive alongside its
        # frozen copy so its id cannot be reused while the loop runs.
        frozen_by_id: dict[int, tuple[list[str], Value]] = {}
        data: dict[str, Value] = {}
        for key, value in items:
            if not key:
                raise ValueError(f"Empty key in table {locale!r}")
            if key in data:
                raise ValueError(f"Duplicate key {key!r} in table {locale!r}")
            if isinstance(value, list):
                cached = frozen_by_id.get(id(value))
                if cached is None:
                    cached = (value, freeze_value(value))
                    frozen_by_id[id(value)] = cached
                data[key] = cached[1]
            else:
                data[key] = freeze_value(value)
        self._locale = locale
        self._bundle = BundleKind.from_string(bundle)
        self._entries = MappingProxyType(data)

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def bundle(self) -> BundleKind:
        return self._bundle

    @property
    def entries(self) -> Mapping[str, Value]:
        """Read-only view of the entries."""
        return self._entries

    def __getitem__(self, key: str) -> Value:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocaleTable):
            return NotImplemented
        return (
            self._locale == other._locale
            and self._bundle == other._bundle
            and dict(self._entries) == dict(other._entries)
        )

    def __hash__(self) -> int:
        return hash((self._locale, self._bundle))

    def __repr__(self) -> str:
        return (
            f"LocaleTable(locale={self._locale!r}, "
            f"bundle={self._bundle.value!r}, entries={len(self._entries)})"
        )

    def lookup(self, key: str) -> Lookup:
        """Look up a key.

        Args:
            key: Resource key.

        Returns:
            Found or UnknownKey.
        """
        try:
            value = self._entries[key]
        except KeyError:
            return UnknownKey(locale=self._locale, key=key, bundle=self._bundle)
        return Found(value=value, locale=self._locale, key=key, bundle=self._bundle)

    def keys_with_prefix(self, prefix: str) -> list[str]:
        """Return keys starting with prefix, in table order."""
        return [k for k in self._entries if k.startswith(prefix)]

    def shared_groups(self) -> list[list[str]]:
        """Group keys that hold the same array object.

        Returns:
            Lists of two or more keys, in table order, whose values are
            one shared tuple.
        """
        groups: dict[int, list[str]] = {}
        for key, value in self._entries.items():
            if isinstance(value, tuple):
                groups.setdefault(id(value), []).append(key)
        return [keys for keys in groups.values() if len(keys) > 1]

    def to_dict(self) -> dict[str, str | list[str]]:
        """Convert to a plain dictionary of independent, mutable copies."""
        return {
            key: list(value) if isinstance(value, tuple) else value
            for key, value in self._entries.items()
        }
