"""Locale tag parsing and normalization.

Tables are stored under the bundle form of a tag (``bs_Cyrl``,
``zh_Hant_HK``, ``es_419``). Callers may pass BCP 47 style tags with
either separator and any casing; ``normalize_locale`` maps them to the
bundle form. Normalization only fixes spelling. Choosing another locale
when a table is missing is fallback, which stays opt-in (see
``parent_locale_fallback``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Iterator, Mapping

# Legacy ISO 639 codes under which the source data is filed.
LEGACY_ALIASES: dict[str, str] = {
    "he": "iw",
    "yi": "ji",
    "id": "in",
}

ROOT_LOCALE = "root"


@dataclass(frozen=True)
class LocaleTag:
    """Parsed locale identifier.

    Attributes:
        language: ISO 639 language code (e.g., "bs", "yue")
        script: ISO 15924 script code (e.g., "Cyrl", "Hans")
        region: ISO 3166-1 or UN M.49 region code (e.g., "HK", "419")
        variant: Locale variant, kept verbatim
    """

    language: str
    script: str | None = None
    region: str | None = None
    variant: str | None = None

    @property
    def bundle_name(self) -> str:
        """Underscore form used to file tables (``bs_Cyrl``)."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        if self.variant:
            parts.append(self.variant)
        return "_".join(parts)

    @property
    def tag(self) -> str:
        """BCP 47 style tag (``bs-Cyrl``)."""
        return self.bundle_name.replace("_", "-")

    def __str__(self) -> str:
        return self.bundle_name

    @classmethod
    def parse(cls, tag: str) -> "LocaleTag":
        """Parse a locale tag.

        Supports formats:
        - Simple: "fi", "yue"
        - With script: "bs_Cyrl", "zh-Hant"
        - With region: "pt_PT", "es-419"
        - Full: "zh_Hant_HK"

        Args:
            tag: Locale tag string

        Returns:
            Parsed LocaleTag

        Raises:
            ValueError: If the tag is empty or its language subtag is invalid.
        """
        if not tag or not tag.strip():
            raise ValueError("Locale tag must be a non-empty string")

        parts = tag.strip().replace("-", "_").split("_")
        language = parts[0].lower()
        if not language.isalpha() or not 2 <= len(language) <= 8:
            raise ValueError(f"Invalid language subtag in locale tag {tag!r}")
        language = LEGACY_ALIASES.get(language, language)

        script = None
        region = None
        variant = None

        for part in parts[1:]:
            if not part:
                raise ValueError(f"Empty subtag in locale tag {tag!r}")
            if len(part) == 4 and part.isalpha() and script is None and region is None:
                script = part.capitalize()
            elif len(part) == 2 and part.isalpha() and region is None:
                region = part.upper()
            elif len(part) == 3 and part.isdigit() and region is None:
                region = part
            else:
                variant = part if variant is None else f"{variant}_{part}"

        return cls(language=language, script=script, region=region, variant=variant)

    def parents(self) -> Iterator["LocaleTag"]:
        """Yield truncated tags, most specific first, excluding self.

        ``zh_Hant_HK`` yields ``zh_Hant`` then ``zh``.
        """
        if self.variant:
            yield LocaleTag(self.language, self.script, self.region)
        if self.region and self.script:
            yield LocaleTag(self.language, self.script)
        if self.region or self.script:
            yield LocaleTag(self.language)


def normalize_locale(tag: str) -> str:
    """Normalize a locale tag to its bundle form.

    Args:
        tag: Locale tag in any casing, with "-" or "_".

    Returns:
        Bundle form, e.g. "bs-cyrl" -> "bs_Cyrl", "he" -> "iw".
    """
    return LocaleTag.parse(tag).bundle_name


def truncation_fallback(locale: str) -> list[str]:
    """Plain truncation fallback policy (``zh_Hant_HK`` -> ``zh_Hant``, ``zh``).

    Ignores the explicit parent table and never reaches ``root``; use
    ``parent_locale_fallback`` for CLDR inheritance.

    Args:
        locale: Bundle-form locale tag.

    Returns:
        Candidate locales to try after ``locale``, most specific first.
    """
    return [parent.bundle_name for parent in LocaleTag.parse(locale).parents()]


@lru_cache(maxsize=None)
def parent_locales() -> Mapping[str, str]:
    """Explicit CLDR parent locales, child to parent, in bundle form.

    Only locales whose parent differs from plain truncation are listed
    (``es_MX`` -> ``es_419``, ``bs_Cyrl`` -> ``root``).
    """
    text = (
        resources.files("cldrtables")
        .joinpath("data")
        .joinpath("parent_locales.json")
        .read_text(encoding="utf-8")
    )
    children_by_parent: dict[str, list[str]] = json.loads(text)
    return MappingProxyType({
        child: parent
        for parent, children in children_by_parent.items()
        for child in children
    })


def parent_locale(locale: str) -> str | None:
    """Return the CLDR parent of a bundle-form locale.

    The explicit parent table wins over truncation. A bare language's
    parent is ``root``, and ``root`` has none.

    Raises:
        ValueError: If ``locale`` is not a valid tag.
    """
    if locale == ROOT_LOCALE:
        return None
    explicit = parent_locales().get(locale)
    if explicit is not None:
        return explicit
    truncated = next(LocaleTag.parse(locale).parents(), None)
    return truncated.bundle_name if truncated is not None else ROOT_LOCALE


def parent_locale_fallback(locale: str) -> list[str]:
    """CLDR parent-chain fallback policy, ending at ``root``.

    ``es_MX`` yields ``es_419``, ``es``, ``root``; ``bs_Cyrl`` yields
    ``root`` only, so Cyrillic lookups never land on Latin ``bs`` data.

    Args:
        locale: Bundle-form locale tag.

    Returns:
        Candidate locales to try after ``locale``, most specific first.
    """
    chain: list[str] = []
    current = parent_locale(locale)
    while current is not None and current not in chain:
        chain.append(current)
        current = parent_locale(current)
    return chain
