"""Reusable CLI options and arguments.

Options use Typer's Annotated pattern so every command spells them the
same way.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from cldrtables.types import BundleKind, Severity

# =============================================================================
# Callback Functions
# =============================================================================


def bundle_callback(value: str) -> BundleKind:
    """Convert a bundle name to BundleKind.

    Raises:
        typer.BadParameter: If the name matches no bundle.
    """
    try:
        return BundleKind.from_string(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def severity_callback(value: str) -> Severity:
    """Convert a severity name to Severity.

    Raises:
        typer.BadParameter: If the name matches no severity.
    """
    try:
        return Severity(value.lower())
    except ValueError:
        choices = ", ".join(s.value for s in Severity)
        raise typer.BadParameter(f"Unknown severity {value!r}. Expected one of: {choices}")


def format_callback(value: Optional[str]) -> Optional[str]:
    """Check a document format name."""
    if value is not None and value.lower() not in ("json", "yaml"):
        raise typer.BadParameter(f"Unsupported format {value!r}. Expected json or yaml")
    return value.lower() if value else value


# =============================================================================
# Option Types
# =============================================================================

BundleOpt = Annotated[
    str,
    typer.Option(
        "--bundle", "-b",
        help="Bundle: FormatData, LocaleNames, CurrencyNames or TimeZoneNames",
        callback=bundle_callback,
    ),
]

DataDirOpt = Annotated[
    Optional[Path],
    typer.Option(
        "--data-dir", "-d",
        help="Data directory or registry document (default: bundled data)",
    ),
]

JsonOpt = Annotated[
    bool,
    typer.Option("--json", help="Print JSON instead of text"),
]

FormatOpt = Annotated[
    Optional[str],
    typer.Option(
        "--format", "-f",
        help="Document format (json, yaml); default from the file suffix",
        callback=format_callback,
    ),
]

VerboseOpt = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]

LocaleArg = Annotated[str, typer.Argument(help="Locale tag, e.g. fi, bs_Cyrl or bs-Cyrl")]
