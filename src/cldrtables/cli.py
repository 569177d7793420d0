"""Command-line interface for cldrtables."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cldrtables.cli_modules.common.errors import (
    CLIError,
    ErrorCode,
    UnknownKeyError,
    UnknownLocaleError,
    ValidationError,
    error_boundary,
    require_data_path,
    require_writable,
)
from cldrtables.cli_modules.common.options import (
    BundleOpt,
    DataDirOpt,
    FormatOpt,
    JsonOpt,
    LocaleArg,
    VerboseOpt,
    severity_callback,
)
from cldrtables.config import get_settings
from cldrtables.frames import coverage_frame
from cldrtables.locale import parent_locale_fallback
from cldrtables.log import configure_logging
from cldrtables.lookup import UnknownKey, UnknownLocale
from cldrtables.registry import FallbackPolicy, Registry
from cldrtables.types import BundleKind, Severity
from cldrtables.validation import validate_registry

app = typer.Typer(
    name="cldrtables",
    help="Look up and check CLDR locale resource tables",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

SEVERITY_STYLES = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}


@dataclass
class CLIState:
    """Options shared by all commands."""

    data_dir: Path | None = None
    validate: bool = False

    def registry(
        self,
        *,
        validate: bool | None = None,
        fallback: FallbackPolicy | None = None,
    ) -> Registry:
        if self.data_dir is not None:
            require_data_path(self.data_dir)
        return Registry(
            self.data_dir,
            validate=self.validate if validate is None else validate,
            fallback=fallback,
        )


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj if isinstance(ctx.obj, CLIState) else CLIState()


def _parse_bundles(names: Optional[list[str]]) -> list[BundleKind] | None:
    if not names:
        return None
    try:
        return [BundleKind.from_string(name) for name in names]
    except ValueError as e:
        raise CLIError(str(e), code=ErrorCode.USAGE_ERROR)


@app.callback()
@error_boundary
def main(
    ctx: typer.Context,
    data_dir: DataDirOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Look up and check CLDR locale resource tables."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = CLIState(
        data_dir=data_dir if data_dir is not None else settings.data_dir,
        validate=settings.validate,
    )


@app.command(name="locales")
@error_boundary
def locales_cmd(
    ctx: typer.Context,
    bundle: BundleOpt = BundleKind.FORMAT_DATA.value,
    as_json: JsonOpt = False,
) -> None:
    """List the locales of a bundle."""
    locales = _state(ctx).registry().locales(bundle)
    if as_json:
        typer.echo(json.dumps(locales))
        return
    for locale in locales:
        typer.echo(locale)


@app.command(name="keys")
@error_boundary
def keys_cmd(
    ctx: typer.Context,
    locale: LocaleArg,
    bundle: BundleOpt = BundleKind.FORMAT_DATA.value,
    prefix: Annotated[
        Optional[str],
        typer.Option("--prefix", "-p", help="Only keys starting with this prefix"),
    ] = None,
    as_json: JsonOpt = False,
) -> None:
    """List the keys of a locale's table."""
    table = _state(ctx).registry().table(locale, bundle)
    if table is None:
        raise UnknownLocaleError(locale, bundle.value)
    keys = table.keys_with_prefix(prefix) if prefix else list(table)
    if as_json:
        typer.echo(json.dumps(keys))
        return
    for key in keys:
        typer.echo(key)


@app.command(name="get")
@error_boundary
def get_cmd(
    ctx: typer.Context,
    locale: LocaleArg,
    key: Annotated[str, typer.Argument(help="Resource key, e.g. field.year or islamic.DayNames")],
    bundle: BundleOpt = BundleKind.FORMAT_DATA.value,
    fallback: Annotated[
        bool,
        typer.Option(
            "--fallback",
            help="Try CLDR parent locales (es_MX -> es_419 -> es -> root) on a miss",
        ),
    ] = False,
    as_json: JsonOpt = False,
) -> None:
    """Print one value. Arrays print one element per line."""
    if not locale.strip() or not key.strip():
        raise CLIError("Locale and key must be non-empty", code=ErrorCode.USAGE_ERROR)

    registry = _state(ctx).registry(fallback=parent_locale_fallback if fallback else None)
    result = registry.get(locale, key, bundle)
    if isinstance(result, UnknownLocale):
        raise UnknownLocaleError(locale, bundle.value)
    if isinstance(result, UnknownKey):
        raise UnknownKeyError(result.locale, key, bundle.value)

    value = result.value
    if as_json:
        payload = {
            "locale": result.locale,
            "bundle": bundle.value,
            "key": key,
            "value": list(value) if isinstance(value, tuple) else value,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False))
    elif isinstance(value, str):
        typer.echo(value)
    else:
        for item in value:
            typer.echo(item)


@app.command(name="validate")
@error_boundary
def validate_cmd(
    ctx: typer.Context,
    bundle: Annotated[
        Optional[list[str]],
        typer.Option("--bundle", "-b", help="Bundle to check (repeatable; default all)"),
    ] = None,
    fail_on: Annotated[
        str,
        typer.Option(
            "--fail-on",
            help="Exit non-zero on violations at or above this severity (low, medium, high)",
            callback=severity_callback,
        ),
    ] = Severity.MEDIUM.value,
    as_json: JsonOpt = False,
) -> None:
    """Check array lengths and value types of every table."""
    registry = _state(ctx).registry(validate=False)
    report = validate_registry(registry, _parse_bundles(bundle))

    if as_json:
        typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        if report.violations:
            table = Table(title="Shape Violations", show_header=True, header_style="bold magenta")
            table.add_column("Severity", justify="center")
            table.add_column("Bundle")
            table.add_column("Locale", style="cyan", no_wrap=True)
            table.add_column("Key")
            table.add_column("Problem")
            for v in sorted(report.violations, key=lambda v: -v.severity.rank):
                style = SEVERITY_STYLES[v.severity]
                problem = v.rule
                if v.expected is not None:
                    problem += f" (expected {v.expected}, got {v.actual})"
                table.add_row(
                    f"[{style}]{v.severity.value}[/{style}]",
                    v.bundle.value,
                    v.locale,
                    v.key,
                    problem,
                )
            console.print(table)
        console.print(
            f"Checked {report.tables_checked} tables, {report.keys_checked} keys: "
            f"{len(report)} violation(s)"
        )

    failing = report.at_least(fail_on)
    if failing:
        raise ValidationError(
            f"{len(failing)} violation(s) at or above {fail_on.value} severity",
            errors=[str(v) for v in failing],
        )


@app.command(name="export")
@error_boundary
def export_cmd(
    ctx: typer.Context,
    output: Annotated[Path, typer.Argument(help="Output file (.json, .yaml or .yml)")],
    bundle: Annotated[
        Optional[list[str]],
        typer.Option("--bundle", "-b", help="Bundle to export (repeatable; default all)"),
    ] = None,
    fmt: FormatOpt = None,
    no_share: Annotated[
        bool,
        typer.Option("--no-share", help="Write shared arrays out in full at every key"),
    ] = False,
) -> None:
    """Write the registry as one consolidated document."""
    require_writable(output)
    if fmt is None and output.suffix.lower() not in (".json", ".yaml", ".yml"):
        raise CLIError(
            f"Cannot infer format from {output.name}",
            code=ErrorCode.INVALID_FILE_FORMAT,
            hint="Use a .json/.yaml suffix or pass --format.",
        )
    registry = _state(ctx).registry()
    written = registry.dump(output, fmt, bundles=_parse_bundles(bundle), share=not no_share)
    console.print(f"[green]Registry written to {written}[/green]")


@app.command(name="coverage")
@error_boundary
def coverage_cmd(
    ctx: typer.Context,
    bundle: BundleOpt = BundleKind.FORMAT_DATA.value,
    as_json: JsonOpt = False,
) -> None:
    """Show per-locale key counts."""
    frame = coverage_frame(_state(ctx).registry(), bundle)
    if as_json:
        typer.echo(json.dumps(frame.to_dicts()))
        return

    table = Table(title=f"{bundle.value} coverage", show_header=True, header_style="bold magenta")
    table.add_column("Locale", style="cyan", no_wrap=True)
    table.add_column("Keys", justify="right")
    table.add_column("Arrays", justify="right")
    table.add_column("Strings", justify="right")
    table.add_column("Missing", justify="right")
    for row in frame.iter_rows(named=True):
        table.add_row(
            row["locale"],
            str(row["keys"]),
            str(row["arrays"]),
            str(row["strings"]),
            str(row["missing"]),
        )
    console.print(table)


if __name__ == "__main__":
    app()
