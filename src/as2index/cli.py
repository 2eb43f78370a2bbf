"""Command line interface for as2index."""

from __future__ import annotations

import difflib
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from as2index.config import (
    As2IndexConfig,
    ConfigError,
    ConfigManager,
    assign_nested,
    resolve_with_precedence,
)
from as2index.errors import (
    As2IndexError,
    BufferTooShort,
    ContainerError,
    CyclicList,
    DateOutOfRange,
    EntryNotFound,
    InvalidDivision,
)
from as2index.index import As2Index, read_index

console = Console()

_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (BufferTooShort, "buffer_too_short"),
    (InvalidDivision, "invalid_division"),
    (DateOutOfRange, "date_out_of_range"),
    (CyclicList, "cyclic_list"),
    (EntryNotFound, "entry_not_found"),
    (ContainerError, "container_error"),
    (ConfigError, "config_error"),
)


def _error_code(exc: Exception) -> str:
    for error_type, code in _ERROR_CODES:
        if isinstance(exc, error_type):
            return code
    return "decode_error"


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    if summary_only and mode not in {"summary", "warning", "error"}:
        return

    console.print(message)


def _format_summary_line(command: str, target: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        target: Package path relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {escape(str(target))}: {parts}.[/green]"


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(json_output: bool) -> As2IndexConfig:
    try:
        return ConfigManager().load()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)


def _format_date(value: datetime, date_format: str) -> str:
    return value.strftime(date_format)


def _header_table(index: As2Index, config: As2IndexConfig, reveal_password: bool) -> Table:
    header = index.header
    date_format = config.cli.date_format
    if not header.has_password:
        password = "(none)"
    elif reveal_password:
        password = escape(header.decrypted_password)
    else:
        password = "*" * len(header.decrypted_password)

    table = Table(title="Package header", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    rows = (
        ("Folder title", escape(header.folder_title)),
        ("Friendly name", escape(header.abk_friendly_name)),
        ("Long name", escape(header.long_pack_name)),
        ("Version", escape(header.version)),
        ("Revision", str(header.revision)),
        ("Pack version", escape(header.pack_version)),
        ("Pack directory", escape(header.pack_dir)),
        ("Last backup", _format_date(header.last_backup_date, date_format)),
        ("Last edit", _format_date(header.last_edit_date, date_format)),
        ("Period end", _format_date(header.period_end_date, date_format)),
        ("Password", password),
        ("Records", str(len(index.records))),
    )
    for name, value in rows:
        table.add_row(name, value)
    return table


def _format_outline_line(title: str, level: int, reference: str, document_type: str) -> str:
    line = "  " * max(level, 0) + escape(title)
    details = [escape(part) for part in (reference, document_type) if part]
    if details:
        line += f" [dim]({', '.join(details)})[/dim]"
    return line


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="as2index")
def cli() -> None:
    """as2index reads the document outline stored in AS/2 packages.

    Returns:
        None: This function is invoked for its side effects.
    """


@cli.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit the decoded index as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--reveal-password",
    is_flag=True,
    help="Print the decrypted package password instead of a mask.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on stderr.")
def show(
    archive: str,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    reveal_password: bool,
    verbose: bool,
) -> None:
    """Decode ARCHIVE and display its header and document outline.

    Args:
        archive: Path to the AS/2 package.
        json_output: Emit JSON instead of tables.
        summary_mode: Only emit the summary line.
        quiet: Suppress non-error output.
        reveal_password: Print the decrypted password in clear text.
        verbose: Enable debug logging.

    Raises:
        click.ClickException: If the package cannot be decoded.
    """
    config = _load_config(json_output)
    _configure_logging(config.logging.level, verbose)

    try:
        index = read_index(Path(archive), config.decoding)
    except As2IndexError as exc:
        _handle_cli_error(str(exc), code=_error_code(exc), json_output=json_output, original=exc)

    if json_output:
        console.print_json(data=index.model_dump(mode="json"))
        return

    quiet = quiet or config.cli.quiet_default
    summary_only = summary_mode or config.cli.summary_default
    reveal = reveal_password or config.cli.reveal_password

    _emit_message(
        _header_table(index, config, reveal),
        mode="detail",
        quiet=quiet,
        summary_only=summary_only,
    )
    for record in index.records:
        _emit_message(
            _format_outline_line(
                record.title, record.tree_level, record.reference, record.document_type
            ),
            mode="detail",
            quiet=quiet,
            summary_only=summary_only,
        )
    _emit_message(
        _format_summary_line(
            "Show", archive, {"records": len(index.records), "max_depth": index.max_depth}
        ),
        mode="summary",
        quiet=quiet,
        summary_only=summary_only,
    )


@cli.group()
def config() -> None:
    """Manage as2index configuration files and overrides.

    Returns:
        None: This function is invoked for its side effects.
    """


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path describing the configuration field to update.
        value: YAML-literal value to write into the configuration file.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'cli.date_format'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=As2IndexConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    # The timestamp comment changes on every save.
    if not any(
        line.startswith(("+", "-")) and not line.startswith(("+++", "---", "+#", "-#"))
        for line in diff
    ):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Entry point used by the console script."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
