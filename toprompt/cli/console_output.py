# toprompt/cli/console_output.py
"""
Prints warnings and the post-copy summary to stderr; stdout is reserved for
the bundle itself.
"""
from typing import Iterable

import click
import structlog

from toprompt.config.settings import CLIPBOARD_PREVIEW_CHARS, MatchConfig
from toprompt.core.output import Destination
from toprompt.core.pipeline import BundleResult
from toprompt.exceptions import NonFatalError

log = structlog.get_logger(__name__)


def print_warnings(warnings: Iterable[NonFatalError]):
    for warning in warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)


def print_cli_summary_output(config: MatchConfig, result: BundleResult, destination: Destination):
    """Mirrors what was copied: file count, applied rules and a short preview."""
    file_count = len(result.collection)
    if destination == Destination.STDOUT:
        log.debug("summary_skipped_for_stdout", files=file_count)
        return

    click.secho(f"\nSuccessfully copied {file_count} file(s) to clipboard!", fg="green", err=True)
    if result.ignore_applied:
        click.echo("(ignore rules were applied)", err=True)
    if config.recursive:
        click.echo("(processed directories recursively)", err=True)
    elif result.directories_given:
        click.echo("(processed directories non-recursively)", err=True)

    preview = result.bundle[:CLIPBOARD_PREVIEW_CHARS]
    click.secho(f"\n--- Clipboard Contents Preview (first {CLIPBOARD_PREVIEW_CHARS} chars) ---\n", fg="cyan", err=True)
    click.echo(preview + ("..." if len(result.bundle) > CLIPBOARD_PREVIEW_CHARS else ""), err=True)
