# toprompt/cli/interface.py
import re
import sys
from pathlib import Path
from typing import Any, Optional, Pattern, Tuple

import click
from click_option_group import optgroup
import structlog

from toprompt import __version__ as app_version
from toprompt.cli.console_output import print_cli_summary_output, print_warnings
from toprompt.config.settings import MatchConfig, OutputFormat, compile_include_pattern
from toprompt.core.output import Destination, emit
from toprompt.core.pipeline import BundleGenerator
from toprompt.exceptions import FatalArgumentError, ToPromptError
from toprompt.logging_setup import configure_logging

log = structlog.get_logger(__name__)


def _compile_regex_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Pattern[str]]:
    try:
        return compile_include_pattern(value)
    except re.error as e:
        raise click.BadParameter(f"invalid regular expression {value!r}: {e}") from e


def _run_bundle_flow(config: MatchConfig, paths: Tuple[str, ...], to_stdout: bool) -> int:
    log.info("bundle_flow_started", arguments=len(paths))
    generator = BundleGenerator(config)
    try:
        result = generator.generate(paths)
    except ToPromptError:
        print_warnings(generator.warnings)
        raise

    destination = emit(result.bundle, to_stdout=to_stdout)
    if destination == Destination.STDOUT and not to_stdout:
        click.echo("Info: Clipboard copy failed. Bundle written to stdout instead.", err=True)

    print_cli_summary_output(config, result, destination)
    print_warnings(result.warnings)
    return 0


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("paths", nargs=-1, type=str)
@optgroup.group("Selection Options", help="Control which files end up in the bundle.")
@optgroup.option("-r", "--recursive", "recursive", is_flag=True, default=False, help="Descend into subdirectories of directory and glob arguments.")
@optgroup.option("-i", "--ignore", "use_ignore_file", is_flag=True, default=False, help="Exclude paths listed in the .gitignore of the first directory argument (or the current directory).")
@optgroup.option("--ignore-file", "ignore_file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Use this ignore file instead of .gitignore. Implies -i.")
@optgroup.option("-R", "--regex", "include_pattern", metavar="PATTERN", callback=_compile_regex_option, default=None, help="Only select directory/glob matches whose relative path matches this regular expression.")
@optgroup.group("Output Options", help="Control the bundle format and destination.")
@optgroup.option("--xml", "xml_output", is_flag=True, default=False, help="Emit <file path=...> elements instead of Markdown code blocks.")
@optgroup.option("--stdout", "to_stdout", is_flag=True, default=False, help="Write the bundle to stdout instead of the clipboard.")
@optgroup.group("Application Behavior", help="Logging and diagnostics.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info (shows ignored paths), -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="toprompt", prog_name="toprompt", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, paths: Tuple[str, ...], **cli_params: Any):
    """toprompt: copy files, glob matches and directories into one
    Markdown or XML block ready to paste into an LLM prompt.

    \b
    Examples:
      toprompt main.py utils.py   # specific files
      toprompt '*.py'             # glob, expanded here when quoted
      toprompt .                  # files in the current folder (non-recursive)
      toprompt -r .               # ... and all subfolders
      toprompt -ri .              # recurse, honouring .gitignore
    """
    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs", False))

    log.debug("cli_command_invoked", paths=list(paths), params={k: v for k, v in cli_params.items() if k != "include_pattern"})

    try:
        if not paths:
            click.echo(ctx.get_usage(), err=True)
            raise FatalArgumentError("no file, directory or pattern arguments given.")

        config = MatchConfig(
            recursive=cli_params["recursive"],
            use_ignore_file=cli_params["use_ignore_file"],
            include_pattern=cli_params["include_pattern"],
            output_format=OutputFormat.XML if cli_params["xml_output"] else OutputFormat.MARKDOWN,
            ignore_file=cli_params["ignore_file"],
        )
        ctx.exit(_run_bundle_flow(config, paths, cli_params["to_stdout"]))

    except click.exceptions.Exit as e: raise e
    except ToPromptError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nCancelled.", err=True)
        sys.exit(130)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
