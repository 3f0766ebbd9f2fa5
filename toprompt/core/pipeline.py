import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.console import Console as RichConsole
import structlog
import logging as stdlib_logging

from toprompt.config.settings import MatchConfig
from toprompt.core.discovery.path_resolution import (
    ArgumentKind,
    Candidate,
    ClassifiedArgument,
    classify_argument,
    resolve,
)
from toprompt.core.discovery.pattern_matching import IgnoreRuleSet
from toprompt.core.formatting import format_bundle
from toprompt.core.processing import FileCollection, collect
from toprompt.exceptions import FatalArgumentError, IgnoreFileError, NonFatalError, ResolutionWarning

log = structlog.get_logger(__name__)


@dataclass
class BundleResult:
    bundle: str
    collection: FileCollection
    warnings: List[NonFatalError] = field(default_factory=list)
    ignore_applied: bool = False
    directories_given: bool = False


class BundleGenerator:
    # runs classify -> resolve -> collect -> format once for a set of arguments.
    def __init__(self, config: MatchConfig, root: Optional[Path] = None):
        self.config = config
        self.root = (root or Path.cwd()).resolve()
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.warnings: List[NonFatalError] = []

    def _ignore_root(self, arguments: Sequence[ClassifiedArgument]) -> Path:
        # rooted at the first directory argument, else the invocation root.
        for argument in arguments:
            if argument.kind == ArgumentKind.DIRECTORY:
                return argument.path.resolve()
        return self.root

    def _load_ignore_rules(self, ignore_root: Path) -> IgnoreRuleSet:
        if not self.config.use_ignore_file:
            return IgnoreRuleSet.empty()

        explicit = self.config.ignore_file is not None
        ignore_file = (self.root / self.config.ignore_file) if explicit else ignore_root / self.config.ignore_filename
        if explicit and not ignore_file.exists():
            self.warnings.append(IgnoreFileError(ignore_file, "file does not exist", explicit=True))

        try:
            loaded = IgnoreRuleSet.from_file(ignore_file, explicit=explicit)
        except IgnoreFileError as e:
            if e.explicit:
                raise
            self.log.info("ignore_file_unreadable_using_defaults", path=str(ignore_file), reason=e.reason)
            self.warnings.append(e)
            loaded = IgnoreRuleSet.empty()
        return IgnoreRuleSet.with_defaults().merge(loaded)

    def _resolve_all(self, arguments: Sequence[ClassifiedArgument], ignore: IgnoreRuleSet, ignore_root: Path) -> List[Candidate]:
        candidates: List[Candidate] = []
        for argument in arguments:
            try:
                candidates.extend(resolve(argument, self.config, ignore, ignore_root))
            except ResolutionWarning as warning:
                self.log.info("argument_resolved_to_nothing", argument=argument.raw, reason=warning.reason)
                self.warnings.append(warning)
        return candidates

    def generate(self, raw_arguments: Sequence[str]) -> BundleResult:
        """
        Produces the bundle for raw_arguments, in argument order.

        Raises FatalArgumentError when there are no arguments, when nothing
        resolves, or when none of the resolved files could be read.
        """
        if not raw_arguments:
            raise FatalArgumentError("no file, directory or pattern arguments given.")
        self.warnings = []

        app_log_level = stdlib_logging.getLogger("toprompt").getEffectiveLevel()
        progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
        stderr_console = RichConsole(file=sys.stderr)

        with Progress(
            SpinnerColumn(), TextColumn("[bold blue]{task.description}"), BarColumn(),
            transient=True, disable=progress_disabled, console=stderr_console
        ) as progress:
            resolve_task = progress.add_task("resolving arguments...", total=None)
            arguments = [classify_argument(raw, self.root) for raw in raw_arguments]
            ignore_root = self._ignore_root(arguments)
            ignore = self._load_ignore_rules(ignore_root)
            candidates = self._resolve_all(arguments, ignore, ignore_root)
            progress.update(resolve_task, completed=True, description=f"resolved {len(candidates)} candidate files.")

            if not candidates:
                raise FatalArgumentError("no files matched the given arguments.")

            read_task = progress.add_task("reading files...", total=len(candidates))
            collection = collect(
                candidates,
                on_progress=lambda c: progress.update(read_task, advance=1, description=f"reading {c.display_path}"),
            )

        self.warnings.extend(collection.failures)
        if not collection.records:
            raise FatalArgumentError("no files were successfully processed.")

        bundle = format_bundle(collection, self.config.output_format)
        self.log.info("bundle_generated", files=len(collection), chars=len(bundle), warnings=len(self.warnings))
        return BundleResult(
            bundle=bundle,
            collection=collection,
            warnings=list(self.warnings),
            ignore_applied=self.config.use_ignore_file,
            directories_given=any(a.kind == ArgumentKind.DIRECTORY for a in arguments),
        )
