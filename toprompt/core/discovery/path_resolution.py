# toprompt/core/discovery/path_resolution.py
"""
Turns raw command-line arguments into candidate files.

Each argument is classified once (literal file, glob pattern, directory or
missing) and then expanded according to its kind. Nothing is read here;
the collector does that.
"""
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import List, Optional, Tuple
import structlog

from toprompt.config.settings import MatchConfig
from toprompt.core.discovery.pattern_matching import IgnoreRuleSet
from toprompt.core.discovery.walker import walk_directory
from toprompt.exceptions import ResolutionWarning

log = structlog.get_logger(__name__)

_GLOB_MAGIC = re.compile(r"[*?[]")


def _has_magic(s: str) -> bool:
    return _GLOB_MAGIC.search(s) is not None


class ArgumentKind(Enum):
    LITERAL = "literal"
    PATTERN = "pattern"
    DIRECTORY = "directory"
    MISSING = "missing"


@dataclass(frozen=True)
class ClassifiedArgument:
    raw: str
    kind: ArgumentKind
    path: Path  # absolute; for patterns, the absolute base directory of the glob
    pattern: Optional[str] = None  # glob relative to path, patterns only
    base_display: str = ""  # base directory as the user wrote it, patterns only


@dataclass(frozen=True)
class Candidate:
    # a file selected for the bundle, not yet read.
    absolute_path: Path
    display_path: str
    argument: str
    kind: ArgumentKind


def _split_glob(raw: str) -> Tuple[str, str]:
    # leading components without wildcards form the base; the rest is the glob.
    parts = PurePath(raw).parts
    base_parts: List[str] = []
    for i, part in enumerate(parts):
        if _has_magic(part):
            return str(PurePath(*base_parts)) if base_parts else "", str(PurePath(*parts[i:]))
        base_parts.append(part)
    return str(PurePath(*base_parts)) if base_parts else "", ""


def classify_argument(raw: str, root: Path) -> ClassifiedArgument:
    """
    Classifies one argument relative to root. Existing paths win over glob
    interpretation, so a file literally named "a[1].txt" stays a literal.
    """
    candidate_path = root / raw
    if candidate_path.is_file():
        return ClassifiedArgument(raw=raw, kind=ArgumentKind.LITERAL, path=candidate_path)
    if candidate_path.is_dir():
        return ClassifiedArgument(raw=raw, kind=ArgumentKind.DIRECTORY, path=candidate_path)
    if _has_magic(raw):
        base_display, pattern = _split_glob(raw)
        return ClassifiedArgument(
            raw=raw,
            kind=ArgumentKind.PATTERN,
            path=root / base_display if base_display else root,
            pattern=pattern,
            base_display=base_display,
        )
    return ClassifiedArgument(raw=raw, kind=ArgumentKind.MISSING, path=candidate_path)


def _resolve_pattern(
    argument: ClassifiedArgument,
    config: MatchConfig,
    ignore: IgnoreRuleSet,
    ignore_root: Optional[Path],
) -> List[Candidate]:
    base = argument.path
    if not base.is_dir():
        return []
    matcher = base.rglob if config.recursive else base.glob
    matches = sorted(
        (m for m in matcher(argument.pattern) if m.is_file()),
        key=lambda m: m.relative_to(base).parts,
    )
    candidates: List[Candidate] = []
    for match in matches:
        display = (PurePath(argument.base_display) / match.relative_to(base)).as_posix()
        if not config.matches_include_pattern(display):
            log.debug("glob_match_not_matching_include_pattern", path=display)
            continue
        if config.use_ignore_file and ignore and _excluded_by_ignore(match, display, ignore, ignore_root):
            log.info("file_ignored", path=display)
            continue
        candidates.append(Candidate(match, display, argument.raw, argument.kind))
    return candidates


def _excluded_by_ignore(match: Path, display: str, ignore: IgnoreRuleSet, ignore_root: Optional[Path]) -> bool:
    # rules see the path relative to the ignore root, or the path as matched if outside it.
    rel: PurePath = PurePath(display)
    if ignore_root is not None:
        try:
            rel = Path(os.path.abspath(match)).relative_to(ignore_root)
        except ValueError:
            pass
    if ignore.is_excluded(rel):
        return True
    # a file inside an ignored directory is excluded with it.
    return any(ignore.is_excluded(parent, is_dir=True) for parent in list(rel.parents)[:-1])


def resolve(
    argument: ClassifiedArgument,
    config: MatchConfig,
    ignore: IgnoreRuleSet,
    ignore_root: Optional[Path] = None,
) -> List[Candidate]:
    """
    Expands one classified argument into candidate files.

    Literal files are returned unconditionally. Patterns and directories are
    filtered by config.include_pattern and, when enabled, by the ignore rules.
    Raises ResolutionWarning when the argument yields nothing.
    """
    if argument.kind == ArgumentKind.LITERAL:
        return [Candidate(argument.path, argument.raw, argument.raw, argument.kind)]

    if argument.kind == ArgumentKind.MISSING:
        raise ResolutionWarning(argument.raw, "does not exist or is not accessible")

    if argument.kind == ArgumentKind.PATTERN:
        candidates = _resolve_pattern(argument, config, ignore, ignore_root)
    else:
        candidates = [
            Candidate(abs_path, rel_path.as_posix(), argument.raw, argument.kind)
            for abs_path, rel_path in walk_directory(argument.path, config, ignore, ignore_root)
        ]

    log.debug("argument_resolved", argument=argument.raw, kind=argument.kind.value, count=len(candidates))
    if not candidates:
        raise ResolutionWarning(argument.raw)
    return candidates
