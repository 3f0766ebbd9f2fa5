# toprompt/core/discovery/pattern_matching.py
"""
Ignore-file handling: parses gitignore-style lines into an ordered rule set
and answers whether a path relative to the traversal root is excluded.
"""
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Tuple

import pathspec
import structlog

from toprompt.config.settings import DEFAULT_IGNORE_FILENAME, DEFAULT_IGNORE_PATTERNS
from toprompt.exceptions import IgnoreFileError, describe_os_error

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IgnoreRule:
    # one compiled ignore-file line. excludes=False for "!" negations.
    source: str
    excludes: bool
    pattern: pathspec.patterns.GitWildMatchPattern

    def matches(self, path_str: str) -> bool:
        return self.pattern.match_file(path_str) is not None


def compile_rule(line: str) -> Optional[IgnoreRule]:
    """
    Compiles one ignore-file line. Returns None for blank lines, comments and
    lines pathspec rejects as malformed; those are skipped, never fatal.
    """
    stripped = line.rstrip("\r\n")
    if not stripped.strip() or stripped.lstrip().startswith("#"):
        return None
    try:
        pattern = pathspec.patterns.GitWildMatchPattern(stripped.strip())
    except ValueError as e:  # GitWildMatchPatternError is a ValueError
        log.warning("malformed_ignore_pattern_skipped", line=stripped, error=str(e))
        return None
    if pattern.include is None:
        # pathspec compiles some degenerate lines (e.g. "/") to no-ops.
        return None
    return IgnoreRule(source=stripped.strip(), excludes=bool(pattern.include), pattern=pattern)


class IgnoreRuleSet:
    """
    Ordered ignore rules with last-match-wins semantics.

    Read-only after construction; an empty set excludes nothing.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = (), source: Optional[Path] = None):
        self.rules: Tuple[IgnoreRule, ...] = tuple(rules)
        self.source = source

    def __len__(self) -> int:
        return len(self.rules)

    def __bool__(self) -> bool:
        return bool(self.rules)

    def __repr__(self) -> str:
        return f"IgnoreRuleSet(rules={[r.source for r in self.rules]!r}, source={self.source!r})"

    @classmethod
    def empty(cls) -> "IgnoreRuleSet":
        return cls()

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: Optional[Path] = None) -> "IgnoreRuleSet":
        rules: List[IgnoreRule] = []
        for line in lines:
            rule = compile_rule(line)
            if rule is not None:
                rules.append(rule)
        return cls(rules, source=source)

    @classmethod
    def with_defaults(cls) -> "IgnoreRuleSet":
        # built-in rules applied whenever ignore filtering is on.
        return cls.from_lines(DEFAULT_IGNORE_PATTERNS)

    @classmethod
    def from_file(cls, ignore_file: Path, explicit: bool = False) -> "IgnoreRuleSet":
        """
        Loads rules from ignore_file. A missing file yields an empty set; a file
        that exists but cannot be read or decoded raises IgnoreFileError.
        """
        if not ignore_file.exists():
            log.debug("ignore_file_not_found", path=str(ignore_file))
            return cls.empty()
        try:
            text = ignore_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise IgnoreFileError(ignore_file, f"not valid utf-8 ({e.reason})", explicit=explicit) from e
        except OSError as e:
            raise IgnoreFileError(ignore_file, describe_os_error(e), explicit=explicit) from e
        rule_set = cls.from_lines(text.splitlines(), source=ignore_file)
        log.info("ignore_file_loaded", path=str(ignore_file), rules=len(rule_set))
        return rule_set

    @classmethod
    def load(cls, root: Path, filename: str = DEFAULT_IGNORE_FILENAME) -> "IgnoreRuleSet":
        # reads the ignore file located directly in root.
        return cls.from_file(root / filename)

    def merge(self, other: "IgnoreRuleSet") -> "IgnoreRuleSet":
        # other's rules come later, so they win over ours.
        return IgnoreRuleSet(self.rules + other.rules, source=other.source or self.source)

    def is_excluded(self, relative_path: PurePath, is_dir: bool = False) -> bool:
        """
        Evaluates every rule in file order; the last matching rule decides.

        Directories are matched with a trailing "/" so that directory-only
        patterns such as "build/" apply to them and to everything beneath.
        """
        path_str = PurePath(relative_path).as_posix()
        if path_str in ("", "."):
            return False
        if is_dir and not path_str.endswith("/"):
            path_str += "/"
        excluded = False
        for rule in self.rules:
            if rule.matches(path_str):
                excluded = rule.excludes
        return excluded
