import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Pattern, Tuple
import structlog

log = structlog.get_logger(__name__)

class OutputFormat(Enum):
    # bundle shapes the formatter can render.
    MARKDOWN = "markdown"
    XML = "xml"


DEFAULT_OUTPUT_FORMAT = OutputFormat.MARKDOWN
DEFAULT_IGNORE_FILENAME = ".gitignore"
# evaluated before the ignore file's own patterns, so the file can negate them.
DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (".git/", ".gitignore")
CLIPBOARD_PREVIEW_CHARS = 500


@dataclass(frozen=True)
class MatchConfig:
    """Immutable per-run settings derived from the command-line flags."""
    recursive: bool = False
    use_ignore_file: bool = False
    include_pattern: Optional[Pattern[str]] = None
    output_format: OutputFormat = DEFAULT_OUTPUT_FORMAT
    ignore_file: Optional[Path] = None  # explicit ignore file, overrides the root lookup
    ignore_filename: str = DEFAULT_IGNORE_FILENAME

    def __post_init__(self):
        if self.ignore_file is not None and not self.use_ignore_file:
            # an explicit ignore file only makes sense with filtering on.
            object.__setattr__(self, "use_ignore_file", True)
        log.debug(
            "match_config_finalized",
            recursive=self.recursive,
            use_ignore_file=self.use_ignore_file,
            include_pattern=self.include_pattern.pattern if self.include_pattern else None,
            output_format=self.output_format.value,
        )

    def matches_include_pattern(self, relative_posix_path: str) -> bool:
        # no pattern configured means everything is selected.
        if self.include_pattern is None:
            return True
        return self.include_pattern.search(relative_posix_path) is not None


def compile_include_pattern(pattern: Optional[str]) -> Optional[Pattern[str]]:
    # raises re.error for an invalid expression; the cli turns that into a usage error.
    if not pattern:
        return None
    return re.compile(pattern)
