"""
Reads candidate files into FileRecords, dropping duplicates and recording
per-file read failures instead of aborting.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple
import structlog

from toprompt.core.discovery.path_resolution import Candidate
from toprompt.exceptions import ReadFailure, describe_os_error
from toprompt.util import tag_for_path

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FileRecord:
    absolute_path: Path
    display_path: str
    content: str
    language_tag: str


@dataclass
class FileCollection:
    """Ordered, de-duplicated records plus the files that could not be read."""
    records: Tuple[FileRecord, ...] = ()
    failures: List[ReadFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def read_text_file(path: Path, display_path: str) -> str:
    # exact bytes from disk decoded as utf-8; anything else is a ReadFailure.
    try:
        content_bytes = path.read_bytes()
    except OSError as e:
        raise ReadFailure(path, display_path, describe_os_error(e)) from e
    try:
        return content_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReadFailure(path, display_path, "not valid utf-8 text (binary file?)") from e


def _identity(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except OSError:
        return path.absolute()


def collect(
    candidates: Iterable[Candidate],
    on_progress: Optional[Callable[[Candidate], None]] = None,
) -> FileCollection:
    """
    Builds the FileCollection from candidates in order.

    The first occurrence of an absolute path wins, keeping its display path.
    """
    records: List[FileRecord] = []
    failures: List[ReadFailure] = []
    seen: Set[Path] = set()

    for candidate in candidates:
        identity = _identity(candidate.absolute_path)
        if identity in seen:
            log.debug("duplicate_candidate_skipped", path=candidate.display_path, argument=candidate.argument)
            continue
        seen.add(identity)

        try:
            content = read_text_file(candidate.absolute_path, candidate.display_path)
        except ReadFailure as failure:
            log.info("file_read_failed", path=candidate.display_path, reason=failure.reason)
            failures.append(failure)
        else:
            records.append(
                FileRecord(
                    absolute_path=identity,
                    display_path=candidate.display_path,
                    content=content,
                    language_tag=tag_for_path(candidate.absolute_path),
                )
            )
        if on_progress is not None:
            on_progress(candidate)

    log.info("file_collection_complete", included=len(records), failed=len(failures))
    return FileCollection(records=tuple(records), failures=failures)
