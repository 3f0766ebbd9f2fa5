# toprompt/core/discovery/walker.py
import os
from pathlib import Path, PurePath
from typing import Iterator, List, Optional, Set, Tuple
import structlog

from toprompt.config.settings import MatchConfig
from toprompt.core.discovery.pattern_matching import IgnoreRuleSet

log = structlog.get_logger(__name__)


def _ignore_relative_path(path: Path, ignore_root: Optional[Path], walk_root: Path) -> PurePath:
    # ignore rules are rooted at ignore_root; paths outside it fall back to the walk root.
    if ignore_root is not None:
        try:
            return path.relative_to(ignore_root)
        except ValueError:
            pass
    return path.relative_to(walk_root)


def _sorted_entries(directory: Path) -> List[Path]:
    try:
        with os.scandir(directory) as it:
            names = [entry.name for entry in it]
    except OSError as e:
        log.warning("directory_unreadable_skipped", path=str(directory), error=str(e))
        return []
    return [directory / name for name in sorted(names)]


def walk_directory(
    walk_root: Path,
    config: MatchConfig,
    ignore: IgnoreRuleSet,
    ignore_root: Optional[Path] = None,
) -> Iterator[Tuple[Path, PurePath]]:
    """
    Yields (absolute_path, path_relative_to_walk_root) for every selectable
    file under walk_root, depth-first and lexicographic within each directory.

    Uses an explicit stack instead of call recursion. Ignored subtrees are
    pruned before they are listed; subdirectories are only entered when
    config.recursive is set.
    """
    walk_root = walk_root.resolve()
    visited_dirs: Set[Path] = {walk_root}
    stack: List[Path] = list(reversed(_sorted_entries(walk_root)))
    apply_ignore = config.use_ignore_file and bool(ignore)

    while stack:
        path = stack.pop()
        rel_path = path.relative_to(walk_root)

        if path.is_dir():
            if not config.recursive:
                log.info("subdirectory_skipped_non_recursive", path=rel_path.as_posix())
                continue
            if apply_ignore and ignore.is_excluded(_ignore_relative_path(path, ignore_root, walk_root), is_dir=True):
                log.info("directory_ignored", path=rel_path.as_posix())
                continue
            real_dir = path.resolve()
            if real_dir in visited_dirs:
                log.info("directory_already_visited_skipped", path=rel_path.as_posix(), target=str(real_dir))
                continue
            visited_dirs.add(real_dir)
            log.debug("descending_into_directory", path=rel_path.as_posix())
            stack.extend(reversed(_sorted_entries(path)))
            continue

        if not path.is_file():
            # sockets, fifos, dangling symlinks.
            log.debug("non_regular_entry_skipped", path=rel_path.as_posix())
            continue
        if apply_ignore and ignore.is_excluded(_ignore_relative_path(path, ignore_root, walk_root)):
            log.info("file_ignored", path=rel_path.as_posix())
            continue
        if not config.matches_include_pattern(rel_path.as_posix()):
            log.debug("file_not_matching_include_pattern", path=rel_path.as_posix())
            continue
        yield path, rel_path
