import os
import re
import pytest
from pathlib import Path

from toprompt.config.settings import MatchConfig
from toprompt.core.discovery import (
    ArgumentKind,
    IgnoreRuleSet,
    classify_argument,
    resolve,
    walk_directory,
)
from toprompt.exceptions import ResolutionWarning


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Creates a small tree with nested directories, logs and a build folder."""
    proj_dir = tmp_path / "proj"
    proj_dir.mkdir()
    (proj_dir / "b.py").write_text("print('b')\n")
    (proj_dir / "a.log").write_text("log\n")
    (proj_dir / "keep.log").write_text("keep\n")
    (proj_dir / "sub").mkdir()
    (proj_dir / "sub" / "nested.py").write_text("print('nested')\n")
    (proj_dir / "sub" / "deeper").mkdir()
    (proj_dir / "sub" / "deeper" / "z.txt").write_text("z\n")
    (proj_dir / "build").mkdir()
    (proj_dir / "build" / "gen.py").write_text("generated\n")
    return proj_dir


def _displays(candidates):
    return [c.display_path for c in candidates]


def test_classify_argument_kinds(project: Path):
    assert classify_argument("b.py", project).kind == ArgumentKind.LITERAL
    assert classify_argument("sub", project).kind == ArgumentKind.DIRECTORY
    assert classify_argument("*.py", project).kind == ArgumentKind.PATTERN
    assert classify_argument("missing.py", project).kind == ArgumentKind.MISSING


def test_classify_pattern_splits_base_directory(project: Path):
    argument = classify_argument("sub/*.py", project)
    assert argument.kind == ArgumentKind.PATTERN
    assert argument.path == project / "sub"
    assert argument.pattern == "*.py"
    assert argument.base_display == "sub"


def test_existing_file_with_glob_characters_is_literal(project: Path):
    (project / "data[1].txt").write_text("x")
    assert classify_argument("data[1].txt", project).kind == ArgumentKind.LITERAL


def test_directory_non_recursive_lists_direct_files_only(project: Path):
    argument = classify_argument(".", project)
    candidates = resolve(argument, MatchConfig(), IgnoreRuleSet.empty())
    assert _displays(candidates) == ["a.log", "b.py", "keep.log"]


def test_directory_recursive_is_depth_first_and_lexicographic(project: Path):
    argument = classify_argument(".", project)
    candidates = resolve(argument, MatchConfig(recursive=True), IgnoreRuleSet.empty())
    assert _displays(candidates) == [
        "a.log",
        "b.py",
        "build/gen.py",
        "keep.log",
        "sub/deeper/z.txt",
        "sub/nested.py",
    ]


def test_ignore_rules_prune_files_and_directories(project: Path):
    ignore = IgnoreRuleSet.from_lines(["*.log", "!keep.log", "build/"])
    config = MatchConfig(recursive=True, use_ignore_file=True)
    candidates = resolve(classify_argument(".", project), config, ignore, project.resolve())
    assert _displays(candidates) == ["b.py", "keep.log", "sub/deeper/z.txt", "sub/nested.py"]


def test_ignore_rules_unused_when_flag_is_off(project: Path):
    ignore = IgnoreRuleSet.from_lines(["*.log"])
    candidates = resolve(classify_argument(".", project), MatchConfig(), ignore)
    assert "a.log" in _displays(candidates)


def test_include_pattern_filters_directory_expansion(project: Path):
    config = MatchConfig(recursive=True, include_pattern=re.compile(r"\.py$"))
    candidates = resolve(classify_argument(".", project), config, IgnoreRuleSet.empty())
    assert _displays(candidates) == ["b.py", "build/gen.py", "sub/nested.py"]


def test_literal_file_bypasses_ignore_and_include_pattern(project: Path):
    ignore = IgnoreRuleSet.from_lines(["*.log"])
    config = MatchConfig(use_ignore_file=True, include_pattern=re.compile(r"\.py$"))
    candidates = resolve(classify_argument("a.log", project), config, ignore, project)
    assert _displays(candidates) == ["a.log"]
    assert candidates[0].kind == ArgumentKind.LITERAL


def test_glob_non_recursive_and_recursive(project: Path):
    argument = classify_argument("*.py", project)
    assert _displays(resolve(argument, MatchConfig(), IgnoreRuleSet.empty())) == ["b.py"]

    recursive = resolve(argument, MatchConfig(recursive=True), IgnoreRuleSet.empty())
    assert _displays(recursive) == ["b.py", "build/gen.py", "sub/nested.py"]


def test_glob_with_base_directory_keeps_path_as_matched(project: Path):
    argument = classify_argument("sub/*.py", project)
    candidates = resolve(argument, MatchConfig(), IgnoreRuleSet.empty())
    assert _displays(candidates) == ["sub/nested.py"]


def test_glob_matches_respect_ignore_rules(project: Path):
    ignore = IgnoreRuleSet.from_lines(["build/"])
    config = MatchConfig(recursive=True, use_ignore_file=True)
    candidates = resolve(classify_argument("*.py", project), config, ignore, project.resolve())
    assert _displays(candidates) == ["b.py", "sub/nested.py"]


def test_pattern_with_no_matches_raises_resolution_warning(project: Path):
    with pytest.raises(ResolutionWarning) as excinfo:
        resolve(classify_argument("*.java", project), MatchConfig(), IgnoreRuleSet.empty())
    assert excinfo.value.argument == "*.java"


def test_missing_path_raises_resolution_warning(project: Path):
    with pytest.raises(ResolutionWarning):
        resolve(classify_argument("nope.txt", project), MatchConfig(), IgnoreRuleSet.empty())


def test_walk_directory_survives_symlink_cycle(project: Path):
    loop = project / "sub" / "loop"
    try:
        loop.symlink_to(project, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")

    found = [rel.as_posix() for _, rel in walk_directory(project, MatchConfig(recursive=True), IgnoreRuleSet.empty())]
    assert found.count("b.py") == 1
    assert "sub/nested.py" in found


def test_walk_directory_skips_dangling_symlinks_and_fifos(project: Path):
    if not hasattr(os, "mkfifo"):
        pytest.skip("fifos not supported here")
    try:
        (project / "dangling.py").symlink_to(project / "gone.py")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")
    os.mkfifo(project / "pipe.py")

    candidates = resolve(classify_argument(".", project), MatchConfig(), IgnoreRuleSet.empty())
    assert _displays(candidates) == ["a.log", "b.py", "keep.log"]

    globbed = resolve(classify_argument("*.py", project), MatchConfig(), IgnoreRuleSet.empty())
    assert _displays(globbed) == ["b.py"]


def test_walk_directory_continues_past_unreadable_directory(project: Path, monkeypatch):
    real_scandir = os.scandir

    def scandir_denying_sub(path):
        if Path(path).name == "sub":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir_denying_sub)
    found = [rel.as_posix() for _, rel in walk_directory(project, MatchConfig(recursive=True), IgnoreRuleSet.empty())]
    assert found == ["a.log", "b.py", "build/gen.py", "keep.log"]


def test_glob_symlink_is_matched_by_its_own_path_not_its_target(project: Path):
    try:
        (project / "alias.py").symlink_to(project / "build" / "gen.py")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported here")
    ignore = IgnoreRuleSet.from_lines(["build/"])
    config = MatchConfig(use_ignore_file=True)
    candidates = resolve(classify_argument("*.py", project), config, ignore, project.resolve())
    assert _displays(candidates) == ["alias.py", "b.py"]
