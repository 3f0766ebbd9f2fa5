"""Tests for ignore-file parsing and last-match-wins evaluation."""
from pathlib import Path

import pytest

from toprompt.core.discovery.pattern_matching import IgnoreRuleSet
from toprompt.exceptions import IgnoreFileError


class TestIgnoreRuleSetMatching:

    def test_negation_overrides_earlier_exclusion(self):
        rules = IgnoreRuleSet.from_lines(["*.log", "!keep.log"])
        assert rules.is_excluded(Path("a.log")) is True
        assert rules.is_excluded(Path("keep.log")) is False
        assert rules.is_excluded(Path("b.py")) is False

    def test_last_matching_rule_wins(self):
        rules = IgnoreRuleSet.from_lines(["!keep.log", "*.log"])
        # the later "*.log" wins over the earlier negation.
        assert rules.is_excluded(Path("keep.log")) is True

    def test_directory_pattern_matches_directories_and_contents_only(self):
        rules = IgnoreRuleSet.from_lines(["build/"])
        assert rules.is_excluded(Path("build"), is_dir=True) is True
        assert rules.is_excluded(Path("build")) is False
        assert rules.is_excluded(Path("build/out/gen.py")) is True
        assert rules.is_excluded(Path("src/build"), is_dir=True) is True

    def test_comments_and_blank_lines_are_skipped(self):
        rules = IgnoreRuleSet.from_lines(["# a comment", "", "   ", "*.tmp"])
        assert len(rules) == 1
        assert rules.is_excluded(Path("x.tmp")) is True

    def test_empty_rule_set_excludes_nothing(self):
        rules = IgnoreRuleSet.empty()
        assert not rules
        assert rules.is_excluded(Path("anything.py")) is False
        assert rules.is_excluded(Path("dir"), is_dir=True) is False

    def test_defaults_exclude_git_metadata_and_can_be_negated(self):
        defaults = IgnoreRuleSet.with_defaults()
        assert defaults.is_excluded(Path(".git"), is_dir=True) is True
        assert defaults.is_excluded(Path(".gitignore")) is True

        merged = defaults.merge(IgnoreRuleSet.from_lines(["!.gitignore"]))
        assert merged.is_excluded(Path(".gitignore")) is False
        assert merged.is_excluded(Path(".git"), is_dir=True) is True


class TestIgnoreRuleSetLoading:

    def test_missing_ignore_file_gives_empty_rule_set(self, tmp_path):
        rules = IgnoreRuleSet.load(tmp_path)
        assert len(rules) == 0

    def test_load_reads_gitignore_at_root(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# logs\n*.log\n!keep.log\n", encoding="utf-8")
        rules = IgnoreRuleSet.load(tmp_path)
        assert len(rules) == 2
        assert rules.source == tmp_path / ".gitignore"
        assert rules.is_excluded(Path("debug.log")) is True
        assert rules.is_excluded(Path("keep.log")) is False

    def test_load_with_custom_filename(self, tmp_path):
        (tmp_path / ".promptignore").write_text("secrets/\n", encoding="utf-8")
        rules = IgnoreRuleSet.load(tmp_path, filename=".promptignore")
        assert rules.is_excluded(Path("secrets"), is_dir=True) is True

    def test_undecodable_ignore_file_raises(self, tmp_path):
        ignore_file = tmp_path / ".gitignore"
        ignore_file.write_bytes(b"\xff\xfe*.log\n")
        with pytest.raises(IgnoreFileError) as excinfo:
            IgnoreRuleSet.from_file(ignore_file, explicit=True)
        assert excinfo.value.explicit is True
        assert excinfo.value.path == ignore_file
