# toprompt/core/discovery/__init__.py
"""
Path discovery: argument classification, ignore rules and directory traversal.
"""
from .path_resolution import ArgumentKind, Candidate, ClassifiedArgument, classify_argument, resolve
from .pattern_matching import IgnoreRuleSet
from .walker import walk_directory

__all__ = [
    "ArgumentKind",
    "Candidate",
    "ClassifiedArgument",
    "IgnoreRuleSet",
    "classify_argument",
    "resolve",
    "walk_directory",
]
