from pathlib import Path
from typing import Optional


class ToPromptError(Exception):
    # base exception for all application-specific errors.
    pass

class FatalArgumentError(ToPromptError):
    # no arguments given, or nothing usable came out of them.
    pass

class OutputError(ToPromptError):
    # errors while handing the bundle to stdout or the clipboard.
    pass

class NonFatalError(ToPromptError):
    # conditions that are collected and reported, never aborting the run.
    pass

class ResolutionWarning(NonFatalError):
    # an argument matched zero files.
    def __init__(self, argument: str, reason: str = "matched no files"):
        self.argument = argument
        self.reason = reason
        super().__init__(f"'{argument}' {reason}")

class ReadFailure(NonFatalError):
    # a selected file could not be read or decoded as utf-8 text.
    def __init__(self, path: Path, display_path: str, reason: str):
        self.path = path
        self.display_path = display_path
        self.reason = reason
        super().__init__(f"could not read '{display_path}': {reason}")

class IgnoreFileError(NonFatalError):
    # the ignore file exists but could not be read or decoded.
    def __init__(self, path: Path, reason: str, explicit: bool = False):
        self.path = path
        self.reason = reason
        self.explicit = explicit
        super().__init__(f"could not read ignore file '{path}': {reason}")


def describe_os_error(error: OSError, fallback: Optional[str] = None) -> str:
    # strerror is friendlier than str(error), which repeats the filename.
    return error.strerror or fallback or str(error)
