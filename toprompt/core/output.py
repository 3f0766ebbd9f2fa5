# toprompt/core/output.py
"""hands the finished bundle to the clipboard or standard output."""
import sys
from enum import Enum
import pyperclip  # type: ignore # for clipboard operations
import structlog
from toprompt.exceptions import OutputError

log = structlog.get_logger(__name__)


class Destination(Enum):
    CLIPBOARD = "clipboard"
    STDOUT = "stdout"


def write_to_stdout(text_content: str):
    """writes text to standard output and flushes to ensure visibility."""
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        try:  # fallback for terminals that cannot encode the content.
            sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
            sys.stdout.buffer.flush()
        except (AttributeError, OSError) as inner_e:
            raise OutputError(f"failed to write to stdout: {inner_e}") from inner_e
    except OSError as e:
        raise OutputError(f"failed to write to stdout: {e}") from e


def copy_to_clipboard(text_content: str) -> bool:
    """copies text to the system clipboard. returns false if no clipboard is usable."""
    log.info("attempting_to_copy_output_to_clipboard", chars=len(text_content))
    try:
        pyperclip.copy(text_content)
    except pyperclip.PyperclipException as e:  # e.g. no xclip/xsel/wl-copy/pbcopy found.
        log.info(
            "clipboard_copy_failed_pyperclip_exception",
            error=str(e),
            note="ensure clipboard utility (xclip/xsel/wl-copy/pbcopy) is installed and accessible.",
        )
        return False
    log.info("successfully_copied_to_clipboard_via_pyperclip")
    return True


def emit(bundle: str, to_stdout: bool = False) -> Destination:
    """
    Delivers the bundle exactly once: to the clipboard, or to stdout when
    requested or when the clipboard is unavailable.
    """
    if not to_stdout and copy_to_clipboard(bundle):
        return Destination.CLIPBOARD
    log.info("writing_bundle_to_stdout")
    write_to_stdout(bundle)
    return Destination.STDOUT
