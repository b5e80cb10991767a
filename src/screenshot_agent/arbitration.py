"""Choose between a clipboard image and a file image."""

from typing import Union

from loguru import logger

from screenshot_agent.errors import NotFoundError
from screenshot_agent.models import ClipboardCandidate, FileCandidate

# A finished lookup: the candidate, or the exception it ended with
ClipboardOutcome = Union[ClipboardCandidate, BaseException]
FileOutcome = Union[FileCandidate, BaseException]
Winner = Union[ClipboardCandidate, FileCandidate]

DEFAULT_WINDOW_SECONDS = 30.0


def prefer_file(candidate: FileCandidate, now: float, window: float = DEFAULT_WINDOW_SECONDS) -> bool:
    """
    True if the file is recent enough to beat a clipboard image.

    Timestamps in the future always count as recent (clock skew). The window
    boundary is inclusive: a file exactly `window` seconds old still wins.
    """
    if not candidate.mtime:
        return False
    if candidate.mtime > now:
        return True
    return now - candidate.mtime <= window


def _is_hard_error(outcome) -> bool:
    return isinstance(outcome, BaseException) and not isinstance(outcome, NotFoundError)


def arbitrate(
    clipboard: ClipboardOutcome,
    file: FileOutcome | None,
    now: float,
    *,
    clipboard_only: bool = False,
    window: float = DEFAULT_WINDOW_SECONDS,
) -> Winner | None:
    """
    Pick exactly one candidate.

    Args:
        clipboard: Clipboard capture outcome
        file: File lookup outcome (ignored, and may be None, in clipboard-only mode)
        now: Current time in epoch seconds
        clipboard_only: Never consider the file candidate
        window: Recency window in seconds

    Returns:
        The winning candidate, or None if nothing was found

    Raises:
        The hard error of a failed lookup when there is no winner. A file
        lookup error takes priority over a clipboard error.
    """
    have_clipboard = isinstance(clipboard, ClipboardCandidate)
    have_file = isinstance(file, FileCandidate)

    if clipboard_only:
        if have_clipboard:
            logger.debug("Selected clipboard candidate (clipboard-only)")
            return clipboard
        if _is_hard_error(clipboard):
            raise clipboard
        return None

    if have_clipboard and have_file:
        if prefer_file(file, now, window):
            logger.debug(f"Selected file candidate: {file.path}")
            return file
        logger.debug("Selected clipboard candidate (file older than window)")
        return clipboard

    if have_clipboard:
        logger.debug("Selected clipboard candidate (no file)")
        return clipboard

    if have_file:
        logger.debug(f"Selected file candidate (no clipboard): {file.path}")
        return file

    if _is_hard_error(file):
        raise file
    if _is_hard_error(clipboard):
        raise clipboard
    return None
