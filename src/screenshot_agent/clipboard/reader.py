"""Ordered clipboard capture across several backends."""

from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from screenshot_agent.clipboard.backends import (
    OsascriptBackend,
    PillowBackend,
    PngpasteBackend,
    WlPasteBackend,
    XclipBackend,
)
from screenshot_agent.clipboard.base import CaptureContext, CaptureStatus, ClipboardBackend
from screenshot_agent.errors import NotFoundError
from screenshot_agent.models import ClipboardCandidate
from screenshot_agent.tempfiles import TempPathAllocator


def backends_for_platform(platform: str) -> list[ClipboardBackend]:
    """Backends in the order they are tried on `platform`."""
    backends: list[ClipboardBackend] = [PngpasteBackend()]
    if platform == "darwin":
        backends.append(OsascriptBackend())
    backends.extend([WlPasteBackend(), XclipBackend()])
    if platform == "win32":
        backends.append(PillowBackend())
    return backends


class ClipboardReader:
    """
    Try each backend in turn and keep the first non-empty image.

    Missing programs and ordinary failures move on to the next backend.
    Only oversized payloads (ClipboardTooLargeError) escape as hard errors.
    """

    def __init__(
        self,
        backends: Sequence[ClipboardBackend],
        allocator: TempPathAllocator,
        search_path: str | None,
        max_bytes: int,
    ):
        self.backends = list(backends)
        self.allocator = allocator
        self.search_path = search_path
        self.max_bytes = max_bytes

    async def read(self) -> ClipboardCandidate:
        """
        Capture the clipboard image.

        Raises:
            NotFoundError: No backend produced an image
            ClipboardTooLargeError: A backend produced more than max_bytes
        """
        scratch = self.allocator.clipboard_path()
        context = CaptureContext(
            search_path=self.search_path,
            scratch_path=scratch,
            max_bytes=self.max_bytes,
        )
        try:
            for backend in self.backends:
                result = await backend.capture(context)
                if result.status is CaptureStatus.CAPTURED and result.data:
                    logger.debug(f"Clipboard image from {backend.name} ({len(result.data)} bytes)")
                    return ClipboardCandidate(data=result.data, backend=backend.name)
                if result.status is CaptureStatus.UNAVAILABLE:
                    logger.debug(f"Skipping {backend.name}: {result.detail}")
                else:
                    logger.debug(f"{backend.name} failed: {result.detail or 'empty payload'}")
                _discard(scratch)
        finally:
            _discard(scratch)

        raise NotFoundError("no clipboard image")


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove scratch file {path}: {e}")
