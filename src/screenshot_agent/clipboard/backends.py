"""Concrete clipboard capture backends."""

import asyncio
import io
from pathlib import Path

from loguru import logger

from screenshot_agent.clipboard.base import (
    CaptureContext,
    CaptureResult,
    ClipboardBackend,
    FileCaptureBackend,
    StdoutCaptureBackend,
)
from screenshot_agent.errors import ClipboardTooLargeError

PNG_MIME = "image/png"


class PngpasteBackend(FileCaptureBackend):
    """`pngpaste <file>` - native clipboard-to-file tool."""

    name = "pngpaste"
    program = "pngpaste"

    def arguments(self, scratch_path: Path) -> list[str]:
        return [str(scratch_path)]


class OsascriptBackend(FileCaptureBackend):
    """
    AppleScript capture through `osascript`.

    Reads the clipboard as PNG data («class PNGf») and writes it through an
    `open for access` file handle that is always closed again.
    """

    name = "osascript"
    program = "osascript"

    @staticmethod
    def script(scratch_path: Path) -> list[str]:
        target = str(scratch_path).replace("\\", "\\\\").replace('"', '\\"')
        return [
            "set theData to (the clipboard as «class PNGf»)",
            f'set theFile to POSIX file "{target}"',
            "set theFileRef to open for access theFile with write permission",
            "try",
            "set eof of theFileRef to 0",
            "write theData to theFileRef",
            "on error errMsg number errNum",
            "close access theFileRef",
            "error errMsg number errNum",
            "end try",
            "close access theFileRef",
        ]

    def arguments(self, scratch_path: Path) -> list[str]:
        args: list[str] = []
        for line in self.script(scratch_path):
            args.extend(["-e", line])
        return args


class WlPasteBackend(StdoutCaptureBackend):
    """`wl-paste` - Wayland clipboard reader."""

    name = "wl-paste"
    program = "wl-paste"

    def arguments(self) -> list[str]:
        return ["--type", PNG_MIME]


class XclipBackend(StdoutCaptureBackend):
    """`xclip` - X11 clipboard reader, asking for PNG explicitly."""

    name = "xclip"
    program = "xclip"

    def arguments(self) -> list[str]:
        return ["-selection", "clipboard", "-t", PNG_MIME, "-o"]


class PillowBackend(ClipboardBackend):
    """Pillow's ImageGrab, for Windows where none of the tools exist."""

    name = "pillow"
    program = "PIL.ImageGrab"

    def locate(self, context: CaptureContext) -> str | None:
        try:
            from PIL import ImageGrab  # noqa: F401
        except ImportError:
            return None
        return self.program

    async def run(self, executable: str, context: CaptureContext) -> CaptureResult:
        return await asyncio.to_thread(self._grab, context.max_bytes)

    def _grab(self, max_bytes: int) -> CaptureResult:
        from PIL import Image, ImageGrab

        try:
            img = ImageGrab.grabclipboard()
        except Exception as e:
            return CaptureResult.failed(f"ImageGrab failed: {e}")

        if img is None or not isinstance(img, Image.Image):
            return CaptureResult.failed("no image on clipboard")

        buf = io.BytesIO()
        try:
            img.save(buf, "PNG")
        except (OSError, ValueError) as e:
            return CaptureResult.failed(f"cannot encode clipboard image: {e}")

        data = buf.getvalue()
        if len(data) > max_bytes:
            raise ClipboardTooLargeError(self.name, max_bytes)
        if not data:
            return CaptureResult.failed("empty clipboard image")
        logger.debug(f"Pillow grabbed {img.size[0]}x{img.size[1]} image")
        return CaptureResult.captured(data)
