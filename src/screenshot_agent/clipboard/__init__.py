"""Clipboard image capture."""

from screenshot_agent.clipboard.base import (
    CaptureContext,
    CaptureResult,
    CaptureStatus,
    ClipboardBackend,
    FileCaptureBackend,
    StdoutCaptureBackend,
)
from screenshot_agent.clipboard.reader import ClipboardReader, backends_for_platform

__all__ = [
    "CaptureContext",
    "CaptureResult",
    "CaptureStatus",
    "ClipboardBackend",
    "ClipboardReader",
    "FileCaptureBackend",
    "StdoutCaptureBackend",
    "backends_for_platform",
]
