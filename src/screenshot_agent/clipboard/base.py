"""
Base Clipboard Backend Interface

Every capture backend exposes the same `capture()` call so the reader can
walk them in priority order without knowing how each one works.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

from screenshot_agent.errors import ClipboardTooLargeError
from screenshot_agent.executables import find_executable

_READ_CHUNK = 64 * 1024


class CaptureStatus(Enum):
    """Outcome of a single backend attempt."""

    CAPTURED = "captured"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass
class CaptureResult:
    """What a backend produced."""

    status: CaptureStatus
    data: bytes = b""
    detail: str = ""

    @classmethod
    def captured(cls, data: bytes) -> "CaptureResult":
        return cls(CaptureStatus.CAPTURED, data=data)

    @classmethod
    def unavailable(cls, detail: str = "") -> "CaptureResult":
        return cls(CaptureStatus.UNAVAILABLE, detail=detail)

    @classmethod
    def failed(cls, detail: str = "") -> "CaptureResult":
        return cls(CaptureStatus.FAILED, detail=detail)


@dataclass
class CaptureContext:
    """Per-run inputs shared by all backends."""

    search_path: str | None
    scratch_path: Path
    max_bytes: int


class ClipboardBackend(ABC):
    """
    Abstract base class for clipboard image capture backends.

    Implementations must:
    - report availability without running anything (`locate()`)
    - return FAILED rather than raise for ordinary tool failures
    - never return CAPTURED with an empty payload
    """

    name: str = "base"
    program: str = ""

    def locate(self, context: CaptureContext) -> str | None:
        """Path of the external program, or None if it is not installed."""
        return find_executable(self.program, context.search_path)

    async def capture(self, context: CaptureContext) -> CaptureResult:
        """Run the backend if its program is installed."""
        executable = self.locate(context)
        if executable is None:
            return CaptureResult.unavailable(f"{self.program} not on PATH")
        return await self.run(executable, context)

    @abstractmethod
    async def run(self, executable: str, context: CaptureContext) -> CaptureResult:
        """Invoke the located program and collect the image bytes."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name}>"


class FileCaptureBackend(ClipboardBackend):
    """Backend whose program writes the image into a file we name."""

    @abstractmethod
    def arguments(self, scratch_path: Path) -> list[str]:
        """Command-line arguments (without the program itself)."""
        ...

    async def run(self, executable: str, context: CaptureContext) -> CaptureResult:
        scratch = context.scratch_path
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *self.arguments(scratch),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            return CaptureResult.failed(f"cannot start {self.program}: {e}")

        returncode = await proc.wait()
        if returncode != 0:
            return CaptureResult.failed(f"{self.program} exited with {returncode}")

        try:
            info = scratch.stat()
            if info.st_size == 0:
                return CaptureResult.failed(f"{self.program} wrote an empty file")
            if info.st_size > context.max_bytes:
                raise ClipboardTooLargeError(self.program, context.max_bytes)
            data = scratch.read_bytes()
        except FileNotFoundError:
            return CaptureResult.failed(f"{self.program} wrote no file")
        except OSError as e:
            return CaptureResult.failed(f"cannot read {scratch}: {e}")

        if not data:
            return CaptureResult.failed(f"{self.program} wrote an empty file")
        return CaptureResult.captured(data)


class StdoutCaptureBackend(ClipboardBackend):
    """Backend whose program prints the image bytes on stdout."""

    @abstractmethod
    def arguments(self) -> list[str]:
        """Command-line arguments (without the program itself)."""
        ...

    async def run(self, executable: str, context: CaptureContext) -> CaptureResult:
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *self.arguments(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            return CaptureResult.failed(f"cannot start {self.program}: {e}")

        chunks: list[bytes] = []
        total = 0
        while True:
            chunk = await proc.stdout.read(_READ_CHUNK)
            if not chunk:
                break
            total += len(chunk)
            if total > context.max_bytes:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()
                logger.debug(f"{self.program} output passed {context.max_bytes} bytes, killed")
                raise ClipboardTooLargeError(self.program, context.max_bytes)
            chunks.append(chunk)

        returncode = await proc.wait()
        if returncode != 0:
            return CaptureResult.failed(f"{self.program} exited with {returncode}")
        if total == 0:
            return CaptureResult.failed(f"{self.program} printed nothing")
        return CaptureResult.captured(b"".join(chunks))
