"""Capture, arbitrate, relocate."""

import asyncio
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from loguru import logger

from screenshot_agent.arbitration import DEFAULT_WINDOW_SECONDS, arbitrate
from screenshot_agent.clipboard import ClipboardReader, backends_for_platform
from screenshot_agent.config import Settings
from screenshot_agent.executables import current_search_path
from screenshot_agent.locations import DirectoryResolver
from screenshot_agent.locator import FileLocator
from screenshot_agent.models import ClipboardCandidate, Location, Result
from screenshot_agent.relocate import Relocator
from screenshot_agent.tempfiles import TempPathAllocator
from screenshot_agent.trash import trash_for_platform


@dataclass
class Options:
    """Per-invocation mode flags."""

    clipboard_only: bool = False
    use_downloads: bool = False

    @property
    def location(self) -> Location:
        return Location.DOWNLOADS if self.use_downloads else Location.DESKTOP


class ScreenshotAgent:
    """
    One run of the pipeline.

    Platform-specific pieces (clipboard backends, folder resolution, trash
    layout) are chosen once here from `platform`.
    """

    def __init__(
        self,
        reader: ClipboardReader,
        locator: FileLocator,
        relocator: Relocator,
        *,
        window: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.reader = reader
        self.locator = locator
        self.relocator = relocator
        self.window = window
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        platform: str = sys.platform,
        search_path: str | None = None,
        home: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "ScreenshotAgent":
        home = home or settings.home_path
        if search_path is None:
            search_path = current_search_path()

        allocator = TempPathAllocator(settings.temp_dir, attempts=settings.temp_path_attempts)
        reader = ClipboardReader(
            backends_for_platform(platform),
            allocator,
            search_path,
            settings.clipboard_max_bytes,
        )
        locator = FileLocator(DirectoryResolver.for_platform(platform, home))
        trash = trash_for_platform(platform, home, settings.trash_name_attempts)
        logger.debug(f"Platform {platform}: trash={trash.name}, temp={allocator.temp_dir}")

        return cls(
            reader,
            locator,
            Relocator(allocator, trash),
            window=settings.arbitration_window_seconds,
            clock=clock,
        )

    async def _find_file(self, location: Location):
        return await asyncio.to_thread(self.locator.find, location)

    async def run(self, options: Options) -> Result | None:
        """
        Find, choose and relocate an image.

        Returns:
            Result, or None when nothing was found

        Raises:
            OperationError: (or OSError) if a lookup or relocation failed
        """
        if options.clipboard_only:
            clipboard = await _settle(self.reader.read())
            file = None
        else:
            clipboard, file = await asyncio.gather(
                _settle(self.reader.read()),
                _settle(self._find_file(options.location)),
            )

        winner = arbitrate(
            clipboard,
            file,
            self.clock(),
            clipboard_only=options.clipboard_only,
            window=self.window,
        )
        if winner is None:
            return None

        if isinstance(winner, ClipboardCandidate):
            temp_path = await asyncio.to_thread(self.relocator.write_clipboard, winner)
            return Result(source="clipboard", temp_path=temp_path)

        temp_path = await asyncio.to_thread(self.relocator.relocate, winner)
        return Result(source=str(winner.path), temp_path=temp_path)


async def _settle(awaitable):
    """Await and return the value, or the exception it raised."""
    try:
        return await awaitable
    except Exception as e:
        return e
