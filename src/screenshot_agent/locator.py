"""Pick the newest image file in a folder, screenshots first."""

import os
from pathlib import Path

from loguru import logger

from screenshot_agent.errors import NotFoundError, OperationError
from screenshot_agent.locations import DirectoryResolver
from screenshot_agent.models import FileCandidate, Location
from screenshot_agent.tempfiles import IMAGE_EXTENSIONS

SCREENSHOT_MARKERS = ("screenshot", "screen shot")


def has_image_ext(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS


def is_screenshot_name(name: str) -> bool:
    lower = name.lower()
    return any(marker in lower for marker in SCREENSHOT_MARKERS)


def latest_image(directory: Path, location: Location = Location.DESKTOP) -> FileCandidate:
    """
    Newest PNG/JPEG in `directory` (non-recursive).

    Any file whose name marks it as a screenshot beats every other file,
    however recent the others are. Entries that vanish or cannot be stat'ed
    while we scan are skipped.

    Raises:
        NotFoundError: Directory missing or no image files in it
        OperationError: Directory exists but cannot be listed
    """
    try:
        entries = list(os.scandir(directory))
    except FileNotFoundError:
        raise NotFoundError(f"{directory} does not exist")
    except OSError as e:
        raise OperationError(f"cannot list {directory}: {e}") from e

    latest_tagged: FileCandidate | None = None
    latest_any: FileCandidate | None = None

    for entry in entries:
        if not has_image_ext(entry.name):
            continue
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
            info = entry.stat()
        except OSError as e:
            logger.debug(f"Skipping {entry.name}: {e}")
            continue

        candidate = FileCandidate(
            path=Path(entry.path).absolute(),
            mtime=info.st_mtime,
            location=location,
        )
        if is_screenshot_name(entry.name):
            if latest_tagged is None or candidate.mtime > latest_tagged.mtime:
                latest_tagged = candidate
            continue
        if latest_any is None or candidate.mtime > latest_any.mtime:
            latest_any = candidate

    if latest_tagged is not None:
        return latest_tagged
    if latest_any is not None:
        return latest_any
    raise NotFoundError(f"no images in {directory}")


class FileLocator:
    """Resolve a Location and find its best image."""

    def __init__(self, resolver: DirectoryResolver):
        self.resolver = resolver

    def find(self, location: Location) -> FileCandidate:
        directory = self.resolver.resolve(location)
        candidate = latest_image(directory, location)
        logger.debug(f"File candidate: {candidate.path} (mtime {candidate.mtime:.0f})")
        return candidate
