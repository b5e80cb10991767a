"""Put the winning image at a fresh temp path."""

from pathlib import Path

from loguru import logger

from screenshot_agent.errors import OperationError
from screenshot_agent.fileops import copy_file, discard, move_file
from screenshot_agent.models import ClipboardCandidate, FileCandidate, Location
from screenshot_agent.tempfiles import TempPathAllocator
from screenshot_agent.trash import Trash


class Relocator:
    """
    Materialize a candidate in the temp directory.

    Downloads are moved. Desktop files are copied and the original is sent
    to the trash; if trashing fails the copy is deleted and the error is
    raised, so the desktop never loses a file without a copy existing.
    """

    def __init__(self, allocator: TempPathAllocator, trash: Trash):
        self.allocator = allocator
        self.trash = trash

    def write_clipboard(self, candidate: ClipboardCandidate) -> Path:
        """Write clipboard bytes to `clipboard-<token>.png`."""
        dest = self.allocator.clipboard_path()
        try:
            with open(dest, "xb") as f:
                f.write(candidate.data)
        except OSError as e:
            discard(dest)
            raise OperationError(f"cannot write {dest}: {e}") from e
        logger.debug(f"Wrote clipboard image to {dest}")
        return dest

    def move_to_temp(self, src: Path) -> Path:
        dest = self.allocator.image_path(src)
        try:
            move_file(src, dest)
        except OSError as e:
            raise OperationError(f"cannot move {src} to {dest}: {e}") from e
        return dest

    def copy_to_temp(self, src: Path) -> Path:
        dest = self.allocator.image_path(src)
        try:
            copy_file(src, dest)
        except OSError as e:
            raise OperationError(f"cannot copy {src} to {dest}: {e}") from e
        return dest

    def relocate(self, candidate: FileCandidate) -> Path:
        """Move or copy-and-trash `candidate` depending on where it was found."""
        src = candidate.path
        if candidate.location is Location.DOWNLOADS:
            logger.debug(f"Moving Downloads file to temp: {src}")
            return self.move_to_temp(src)

        logger.debug(f"Copying Desktop file to temp and trashing: {src}")
        dest = self.copy_to_temp(src)
        try:
            self.trash.trash(src)
        except Exception:
            discard(dest)
            raise
        return dest
