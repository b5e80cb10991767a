"""Candidates and results passed between pipeline stages."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Location(str, Enum):
    """Well-known folders searched for image files."""

    DESKTOP = "desktop"
    DOWNLOADS = "downloads"


@dataclass(frozen=True)
class ClipboardCandidate:
    """Image bytes read from the clipboard. Clipboards carry no copy time."""

    data: bytes
    backend: str = ""

    def __repr__(self) -> str:
        return f"<ClipboardCandidate backend={self.backend} bytes={len(self.data)}>"


@dataclass(frozen=True)
class FileCandidate:
    """An image file on disk and its modification time (epoch seconds)."""

    path: Path
    mtime: float
    location: Location = Location.DESKTOP


@dataclass(frozen=True)
class Result:
    """What gets printed: where the image came from and where it is now."""

    source: str
    temp_path: Path

    def lines(self) -> str:
        return f"{self.source}\n{self.temp_path}\n"
