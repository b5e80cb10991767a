"""
Recoverable deletion through the desktop's trash.

Two layouts are supported:
- flat: a single directory (`~/.Trash` on macOS)
- freedesktop: `files/` plus `info/<name>.trashinfo` records
  (`$XDG_DATA_HOME/Trash`, usually `~/.local/share/Trash`)
"""

import os
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping
from urllib.parse import quote_from_bytes

from loguru import logger

from screenshot_agent.errors import TrashError
from screenshot_agent.fileops import discard, move_file

TRASH_DIR_MODE = 0o700
TRASH_INFO_MODE = 0o600
TRASH_INFO_SUFFIX = ".trashinfo"
TRASH_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

FREEDESKTOP_PLATFORMS = ("linux", "freebsd", "openbsd", "netbsd")


def _exists(path: Path) -> bool:
    try:
        os.lstat(path)
    except FileNotFoundError:
        return False
    except OSError:
        # Unknown state, treat as taken
        return True
    return True


def _name_taken(name: str, files_dir: Path, info_dir: Path | None) -> bool:
    if _exists(files_dir / name):
        return True
    if info_dir is None:
        return False
    return _exists(info_dir / f"{name}{TRASH_INFO_SUFFIX}")


def unique_trash_name(
    base: str,
    files_dir: Path,
    info_dir: Path | None = None,
    attempts: int = 10000,
) -> str:
    """
    First free name among `base`, `stem.1.ext`, `stem.2.ext`, ...

    With an `info_dir` a name only counts as free if neither the file nor
    its `.trashinfo` record exists.

    Raises:
        TrashError: Empty name or no free name within `attempts` probes
    """
    if not base:
        raise TrashError("empty trash name")
    if not _name_taken(base, files_dir, info_dir):
        return base

    stem, ext = os.path.splitext(base)
    for i in range(1, attempts):
        name = f"{stem}.{i}{ext}"
        if not _name_taken(name, files_dir, info_dir):
            return name

    raise TrashError(f"unable to find unique trash name for {base}")


def trash_escape_path(path: str) -> str:
    """Percent-encode the path's filesystem bytes, keeping slashes."""
    return quote_from_bytes(os.fsencode(path), safe="/")


def trash_info_content(path: Path, deleted_at: datetime) -> str:
    return (
        "[Trash Info]\n"
        f"Path={trash_escape_path(str(path))}\n"
        f"DeletionDate={deleted_at.strftime(TRASH_DATE_FORMAT)}\n"
    )


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(mode=TRASH_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise TrashError(f"cannot create trash directory {path}: {e}") from e


class Trash(ABC):
    """A trash-can protocol."""

    name: str = "base"

    @abstractmethod
    def trash(self, path: Path) -> Path:
        """
        Move `path` into the trash.

        Returns:
            Where the file now lives inside the trash

        Raises:
            TrashError: The file could not be trashed
        """
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name}>"


class FlatTrash(Trash):
    """Single trash directory, names de-duplicated in place."""

    name = "flat"

    def __init__(self, trash_dir: Path, attempts: int = 10000):
        self.trash_dir = trash_dir
        self.attempts = attempts

    def trash(self, path: Path) -> Path:
        source = Path(os.path.abspath(path))
        _ensure_dir(self.trash_dir)

        name = unique_trash_name(source.name, self.trash_dir, None, self.attempts)
        dest = self.trash_dir / name
        try:
            move_file(source, dest)
        except OSError as e:
            raise TrashError(f"cannot move {source} to trash: {e}") from e

        logger.debug(f"Trashed {source} -> {dest}")
        return dest


class FreedesktopTrash(Trash):
    """Trash with `files/` and `info/` directories and .trashinfo records."""

    name = "freedesktop"

    def __init__(
        self,
        root: Path,
        attempts: int = 10000,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.root = root
        self.files_dir = root / "files"
        self.info_dir = root / "info"
        self.attempts = attempts
        self.clock = clock

    def trash(self, path: Path) -> Path:
        source = Path(os.path.abspath(path))
        _ensure_dir(self.files_dir)
        _ensure_dir(self.info_dir)

        content = trash_info_content(source, self.clock())
        name = unique_trash_name(source.name, self.files_dir, self.info_dir, self.attempts)
        dest = self.files_dir / name
        try:
            move_file(source, dest)
        except OSError as e:
            raise TrashError(f"cannot move {source} to trash: {e}") from e

        info_path = self.info_dir / f"{name}{TRASH_INFO_SUFFIX}"
        try:
            self.write_info(info_path, content)
        except Exception as e:
            self._restore(dest, source)
            raise TrashError(f"cannot write {info_path}: {e}") from e

        logger.debug(f"Trashed {source} -> {dest}")
        return dest

    def write_info(self, info_path: Path, content: str) -> None:
        fd = os.open(info_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, TRASH_INFO_MODE)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
        except BaseException:
            discard(info_path)
            raise

    def _restore(self, dest: Path, source: Path) -> None:
        try:
            move_file(dest, source)
        except OSError as e:
            logger.warning(f"Could not restore {source} from trash: {e}")


class UnsupportedTrash(Trash):
    """Platforms without a supported trash layout."""

    name = "unsupported"

    def __init__(self, platform: str):
        self.platform = platform

    def trash(self, path: Path) -> Path:
        raise TrashError(f"trash unsupported on {self.platform}")


def freedesktop_trash_root(home: Path, environ: Mapping[str, str]) -> Path:
    data_home = environ.get("XDG_DATA_HOME", "")
    if data_home and os.path.isabs(data_home):
        return Path(data_home) / "Trash"
    return home / ".local" / "share" / "Trash"


def trash_for_platform(
    platform: str,
    home: Path,
    attempts: int = 10000,
    environ: Mapping[str, str] | None = None,
) -> Trash:
    """Pick the trash protocol for `platform`."""
    if platform == "darwin":
        return FlatTrash(home / ".Trash", attempts)
    if platform.startswith(FREEDESKTOP_PLATFORMS):
        env = os.environ if environ is None else environ
        return FreedesktopTrash(freedesktop_trash_root(home, env), attempts)
    return UnsupportedTrash(platform)
