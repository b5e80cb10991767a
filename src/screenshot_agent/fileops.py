"""Move, copy and delete helpers that never leave half-written targets."""

import errno
import os
import shutil
from pathlib import Path

from loguru import logger


def discard(path: Path) -> None:
    """Best-effort unlink; a missing file is fine."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")


def copy_file(src: Path, dst: Path) -> None:
    """Copy file contents; on failure no partial `dst` is left behind."""
    try:
        shutil.copyfile(src, dst)
    except BaseException:
        discard(dst)
        raise


def copy_and_remove(src: Path, dst: Path) -> None:
    """
    Copy then delete the source.

    If the source cannot be deleted the copy is removed again, so either
    `dst` holds the file and `src` is gone, or nothing changed.
    """
    copy_file(src, dst)
    try:
        os.unlink(src)
    except OSError:
        discard(dst)
        raise


def move_file(src: Path, dst: Path) -> None:
    """Rename, falling back to copy-and-remove across filesystems."""
    try:
        os.rename(src, dst)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug(f"Cross-device move {src} -> {dst}, copying instead")
        copy_and_remove(src, dst)
