"""Search-path probing for optional external programs."""

import os
import shutil


def find_executable(program: str, search_path: str | None) -> str | None:
    """
    Locate `program` on an explicit search path.

    `search_path` is an os.pathsep-separated list of directories, the same
    shape as $PATH. Nothing is read from the environment here, so the answer
    depends only on the arguments and the filesystem. On Windows the PATHEXT
    suffixes are honoured by shutil.which.

    Returns:
        Absolute path to the executable, or None if it is not invokable
    """
    if not search_path:
        return None
    return shutil.which(program, path=search_path)


def command_exists(program: str, search_path: str | None) -> bool:
    """True if `program` is an executable entry somewhere on `search_path`."""
    return find_executable(program, search_path) is not None


def current_search_path() -> str:
    """Snapshot of $PATH, taken once at startup."""
    return os.environ.get("PATH", os.defpath)
