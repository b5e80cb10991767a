"""Collision-free path allocation inside the system temp directory."""

import os
import secrets
import string
import tempfile
import time
from pathlib import Path
from typing import Callable

from loguru import logger

from screenshot_agent.errors import TempPathError

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")
DEFAULT_EXTENSION = ".png"

_BASE36 = string.digits + string.ascii_lowercase


def normalize_ext(ext: str) -> str:
    """Lower-case a known image extension, falling back to .png."""
    if not ext:
        return DEFAULT_EXTENSION
    lower = ext.lower()
    if lower in IMAGE_EXTENSIONS:
        return lower
    return DEFAULT_EXTENSION


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def random_token() -> str:
    """Millisecond timestamp plus 8 random characters, both base 36."""
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return stamp + suffix


class TempPathAllocator:
    """
    Mint fresh paths in the temp directory.

    A path is returned only if nothing exists there at the time of the check.
    There is no reservation: two processes can still race for the same name,
    the random token just makes it unlikely.
    """

    def __init__(
        self,
        temp_dir: Path | None = None,
        attempts: int = 20,
        token_factory: Callable[[], str] = random_token,
    ):
        self.temp_dir = Path(temp_dir or tempfile.gettempdir()).resolve()
        self.attempts = attempts
        self.token_factory = token_factory

    def allocate(self, prefix: str, suffix: str = "") -> Path:
        """
        Return an absolute path `<temp_dir>/<prefix><token><suffix>`.

        Raises:
            TempPathError: If every attempt hit an existing entry
        """
        for _ in range(self.attempts):
            candidate = self.temp_dir / f"{prefix}{self.token_factory()}{suffix}"
            try:
                os.lstat(candidate)
            except FileNotFoundError:
                return candidate
            except OSError as e:
                logger.debug(f"Cannot probe {candidate}: {e}")
                continue
            logger.debug(f"Temp name taken: {candidate.name}")

        raise TempPathError("unable to generate temp path")

    def image_path(self, source: Path) -> Path:
        """Temp path for a relocated image, keeping its normalized extension."""
        return self.allocate("image-", normalize_ext(source.suffix))

    def clipboard_path(self) -> Path:
        """Temp path for a clipboard payload (always PNG)."""
        return self.allocate("clipboard-", DEFAULT_EXTENSION)
