"""Resolve the user's Desktop and Downloads folders."""

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger

from screenshot_agent.errors import NotFoundError
from screenshot_agent.models import Location

# Conventional folder names under $HOME
HOME_FOLDER_NAMES = {
    Location.DESKTOP: "Desktop",
    Location.DOWNLOADS: "Downloads",
}

# Keys used in ~/.config/user-dirs.dirs (XDG_<KEY>_DIR=...)
XDG_KEYS = {
    Location.DESKTOP: "DESKTOP",
    Location.DOWNLOADS: "DOWNLOAD",
}

_SURROUNDING_QUOTES = re.compile(r"^['\"]|['\"]$")

# Platforms whose desktops read xdg-user-dirs
XDG_PLATFORMS = ("linux", "freebsd", "openbsd", "netbsd")


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


class DirectoryStrategy(ABC):
    """One way of turning a Location into a directory."""

    @abstractmethod
    def candidate(self, location: Location) -> Path | None:
        """Directory this strategy proposes, or None if it has no opinion."""
        ...


class HomeDefault(DirectoryStrategy):
    """`~/Desktop` and `~/Downloads`."""

    def __init__(self, home: Path):
        self.home = home

    def candidate(self, location: Location) -> Path | None:
        return self.home / HOME_FOLDER_NAMES[location]


class ConfigOverride(DirectoryStrategy):
    """Paths configured in xdg-user-dirs' `~/.config/user-dirs.dirs`."""

    def __init__(self, home: Path, config_file: Path | None = None):
        self.home = home
        self.config_file = config_file or home / ".config" / "user-dirs.dirs"

    def candidate(self, location: Location) -> Path | None:
        try:
            text = self.config_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"No user-dirs override ({self.config_file}): {e}")
            return None
        return parse_user_dir(text, XDG_KEYS[location], self.home)


def parse_user_dir(text: str, key: str, home: Path) -> Path | None:
    """
    Find `XDG_<key>_DIR=<value>` in user-dirs.dirs content.

    Quotes are stripped, `$HOME`/`${HOME}` and a leading `~` are expanded,
    and relative values are taken relative to home.
    """
    prefix = f"XDG_{key}_DIR="
    home_str = str(home)
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line.startswith(prefix):
            continue

        value = line[len(prefix):].strip()
        value = _SURROUNDING_QUOTES.sub("", value)
        value = value.replace("${HOME}", home_str).replace("$HOME", home_str)
        if value.startswith("~"):
            value = os.path.join(home_str, value[1:].lstrip("/\\"))
        if not value:
            return None
        if not os.path.isabs(value):
            value = os.path.join(home_str, value)
        return Path(os.path.normpath(value))

    return None


class DirectoryResolver:
    """Ask each strategy in order; the first existing directory wins."""

    def __init__(self, strategies: list[DirectoryStrategy]):
        self.strategies = strategies

    @classmethod
    def for_platform(cls, platform: str, home: Path) -> "DirectoryResolver":
        strategies: list[DirectoryStrategy] = [HomeDefault(home)]
        if platform.startswith(XDG_PLATFORMS):
            strategies.append(ConfigOverride(home))
        return cls(strategies)

    def resolve(self, location: Location) -> Path:
        """
        Absolute directory for `location`.

        Raises:
            NotFoundError: No strategy produced an existing directory
        """
        for strategy in self.strategies:
            path = strategy.candidate(location)
            if path is not None and _is_dir(path):
                logger.debug(f"{location.value} directory: {path}")
                return path.absolute()

        raise NotFoundError(f"no {location.value} directory")
