"""Tests for Desktop/Downloads directory resolution."""

from pathlib import Path

import pytest

from screenshot_agent.errors import NotFoundError
from screenshot_agent.locations import (
    ConfigOverride,
    DirectoryResolver,
    HomeDefault,
    parse_user_dir,
)
from screenshot_agent.models import Location


def _user_dirs(home: Path, content: str) -> None:
    config = home / ".config"
    config.mkdir(parents=True, exist_ok=True)
    (config / "user-dirs.dirs").write_text(content)


def test_home_default_wins_when_present(home: Path):
    (home / "Desktop").mkdir()
    _user_dirs(home, 'XDG_DESKTOP_DIR="$HOME/Bureau"\n')
    (home / "Bureau").mkdir()

    resolver = DirectoryResolver.for_platform("linux", home)

    assert resolver.resolve(Location.DESKTOP) == home / "Desktop"


def test_user_dirs_override_on_linux(home: Path):
    (home / "Bureau").mkdir()
    _user_dirs(home, '# comment\nXDG_DESKTOP_DIR="$HOME/Bureau"\n')

    resolver = DirectoryResolver.for_platform("linux", home)

    assert resolver.resolve(Location.DESKTOP) == home / "Bureau"


def test_downloads_uses_download_key(home: Path):
    (home / "Telechargements").mkdir()
    _user_dirs(home, 'XDG_DOWNLOAD_DIR="${HOME}/Telechargements"\n')

    resolver = DirectoryResolver.for_platform("linux", home)

    assert resolver.resolve(Location.DOWNLOADS) == home / "Telechargements"


def test_user_dirs_ignored_on_macos(home: Path):
    (home / "Bureau").mkdir()
    _user_dirs(home, 'XDG_DESKTOP_DIR="$HOME/Bureau"\n')

    resolver = DirectoryResolver.for_platform("darwin", home)

    with pytest.raises(NotFoundError):
        resolver.resolve(Location.DESKTOP)


def test_missing_config_is_not_found(home: Path):
    resolver = DirectoryResolver.for_platform("linux", home)

    with pytest.raises(NotFoundError):
        resolver.resolve(Location.DOWNLOADS)


def test_override_pointing_nowhere_is_not_found(home: Path):
    _user_dirs(home, 'XDG_DESKTOP_DIR="$HOME/Gone"\n')

    with pytest.raises(NotFoundError):
        DirectoryResolver([HomeDefault(home), ConfigOverride(home)]).resolve(Location.DESKTOP)


@pytest.mark.parametrize(
    "value, expected",
    [
        ('"$HOME/Desk"', "Desk"),
        ("'${HOME}/Desk'", "Desk"),
        ('"~/Desk"', "Desk"),
        ('"Desk"', "Desk"),
        ('"$HOME/a/../Desk"', "Desk"),
    ],
)
def test_parse_user_dir_expansions(value: str, expected: str):
    home = Path("/home/someone")
    text = f"XDG_MUSIC_DIR=\"$HOME/Music\"\nXDG_DESKTOP_DIR={value}\n"

    assert parse_user_dir(text, "DESKTOP", home) == home / expected


def test_parse_user_dir_absolute_value():
    assert parse_user_dir('XDG_DESKTOP_DIR="/srv/desk"', "DESKTOP", Path("/home/x")) == Path("/srv/desk")


def test_parse_user_dir_empty_or_absent():
    home = Path("/home/x")
    assert parse_user_dir('XDG_DESKTOP_DIR=""', "DESKTOP", home) is None
    assert parse_user_dir('XDG_MUSIC_DIR="$HOME/Music"', "DESKTOP", home) is None
