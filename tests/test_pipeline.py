"""End-to-end tests for the capture pipeline."""

import asyncio
import sys
import time
from pathlib import Path

import pytest

from conftest import write_image
from screenshot_agent.config import Settings
from screenshot_agent.errors import OperationError
from screenshot_agent.pipeline import Options, ScreenshotAgent

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses /bin/sh scripts")


@pytest.fixture(autouse=True)
def _no_xdg_data_home(monkeypatch):
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)


def _agent(home: Path, temp_dir: Path, bin_dir: Path, **kwargs) -> ScreenshotAgent:
    bin_dir.mkdir(parents=True, exist_ok=True)
    settings = Settings(home_dir=home, temp_dir=temp_dir)
    return ScreenshotAgent.from_settings(
        settings, platform="linux", search_path=str(bin_dir), **kwargs
    )


def _clipboard_holds(bin_dir: Path, payload: str) -> None:
    bin_dir.mkdir(parents=True, exist_ok=True)
    script = bin_dir / "wl-paste"
    script.write_text(f"#!/bin/sh\nprintf '{payload}'\n")
    script.chmod(0o755)


def test_desktop_screenshot_copied_and_trashed(home: Path, temp_dir: Path, tmp_path: Path):
    """Empty clipboard, old photo and newer screenshot on the Desktop."""
    desktop = home / "Desktop"
    write_image(desktop / "photo.jpg", b"photo", age=7200)
    shot = write_image(desktop / "Screenshot 2024-01-01.png", b"shot", age=600)

    result = asyncio.run(_agent(home, temp_dir, tmp_path / "bin").run(Options()))

    assert result.source == str(shot)
    assert result.temp_path.suffix == ".png"
    assert result.temp_path.read_bytes() == b"shot"
    assert not shot.exists()
    assert (desktop / "photo.jpg").exists()
    trashed = home / ".local" / "share" / "Trash" / "files" / shot.name
    assert trashed.read_bytes() == b"shot"
    assert (home / ".local" / "share" / "Trash" / "info" / f"{shot.name}.trashinfo").exists()


@posix_only
def test_recent_download_beats_clipboard(home: Path, temp_dir: Path, tmp_path: Path):
    """A fresh Downloads file wins over clipboard bytes and is moved, not trashed."""
    _clipboard_holds(tmp_path / "bin", "CLIP")
    pic = write_image(home / "Downloads" / "diagram.jpeg", b"diagram", age=5)

    result = asyncio.run(
        _agent(home, temp_dir, tmp_path / "bin").run(Options(use_downloads=True))
    )

    assert result.source == str(pic)
    assert result.temp_path.suffix == ".jpeg"
    assert result.temp_path.read_bytes() == b"diagram"
    assert list((home / "Downloads").iterdir()) == []
    assert not (home / ".local" / "share" / "Trash").exists()


@posix_only
def test_clipboard_beats_stale_file(home: Path, temp_dir: Path, tmp_path: Path):
    _clipboard_holds(tmp_path / "bin", "CLIP")
    shot = write_image(home / "Desktop" / "Screenshot.png", b"shot", age=31)

    result = asyncio.run(_agent(home, temp_dir, tmp_path / "bin").run(Options()))

    assert result.source == "clipboard"
    assert result.temp_path.name.startswith("clipboard-")
    assert result.temp_path.read_bytes() == b"CLIP"
    assert shot.exists()


@posix_only
def test_injected_clock_decides_window(home: Path, temp_dir: Path, tmp_path: Path):
    """A file written just now is stale once the clock has moved on an hour."""
    _clipboard_holds(tmp_path / "bin", "CLIP")
    shot = write_image(home / "Desktop" / "Screenshot.png", b"shot", age=0)
    agent = _agent(home, temp_dir, tmp_path / "bin", clock=lambda: time.time() + 3600)

    result = asyncio.run(agent.run(Options()))

    assert result.source == "clipboard"
    assert shot.exists()


@posix_only
def test_clipboard_only_ignores_files(home: Path, temp_dir: Path, tmp_path: Path):
    _clipboard_holds(tmp_path / "bin", "CLIP")
    shot = write_image(home / "Desktop" / "Screenshot.png", b"shot", age=0)

    result = asyncio.run(
        _agent(home, temp_dir, tmp_path / "bin").run(Options(clipboard_only=True))
    )

    assert result.source == "clipboard"
    assert shot.exists()


@posix_only
def test_clipboard_only_with_empty_backend_is_not_found(home: Path, temp_dir: Path, tmp_path: Path):
    """A backend that prints nothing is a miss, not an error."""
    _clipboard_holds(tmp_path / "bin", "")
    write_image(home / "Desktop" / "Screenshot.png", b"shot", age=0)

    result = asyncio.run(
        _agent(home, temp_dir, tmp_path / "bin").run(Options(clipboard_only=True))
    )

    assert result is None
    assert list(temp_dir.iterdir()) == []


def test_nothing_anywhere_is_not_found(home: Path, temp_dir: Path, tmp_path: Path):
    result = asyncio.run(_agent(home, temp_dir, tmp_path / "bin").run(Options()))

    assert result is None


def test_desktop_trash_failure_surfaces(home: Path, temp_dir: Path, tmp_path: Path):
    shot = write_image(home / "Desktop" / "Screenshot.png", b"shot", age=0)
    settings = Settings(home_dir=home, temp_dir=temp_dir)
    agent = ScreenshotAgent.from_settings(settings, platform="sunos5", search_path="")

    with pytest.raises(OperationError, match="unsupported"):
        asyncio.run(agent.run(Options()))

    assert shot.read_bytes() == b"shot"
    assert list(temp_dir.iterdir()) == []
