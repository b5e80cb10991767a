"""Shared fixtures."""

import os
import time
from pathlib import Path

import pytest

from screenshot_agent.tempfiles import TempPathAllocator


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def allocator(temp_dir: Path) -> TempPathAllocator:
    return TempPathAllocator(temp_dir)


def write_image(path: Path, data: bytes = b"\x89PNG fake", age: float = 0.0) -> Path:
    """Create a file whose mtime is `age` seconds in the past."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    stamp = time.time() - age
    os.utime(path, (stamp, stamp))
    return path
