"""Shared fixtures: fake command-line tools written as shell scripts."""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from cliprobe.models import ResourceLimits

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs /bin/sh")


def say(text: str) -> str:
    """Shell snippet printing ``text`` with builtins only (no fork)."""
    lines = text.strip("\n").splitlines() or [""]
    quoted = " ".join("'" + line.replace("'", "'\\''") + "'" for line in lines)
    return f"printf '%s\\n' {quoted}"


@pytest.fixture
def make_cli(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable ``/bin/sh`` script and return its path."""

    def _make(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body.strip("\n") + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


@pytest.fixture
def limits() -> ResourceLimits:
    """Short probe timeout and a roomy process ceiling for busy test hosts."""
    return ResourceLimits(max_processes=4096, execution_timeout=10.0)
