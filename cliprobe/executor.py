#!/usr/bin/env python3
"""
Bounded, non-interactive execution of untrusted binaries.

Every probe runs with stdin bound to the null device, colors and terminal
features disabled, and rlimit ceilings applied in the child before it
execs. Output is spooled to temporary files so the parent can poll the
child without risking a full-pipe deadlock; the file-size limit keeps each
spool at or under ``MAX_OUTPUT_BYTES``.
"""

import logging
import os
import signal
import subprocess
import sys
import tempfile
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .errors import (
    BinaryNotExecutableError,
    BinaryNotFoundError,
    ExecutionFailedError,
    ProbeTimeoutError,
)
from .models import ResourceLimits

if sys.platform != "win32":
    import resource
else:
    resource = None

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05
MAX_OUTPUT_BYTES = 4 * 1024 * 1024
PROBE_ENV = {"NO_COLOR": "1", "TERM": "dumb"}

_limits_warned = False


def validate_binary_path(path: Union[str, Path]) -> Path:
    """Check that ``path`` is an executable regular file and canonicalize it"""
    path = Path(path)
    if not path.exists() or not path.is_file():
        raise BinaryNotFoundError(path)

    if os.name == "posix" and not path.stat().st_mode & 0o111:
        raise BinaryNotExecutableError(path)

    return path.resolve(strict=True)


def _lower_limit(kind: int, ceiling: int) -> None:
    soft, hard = resource.getrlimit(kind)
    if hard != resource.RLIM_INFINITY and hard <= ceiling:
        return
    if soft == resource.RLIM_INFINITY or soft > ceiling:
        soft = ceiling
    resource.setrlimit(kind, (soft, ceiling))


def _limit_preexec(limits: ResourceLimits) -> Optional[Callable[[], None]]:
    """Build the hook that lowers rlimits inside the child before exec"""
    global _limits_warned

    if resource is None:
        if not _limits_warned:
            logger.warning("Resource limits not supported on this platform")
            _limits_warned = True
        return None

    ceilings = [
        (resource.RLIMIT_AS, limits.max_memory_bytes),
        (resource.RLIMIT_NOFILE, limits.max_file_descriptors),
        # Output spools are regular files: cap what the child can write to them
        (resource.RLIMIT_FSIZE, MAX_OUTPUT_BYTES),
    ]
    if hasattr(resource, "RLIMIT_NPROC"):
        ceilings.append((resource.RLIMIT_NPROC, limits.max_processes))

    def apply_limits():
        # Runs in the forked child: an exception here aborts the spawn
        for kind, ceiling in ceilings:
            _lower_limit(kind, ceiling)

    return apply_limits


def _read_spool(spool) -> str:
    spool.seek(0)
    data = spool.read(MAX_OUTPUT_BYTES)
    return data.decode("utf-8", errors="replace")


def _kill(proc: subprocess.Popen) -> None:
    """Kill the probe and everything it spawned, then reap it"""
    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass
    proc.wait()


def _run(binary: Union[str, Path], args: Sequence[str], timeout: float,
         limits: ResourceLimits, capture: bool):
    command: List[str] = [str(binary), *args]
    display = " ".join(command)
    logger.debug("Executing: %s (timeout: %.2fs)", display, timeout)

    env = dict(os.environ, **PROBE_ENV)
    with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=out if capture else subprocess.DEVNULL,
                stderr=err if capture else subprocess.DEVNULL,
                env=env,
                preexec_fn=_limit_preexec(limits),
                start_new_session=os.name == "posix",
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise ExecutionFailedError(f"Failed to spawn {display}: {exc}") from exc

        start = time.monotonic()
        while proc.poll() is None:
            if time.monotonic() - start >= timeout:
                logger.warning("Execution timeout exceeded, killing %s", display)
                _kill(proc)
                raise ProbeTimeoutError(display, timeout)
            time.sleep(POLL_INTERVAL)

        logger.debug("Completed in %.3fs with exit code %s", time.monotonic() - start, proc.returncode)
        if not capture:
            return proc.returncode, "", ""
        return proc.returncode, _read_spool(out), _read_spool(err)


def execute(binary: Union[str, Path], args: Sequence[str] = (),
            timeout: Optional[float] = None,
            limits: Optional[ResourceLimits] = None) -> str:
    """Run a probe and return its stdout, or its stderr when stdout is empty.

    Raises ``ExecutionFailedError`` when the probe cannot be spawned and
    ``ProbeTimeoutError`` when it outlives ``timeout`` (defaults to the
    limits' execution timeout).
    """
    limits = limits or ResourceLimits()
    if timeout is None:
        timeout = limits.execution_timeout
    _, stdout, stderr = _run(binary, args, timeout, limits, capture=True)
    return stdout if stdout else stderr


def exit_status(binary: Union[str, Path], args: Sequence[str] = (),
                timeout: Optional[float] = None,
                limits: Optional[ResourceLimits] = None) -> Optional[int]:
    """Run a probe with all output discarded; None when it timed out"""
    limits = limits or ResourceLimits()
    if timeout is None:
        timeout = limits.execution_timeout
    try:
        code, _, _ = _run(binary, args, timeout, limits, capture=False)
    except ProbeTimeoutError:
        return None
    return code
