#!/usr/bin/env python3
"""
Exception types raised by the analyzer.

Each error carries a short ``category`` that is safe to show to users; the
full message may contain filesystem paths and is meant for logs only.
"""

from pathlib import Path
from typing import Optional, Union


class AnalyzerError(Exception):
    """Base class for every analyzer failure"""

    category = "analysis failed"


class BinaryNotFoundError(AnalyzerError):
    """Binary path does not exist or is not a regular file"""

    category = "binary not found"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Binary not found: {self.path}")


class BinaryNotExecutableError(AnalyzerError):
    """Binary exists but carries no execute permission bit"""

    category = "binary not executable"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Binary not executable: {self.path}")


class ExecutionFailedError(AnalyzerError):
    """A probe could not be spawned or did not complete"""

    category = "execution failed"


class ProbeTimeoutError(ExecutionFailedError):
    """A probe exceeded its timeout and was killed"""

    def __init__(self, command: str, timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(f"Timeout after {timeout:.2f}s: {command}")


class InvalidHelpOutputError(AnalyzerError):
    """Every help probe returned empty output"""

    category = "invalid help output"

    def __init__(self, command: Optional[str] = None):
        self.command = command
        message = "Invalid help output"
        if command:
            message = f"{message} from {command}"
        super().__init__(message)


class ConfigError(AnalyzerError):
    """Configuration tables are malformed, oversized or nested too deeply"""

    category = "configuration error"
