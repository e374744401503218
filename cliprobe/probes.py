#!/usr/bin/env python3
"""
Help and version probes for CLI tools.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import ExecutionFailedError, InvalidHelpOutputError
from .executor import execute
from .models import ResourceLimits
from .parser import extract_version

logger = logging.getLogger(__name__)


def _first_output(binary: Union[str, Path], variations: List[List[str]],
                  limits: ResourceLimits) -> Optional[str]:
    """Output of the first variation that prints something"""
    for args in variations:
        try:
            output = execute(binary, args, limits=limits)
        except ExecutionFailedError as exc:
            logger.debug("Probe %s failed: %s", " ".join(args), exc)
            continue
        if output.strip():
            return output
        logger.debug("Probe %s printed nothing", " ".join(args))
    return None


def fetch_help(binary: Union[str, Path], limits: Optional[ResourceLimits] = None) -> str:
    """Help text via ``--help``, then ``-h``, then a ``help`` subcommand"""
    limits = limits or ResourceLimits()
    output = _first_output(binary, [["--help"], ["-h"], ["help"]], limits)
    if output is None:
        raise InvalidHelpOutputError(Path(binary).name)
    return output


def fetch_subcommand_help(binary: Union[str, Path], command_path: Sequence[str],
                          limits: Optional[ResourceLimits] = None) -> str:
    """Help text for a (possibly nested) subcommand"""
    limits = limits or ResourceLimits()
    command_path = list(command_path)
    variations = [
        command_path + ["--help"],
        command_path + ["-h"],
        ["help"] + command_path,
    ]
    output = _first_output(binary, variations, limits)
    if output is None:
        raise InvalidHelpOutputError(" ".join([Path(binary).name] + command_path))
    return output


class VersionDetector:
    """Detects CLI tool versions"""

    STRATEGIES = (["--version"], ["-v"], ["version"])

    @staticmethod
    def detect_version(binary: Union[str, Path],
                       limits: Optional[ResourceLimits] = None) -> Optional[str]:
        """Try each version probe in turn; None when no output carries a version"""
        limits = limits or ResourceLimits()
        for args in VersionDetector.STRATEGIES:
            version = VersionDetector._try_version_flag(binary, args, limits)
            if version:
                return version
        return None

    @staticmethod
    def _try_version_flag(binary: Union[str, Path], args: List[str],
                          limits: ResourceLimits) -> Optional[str]:
        try:
            output = execute(binary, args, limits=limits)
        except ExecutionFailedError as exc:
            logger.debug("Version probe %s failed: %s", args[0], exc)
            return None
        return extract_version(output)
