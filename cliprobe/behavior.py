#!/usr/bin/env python3
"""
No-args behavior classification.
"""

import logging
import re
from typing import Optional

from .config import INTERACTIVE_TOOLS, NO_ARGS_PROBE_TIMEOUT
from .errors import ExecutionFailedError
from .executor import exit_status
from .models import CliAnalysis, NoArgsBehavior, ResourceLimits
from .parser import extract_usage_pattern

logger = logging.getLogger(__name__)

BARE_COMMAND_TOKEN = re.compile(r"(?:^|\s)(?:sub)?command(?=\s|$|\.\.\.)")


def is_interactive_tool(binary_name: str) -> bool:
    """True for REPLs, database shells and debuggers"""
    for name in INTERACTIVE_TOOLS:
        if len(name) <= 2:
            if binary_name == name:
                return True
        elif name in binary_name:
            return True
    return False


def requires_subcommand_from_usage(pattern: str) -> bool:
    lowered = pattern.lower()
    if "<subcommand>" in lowered or "<command>" in lowered:
        return True
    parts = lowered.split(None, 1)
    args = parts[1] if len(parts) > 1 else ""
    return bool(BARE_COMMAND_TOKEN.search(args))


def is_optional_only_from_usage(pattern: str) -> bool:
    parts = pattern.split()
    if len(parts) <= 1:
        return True
    return " ".join(parts[1:]).startswith("[")


class BehaviorInferrer:
    """Predicts what a binary does when run with no arguments.

    Strategies run in order and the first verdict wins:

    1. known interactive tools (never executed)
    2. exit code of a short no-args run
    3. the first usage line of the help text
    4. presence of discovered subcommands
    5. ``ShowHelp``
    """

    def __init__(self, limits: Optional[ResourceLimits] = None,
                 probe_timeout: float = NO_ARGS_PROBE_TIMEOUT):
        self.limits = limits or ResourceLimits()
        self.probe_timeout = probe_timeout

    def infer_no_args_behavior(self, analysis: CliAnalysis) -> NoArgsBehavior:
        strategies = (
            self._from_interactive_list,
            self._from_exit_code,
            self._from_usage_line,
            self._from_subcommands,
        )
        for strategy in strategies:
            behavior = strategy(analysis)
            if behavior is not None:
                logger.info("Inferred no-args behavior: %s (%s)", behavior.value,
                            strategy.__name__.lstrip("_"))
                return behavior

        logger.info("Inferred no-args behavior: show_help (default)")
        return NoArgsBehavior.SHOW_HELP

    def _from_interactive_list(self, analysis: CliAnalysis) -> Optional[NoArgsBehavior]:
        if is_interactive_tool(analysis.binary_name):
            return NoArgsBehavior.INTERACTIVE
        return None

    def _from_exit_code(self, analysis: CliAnalysis) -> Optional[NoArgsBehavior]:
        try:
            code = exit_status(analysis.binary_path, (), self.probe_timeout, self.limits)
        except ExecutionFailedError as exc:
            logger.debug("No-args probe failed: %s", exc)
            return None
        if code is None:
            logger.debug("No-args probe timed out")
            return None

        logger.debug("Binary exited with code %d", code)
        if code in (1, 2):
            return NoArgsBehavior.REQUIRE_SUBCOMMAND
        # 0 and unknown codes
        return NoArgsBehavior.SHOW_HELP

    def _from_usage_line(self, analysis: CliAnalysis) -> Optional[NoArgsBehavior]:
        pattern = extract_usage_pattern(analysis.help_output)
        if pattern is None:
            return None
        logger.debug("Extracted usage pattern: %s", pattern)

        if requires_subcommand_from_usage(pattern):
            return NoArgsBehavior.REQUIRE_SUBCOMMAND
        if is_optional_only_from_usage(pattern):
            return NoArgsBehavior.SHOW_HELP
        return None

    def _from_subcommands(self, analysis: CliAnalysis) -> Optional[NoArgsBehavior]:
        if analysis.subcommands:
            return NoArgsBehavior.REQUIRE_SUBCOMMAND
        return None
