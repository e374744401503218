#!/usr/bin/env python3
"""
Recursive subcommand discovery.

Subcommands are read from command sections of the help text, then each one
is probed for its own help, options and nested subcommands. Recursion is
bounded by ``max_depth`` and by a set of ``(binary_path, name)`` keys that
is threaded through the calls, so self-referential help text terminates.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple, Union

from .config import DEFAULT_MAX_DEPTH, SUBCOMMAND_HEADERS, AnalyzerConfig
from .errors import AnalyzerError
from .inference import OptionInferrer
from .models import ResourceLimits, Subcommand
from .parser import parse_options, parse_required_args
from .probes import fetch_subcommand_help

logger = logging.getLogger(__name__)

SUBCOMMAND_PATTERN = re.compile(r"^\s{2,}([a-z][a-z0-9-]+)(?:\s+\[[^\]]+\])*\s{2,}(\S.*)$")

VisitKey = Tuple[str, str]


def _is_header(line: str) -> bool:
    stripped = line.strip().lower()
    return any(stripped.startswith(header.lower()) for header in SUBCOMMAND_HEADERS)


def parse_subcommands(help_text: str) -> List[Tuple[str, str]]:
    """(name, description) pairs from every command section, in order"""
    subcommands = []
    in_section = False

    for line in help_text.splitlines():
        if not in_section:
            in_section = _is_header(line)
            continue

        if not line.strip():
            in_section = False
            continue

        match = SUBCOMMAND_PATTERN.match(line)
        if match:
            subcommands.append((match.group(1), match.group(2).strip()))

    return subcommands


class SubcommandDetector:
    """Builds the subcommand tree of a binary"""

    def __init__(self, config: Optional[AnalyzerConfig] = None,
                 limits: Optional[ResourceLimits] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.inferrer = OptionInferrer(config)
        self.limits = limits or ResourceLimits()
        self.max_depth = max_depth

    def detect(self, binary: Union[str, Path], help_text: str) -> List[Subcommand]:
        logger.info("Detecting subcommands for %s", binary)
        visited: Set[VisitKey] = set()
        return self._detect(Path(binary), help_text, (), 0, visited)

    def _detect(self, binary: Path, help_text: str, parents: Sequence[str],
                depth: int, visited: Set[VisitKey]) -> List[Subcommand]:
        if depth >= self.max_depth:
            logger.debug("Max recursion depth %d reached", self.max_depth)
            return []

        candidates = parse_subcommands(help_text)
        if not candidates:
            return []
        logger.debug("Found %d subcommand candidates at depth %d", len(candidates), depth)

        subcommands = []
        for name, description in candidates:
            key = (str(binary), name)
            if key in visited:
                logger.debug("Skipping already visited subcommand: %s", name)
                continue
            visited.add(key)

            command_path = [*parents, name]
            try:
                sub_help = fetch_subcommand_help(binary, command_path, self.limits)
            except AnalyzerError as exc:
                logger.warning("Failed to get help for subcommand '%s': %s",
                               " ".join(command_path), exc)
                continue

            options = self.inferrer.refine(parse_options(sub_help))
            nested = self._detect(binary, sub_help, command_path, depth + 1, visited)
            subcommands.append(Subcommand(
                name=name,
                description=description,
                options=tuple(options),
                required_args=tuple(parse_required_args(sub_help)),
                subcommands=tuple(nested),
                depth=depth,
            ))

        logger.info("Detected %d subcommands at depth %d", len(subcommands), depth)
        return subcommands
