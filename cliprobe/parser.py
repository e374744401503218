#!/usr/bin/env python3
"""
Structural parsing of help text: options, usage lines, positional
arguments and version strings.
"""

import logging
import re
from typing import List, Optional, Set, Tuple

from .models import CliOption, OptionType

logger = logging.getLogger(__name__)

# -h, -v, ... bounded by whitespace, comma or end of line
SHORT_OPTION = re.compile(r"(?<![\w-])-([a-zA-Z])(?=[\s,]|$)")

# --help, --max-size, ...
LONG_OPTION = re.compile(r"--([a-z][a-z0-9-]+)")

# --name <value>, --name=<value>, -o <file>, --config FILE
OPTION_WITH_VALUE = re.compile(
    r"(?:--[a-z][a-z0-9-]+|(?<![\w-])-[a-zA-Z])"
    r"(?:(?:=|\s+)<[^>]+>|(?:=| )[A-Z][A-Z0-9_-]*\b)"
)

# One leading flag/value token of an option line, with its separator
OPTION_TOKEN = re.compile(
    r"(?:--?[a-zA-Z0-9][\w-]*(?:(?:=|\s)?(?:<[^>]+>|\[[^\]]*\])|(?:=| )[A-Z][A-Z0-9_-]*\b)?)"
    r"\s*,?\s*"
)

VERSION_PATTERN = re.compile(r"\b\d+\.\d+(?:\.\d+)?(?:-[a-z0-9.]+)?\b")
USAGE_LINE = re.compile(r"^\s*usage:\s+(.+)$", re.IGNORECASE)
REQUIRED_ARG = re.compile(r"<([^>]+)>")


def _description(line: str) -> Optional[str]:
    """Text that follows the flag and value tokens at the start of a line"""
    pos = 0
    while True:
        match = OPTION_TOKEN.match(line, pos)
        if not match or match.end() == pos:
            break
        pos = match.end()
    rest = line[pos:].strip()
    return rest or None


def parse_options(help_text: str) -> List[CliOption]:
    """Parse options from help text, keeping the first of duplicate (short, long) pairs"""
    options = []
    seen: Set[Tuple[Optional[str], Optional[str]]] = set()

    for line in help_text.splitlines():
        trimmed = line.strip()
        if not trimmed or "-" not in trimmed:
            continue
        if USAGE_LINE.match(trimmed):
            continue

        short_match = SHORT_OPTION.search(trimmed)
        long_match = LONG_OPTION.search(trimmed)
        short = f"-{short_match.group(1)}" if short_match else None
        long = f"--{long_match.group(1)}" if long_match else None
        if short is None and long is None:
            continue

        key = (short, long)
        if key in seen:
            continue
        seen.add(key)

        option_type = OptionType.string() if OPTION_WITH_VALUE.search(trimmed) else OptionType.flag()
        options.append(CliOption(
            short=short,
            long=long,
            description=_description(trimmed),
            option_type=option_type,
        ))

    logger.debug("Parsed %d options", len(options))
    return options


def extract_usage_pattern(help_text: str) -> Optional[str]:
    """Text after the first ``Usage:`` marker, if any"""
    for line in help_text.splitlines():
        match = USAGE_LINE.match(line.strip())
        if match:
            return match.group(1).strip()
    return None


def parse_required_args(help_text: str) -> List[str]:
    """Names of ``<ARG>`` placeholders on the first usage line"""
    pattern = extract_usage_pattern(help_text)
    required_args = REQUIRED_ARG.findall(pattern) if pattern else []
    logger.debug("Detected %d required arguments", len(required_args))
    return required_args


def extract_version(text: str) -> Optional[str]:
    match = VERSION_PATTERN.search(text)
    return match.group(0) if match else None
