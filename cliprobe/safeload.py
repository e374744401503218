#!/usr/bin/env python3
"""
Bounded deserialization for configuration tables and stored analyses.
"""

import json
from typing import Any

import yaml

from .errors import ConfigError

MAX_PAYLOAD_BYTES = 10 * 1024 * 1024
MAX_NESTING_DEPTH = 16


def _check_payload(text: str, kind: str) -> None:
    size = len(text.encode("utf-8"))
    if size > MAX_PAYLOAD_BYTES:
        raise ConfigError(f"{kind} payload too large: {size} bytes (max: {MAX_PAYLOAD_BYTES} bytes)")
    if not text.strip():
        raise ConfigError(f"{kind} payload is empty")


def nesting_depth(value: Any) -> int:
    """Depth of nested mappings and sequences; scalars count as one level"""
    if isinstance(value, dict):
        return 1 + max((nesting_depth(v) for v in value.values()), default=0)
    if isinstance(value, (list, tuple)):
        return 1 + max((nesting_depth(v) for v in value), default=0)
    return 1


def _check_depth(value: Any, kind: str) -> Any:
    depth = nesting_depth(value)
    if depth > MAX_NESTING_DEPTH:
        raise ConfigError(f"{kind} depth too deep: {depth} levels (max: {MAX_NESTING_DEPTH} levels)")
    return value


def load_yaml_safe(text: str) -> Any:
    """Parse YAML with size and depth ceilings"""
    _check_payload(text, "YAML")
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"YAML deserialization failed: {exc}") from exc
    except RecursionError as exc:
        raise ConfigError("YAML depth too deep") from exc
    return _check_depth(value, "YAML")


def load_json_safe(text: str) -> Any:
    """Parse JSON with size and depth ceilings"""
    _check_payload(text, "JSON")
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"JSON deserialization failed: {exc}") from exc
    except RecursionError as exc:
        raise ConfigError("JSON depth too deep") from exc
    return _check_depth(value, "JSON")
