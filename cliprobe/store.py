#!/usr/bin/env python3
"""
JSON persistence for analysis results.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from .errors import ConfigError
from .models import CliAnalysis
from .safeload import load_json_safe


def to_json(analysis: CliAnalysis, indent: int = 2) -> str:
    return json.dumps(analysis.to_json(), indent=indent)


def write_json(payload: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Atomically write a JSON document to ``path``"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_file_path = None
    try:
        # Write to a temporary file in the same directory, then rename into place
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
            encoding="utf-8",
        ) as tmp_file:
            tmp_file_path = tmp_file.name
            json.dump(payload, tmp_file, indent=2)

        os.replace(tmp_file_path, path)
    except Exception:
        # Clean up temp file if it exists
        if tmp_file_path is not None and os.path.exists(tmp_file_path):
            os.unlink(tmp_file_path)
        raise
    return path


def save_analysis(analysis: CliAnalysis, path: Union[str, Path]) -> Path:
    return write_json(analysis.to_json(), path)


def load_analysis(path: Union[str, Path]) -> CliAnalysis:
    """Read an analysis written by ``save_analysis``"""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read analysis file {path.name}: {exc}") from exc

    data = load_json_safe(text)
    try:
        return CliAnalysis.from_json(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed analysis file {path.name}: {exc}") from exc
