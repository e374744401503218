#!/usr/bin/env python3
"""
cliprobe - Structural analysis of command-line tools

Invokes an untrusted executable with bounded, non-interactive probes and
rebuilds its interface from the help text: global options with inferred
types, the recursive subcommand tree, and what the tool does when run
without arguments.
"""

__version__ = "0.1.0"

from .analyzer import CLIAnalyzer
from .behavior import BehaviorInferrer
from .config import AnalyzerConfig
from .errors import (
    AnalyzerError,
    BinaryNotExecutableError,
    BinaryNotFoundError,
    ConfigError,
    ExecutionFailedError,
    InvalidHelpOutputError,
    ProbeTimeoutError,
)
from .executor import execute, exit_status, validate_binary_path
from .inference import OptionInferrer
from .models import (
    AnalysisMetadata,
    CliAnalysis,
    CliOption,
    NoArgsBehavior,
    OptionKind,
    OptionType,
    ResourceLimits,
    Subcommand,
)
from .probes import VersionDetector
from .subcommands import SubcommandDetector

# Main exports
__all__ = [
    "CLIAnalyzer",
    "BehaviorInferrer",
    "AnalyzerConfig",
    "OptionInferrer",
    "SubcommandDetector",
    "VersionDetector",
    "execute",
    "exit_status",
    "validate_binary_path",
    "CliAnalysis",
    "CliOption",
    "Subcommand",
    "AnalysisMetadata",
    "OptionType",
    "OptionKind",
    "NoArgsBehavior",
    "ResourceLimits",
    "AnalyzerError",
    "BinaryNotFoundError",
    "BinaryNotExecutableError",
    "ExecutionFailedError",
    "ProbeTimeoutError",
    "InvalidHelpOutputError",
    "ConfigError",
]
