#!/usr/bin/env python3
"""
CLI analysis engine: probes a binary and assembles its structural model.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from .behavior import BehaviorInferrer
from .config import DEFAULT_MAX_DEPTH, AnalyzerConfig
from .executor import validate_binary_path
from .inference import OptionInferrer
from .models import CliAnalysis, NoArgsBehavior, ResourceLimits
from .parser import parse_options
from .probes import VersionDetector, fetch_help
from .subcommands import SubcommandDetector

logger = logging.getLogger(__name__)


class CLIAnalyzer:
    """Multi-step CLI analysis engine.

    The configuration is loaded once by the caller (or defaults to the
    bundled tables) and shared by every inference made during the
    analyzer's lifetime.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None,
                 limits: Optional[ResourceLimits] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.config = config or AnalyzerConfig.default()
        self.limits = limits or ResourceLimits()
        self.max_depth = max_depth
        self.inferrer = OptionInferrer(self.config)
        self.behavior_inferrer = BehaviorInferrer(self.limits)

    def analyze(self, binary: Union[str, Path]) -> CliAnalysis:
        """Analyze a binary.

        Raises ``BinaryNotFoundError`` / ``BinaryNotExecutableError`` for a
        bad path and ``InvalidHelpOutputError`` when no help probe prints
        anything. Failures below the top level are logged and skipped.
        """
        start = time.perf_counter()

        binary_path = validate_binary_path(binary)
        logger.info("Analyzing binary: %s", binary_path)

        help_output = fetch_help(binary_path, self.limits)
        version = VersionDetector.detect_version(binary_path, self.limits)
        global_options = self.inferrer.refine(parse_options(help_output))

        detector = SubcommandDetector(self.config, self.limits, self.max_depth)
        subcommands = detector.detect(binary_path, help_output)

        duration_ms = int((time.perf_counter() - start) * 1000)
        analysis = CliAnalysis.build(
            binary_path=binary_path,
            binary_name=binary_path.name,
            help_output=help_output,
            version=version,
            global_options=global_options,
            subcommands=subcommands,
            duration_ms=duration_ms,
        )

        logger.info("Analysis complete: %d options, %d subcommands found in %dms",
                    analysis.metadata.total_options, analysis.metadata.total_subcommands,
                    duration_ms)
        return analysis

    def infer_no_args_behavior(self, analysis: CliAnalysis) -> NoArgsBehavior:
        return self.behavior_inferrer.infer_no_args_behavior(analysis)
