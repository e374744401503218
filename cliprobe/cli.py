#!/usr/bin/env python3
"""
Command line interface for cliprobe.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .analyzer import CLIAnalyzer
from .config import DEFAULT_MAX_DEPTH, AnalyzerConfig
from .errors import AnalyzerError
from .models import ResourceLimits
from .store import write_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliprobe",
        description="Probe a command-line binary and print its structure as JSON",
    )
    parser.add_argument("binary", help="Path to the executable to analyze")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help="Subcommand recursion depth (default: %(default)s)")
    parser.add_argument("--timeout", type=float, default=ResourceLimits.execution_timeout,
                        help="Per-probe timeout in seconds (default: %(default)s)")
    parser.add_argument("--config-dir",
                        help="Directory holding option-patterns.yaml, numeric-constraints.yaml "
                             "and enum-definitions.yaml")
    parser.add_argument("-o", "--output", help="Write the analysis JSON to this file")
    parser.add_argument("--no-args-behavior", action="store_true",
                        help="Also classify what the binary does when run without arguments")
    parser.add_argument("--debug", action="store_true", help="Show debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main command line interface"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = AnalyzerConfig.from_directory(args.config_dir) if args.config_dir \
            else AnalyzerConfig.default()
        limits = ResourceLimits().with_timeout(args.timeout)
        analyzer = CLIAnalyzer(config=config, limits=limits, max_depth=args.max_depth)

        analysis = analyzer.analyze(args.binary)
        if args.no_args_behavior:
            behavior = analyzer.infer_no_args_behavior(analysis)
            payload = dict(analysis.to_json(), no_args_behavior=behavior.value)
        else:
            payload = analysis.to_json()

        if args.output:
            write_json(payload, args.output)
        else:
            print(json.dumps(payload, indent=2))
    except AnalyzerError as e:
        logger.debug("Analysis failed: %s", e)
        print(f"Error: {e.category}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.debug("Output failed: %s", e)
        print("Error: cannot write output", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
