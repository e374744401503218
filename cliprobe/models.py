#!/usr/bin/env python3
"""
Data models for CLI analysis results.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple


class OptionKind(str, Enum):
    """Semantic kind of a CLI option"""
    FLAG = "Flag"
    STRING = "String"
    NUMERIC = "Numeric"
    PATH = "Path"
    ENUM = "Enum"


@dataclass(frozen=True)
class OptionType:
    """Option type with the bounds or allowed values its kind carries.

    ``Numeric`` types hold either both bounds or neither; ``Enum`` types hold
    a (possibly empty) tuple of allowed values. Other kinds carry nothing.
    """
    kind: OptionKind
    min: Optional[int] = None
    max: Optional[int] = None
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        if (self.min is None) != (self.max is None):
            raise ValueError("numeric bounds must be set together")
        if self.kind is not OptionKind.NUMERIC and self.min is not None:
            raise ValueError(f"{self.kind.value} options carry no bounds")
        if self.kind is not OptionKind.ENUM and self.values:
            raise ValueError(f"{self.kind.value} options carry no values")

    @classmethod
    def flag(cls) -> "OptionType":
        return cls(OptionKind.FLAG)

    @classmethod
    def string(cls) -> "OptionType":
        return cls(OptionKind.STRING)

    @classmethod
    def path(cls) -> "OptionType":
        return cls(OptionKind.PATH)

    @classmethod
    def numeric(cls, min: Optional[int] = None, max: Optional[int] = None) -> "OptionType":
        return cls(OptionKind.NUMERIC, min=min, max=max)

    @classmethod
    def enum(cls, values: Sequence[str] = ()) -> "OptionType":
        return cls(OptionKind.ENUM, values=tuple(values))

    def to_json(self) -> Any:
        if self.kind is OptionKind.NUMERIC:
            return {"Numeric": {"min": self.min, "max": self.max}}
        if self.kind is OptionKind.ENUM:
            return {"Enum": {"values": list(self.values)}}
        return self.kind.value

    @classmethod
    def from_json(cls, data: Any) -> "OptionType":
        if isinstance(data, str):
            return cls(OptionKind(data))
        if isinstance(data, dict) and len(data) == 1:
            (tag, body), = data.items()
            body = body or {}
            if tag == "Numeric":
                return cls.numeric(body.get("min"), body.get("max"))
            if tag == "Enum":
                return cls.enum(body.get("values") or ())
        raise ValueError(f"unknown option type: {data!r}")


@dataclass(frozen=True)
class CliOption:
    """A single option as parsed from help text"""
    short: Optional[str] = None
    long: Optional[str] = None
    description: Optional[str] = None
    option_type: OptionType = field(default_factory=OptionType.flag)
    required: bool = False
    default_value: Optional[str] = None

    @property
    def canonical_name(self) -> str:
        """Option name without leading dashes, long form preferred"""
        flag = self.long or self.short or ""
        return flag.lstrip("-")

    def to_json(self) -> Dict[str, Any]:
        return {
            "short": self.short,
            "long": self.long,
            "description": self.description,
            "option_type": self.option_type.to_json(),
            "required": self.required,
            "default_value": self.default_value,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CliOption":
        return cls(
            short=data.get("short"),
            long=data.get("long"),
            description=data.get("description"),
            option_type=OptionType.from_json(data.get("option_type", "Flag")),
            required=bool(data.get("required", False)),
            default_value=data.get("default_value"),
        )


@dataclass(frozen=True)
class Subcommand:
    """A discovered subcommand and everything nested below it"""
    name: str
    description: Optional[str] = None
    options: Tuple[CliOption, ...] = ()
    required_args: Tuple[str, ...] = ()
    subcommands: Tuple["Subcommand", ...] = ()
    depth: int = 0

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "options": [o.to_json() for o in self.options],
            "required_args": list(self.required_args),
            "subcommands": [s.to_json() for s in self.subcommands],
            "depth": self.depth,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Subcommand":
        return cls(
            name=data["name"],
            description=data.get("description"),
            options=tuple(CliOption.from_json(o) for o in data.get("options", [])),
            required_args=tuple(data.get("required_args", [])),
            subcommands=tuple(cls.from_json(s) for s in data.get("subcommands", [])),
            depth=int(data.get("depth", 0)),
        )


@dataclass(frozen=True)
class AnalysisMetadata:
    """Bookkeeping attached to every analysis"""
    analyzed_at: str
    analyzer_version: str
    total_subcommands: int = 0
    total_options: int = 0
    analysis_duration_ms: int = 0


@dataclass(frozen=True)
class CliAnalysis:
    """Result of analyzing one binary"""
    binary_path: Path
    binary_name: str
    help_output: str
    version: Optional[str] = None
    global_options: Tuple[CliOption, ...] = ()
    subcommands: Tuple[Subcommand, ...] = ()
    metadata: Optional[AnalysisMetadata] = None

    @classmethod
    def build(cls, binary_path: Path, binary_name: str, help_output: str,
              version: Optional[str] = None,
              global_options: Sequence[CliOption] = (),
              subcommands: Sequence[Subcommand] = (),
              duration_ms: int = 0) -> "CliAnalysis":
        """Assemble an analysis, computing its metadata from the tree"""
        from . import __version__

        global_options = tuple(global_options)
        subcommands = tuple(subcommands)
        metadata = AnalysisMetadata(
            analyzed_at=datetime.now(timezone.utc).isoformat(),
            analyzer_version=__version__,
            total_subcommands=count_subcommands(subcommands),
            total_options=len(global_options) + count_options(subcommands),
            analysis_duration_ms=duration_ms,
        )
        return cls(
            binary_path=Path(binary_path),
            binary_name=binary_name,
            help_output=help_output,
            version=version,
            global_options=global_options,
            subcommands=subcommands,
            metadata=metadata,
        )

    def to_json(self) -> Dict[str, Any]:
        metadata = self.metadata
        return {
            "binary_path": str(self.binary_path),
            "binary_name": self.binary_name,
            "version": self.version,
            "help_output": self.help_output,
            "subcommands": [s.to_json() for s in self.subcommands],
            "global_options": [o.to_json() for o in self.global_options],
            "metadata": asdict(metadata) if metadata else None,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CliAnalysis":
        metadata = data.get("metadata")
        return cls(
            binary_path=Path(data["binary_path"]),
            binary_name=data["binary_name"],
            help_output=data["help_output"],
            version=data.get("version"),
            global_options=tuple(CliOption.from_json(o) for o in data.get("global_options", [])),
            subcommands=tuple(Subcommand.from_json(s) for s in data.get("subcommands", [])),
            metadata=AnalysisMetadata(**metadata) if metadata else None,
        )


def count_subcommands(subcommands: Sequence[Subcommand]) -> int:
    return len(subcommands) + sum(count_subcommands(s.subcommands) for s in subcommands)


def count_options(subcommands: Sequence[Subcommand]) -> int:
    return sum(len(s.options) + count_options(s.subcommands) for s in subcommands)


def walk_subcommands(subcommands: Sequence[Subcommand]):
    """Yield every subcommand in the tree, depth-first"""
    for sub in subcommands:
        yield sub
        yield from walk_subcommands(sub.subcommands)


class NoArgsBehavior(str, Enum):
    """What a CLI does when invoked with no arguments"""
    SHOW_HELP = "show_help"
    REQUIRE_SUBCOMMAND = "require_subcommand"
    INTERACTIVE = "interactive"

    @property
    def expected_exit_code(self) -> Optional[int]:
        """Exit code a test should expect; None means any non-zero code"""
        if self is NoArgsBehavior.REQUIRE_SUBCOMMAND:
            return None
        return 0

    @property
    def expected_output_pattern(self) -> Optional[str]:
        return {
            NoArgsBehavior.SHOW_HELP: "Usage:",
            NoArgsBehavior.REQUIRE_SUBCOMMAND: "error",
        }.get(self)

    @property
    def display_name(self) -> str:
        return {
            NoArgsBehavior.SHOW_HELP: "Show Help",
            NoArgsBehavior.REQUIRE_SUBCOMMAND: "Require Subcommand",
            NoArgsBehavior.INTERACTIVE: "Interactive Mode",
        }[self]

    @property
    def description(self) -> str:
        return {
            NoArgsBehavior.SHOW_HELP:
                "Displays help text and exits successfully when invoked without arguments",
            NoArgsBehavior.REQUIRE_SUBCOMMAND:
                "Requires a subcommand and exits with error when invoked without arguments",
            NoArgsBehavior.INTERACTIVE:
                "Enters interactive mode (REPL) when invoked without arguments",
        }[self]


@dataclass(frozen=True)
class ResourceLimits:
    """Ceilings applied to every probe process"""
    max_memory_bytes: int = 500 * 1024 * 1024
    max_file_descriptors: int = 1024
    max_processes: int = 100
    execution_timeout: float = 300.0

    def with_timeout(self, timeout: float) -> "ResourceLimits":
        return replace(self, execution_timeout=timeout)
