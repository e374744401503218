#!/usr/bin/env python3
"""
Configuration constants, built-in inference tables and the analyzer
configuration object.

The three tables mirror the layout of ``option-patterns.yaml``,
``numeric-constraints.yaml`` and ``enum-definitions.yaml`` so that a
directory of YAML files can replace any of them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ConfigError
from .safeload import load_yaml_safe

# Tools that start a REPL or session when run without arguments; never probed
INTERACTIVE_TOOLS = (
    # Database clients
    'psql', 'mysql', 'redis-cli', 'mongo', 'mongosh', 'sqlite3',
    # Language REPLs
    'python', 'python3', 'node', 'irb', 'php', 'R', 'julia',
    # Debuggers and other shells
    'gdb', 'lldb', 'ghci', 'erl', 'iex',
)

# Headers that open a subcommand listing, compared case-insensitively
SUBCOMMAND_HEADERS = (
    'Commands:',
    'Available Commands:',
    'Subcommands:',
    'Available subcommands:',
)

DEFAULT_MAX_DEPTH = 3
NO_ARGS_PROBE_TIMEOUT = 1.0

OPTION_PATTERNS_FILE = 'option-patterns.yaml'
NUMERIC_CONSTRAINTS_FILE = 'numeric-constraints.yaml'
ENUM_DEFINITIONS_FILE = 'enum-definitions.yaml'

OPTION_PATTERNS = {
    'patterns': [
        {
            'type': 'enum',
            'priority': 90,
            'keywords': ['format', 'log-level', 'loglevel', 'verbosity', 'color', 'colour',
                         'protocol', 'shell', 'encoding', 'mode'],
            'description': 'Options choosing from a fixed set of values',
        },
        {
            'type': 'numeric',
            'priority': 80,
            'keywords': ['port', 'timeout', 'duration', 'interval', 'delay', 'seconds',
                         'count', 'limit', 'max-', 'min-', 'maximum', 'minimum', 'size',
                         'number', 'retries', 'retry', 'attempts', 'depth', 'threads',
                         'jobs', 'workers', 'percent', 'ratio', 'width', 'height', 'lines'],
            'description': 'Options taking an integer',
        },
        {
            'type': 'path',
            'priority': 70,
            'keywords': ['file', 'path', 'dir', 'directory', 'config', 'input', 'output',
                         'cert', 'keyfile', 'cache', 'root', 'workspace'],
            'description': 'Options taking a filesystem path',
        },
    ],
    'default_type': 'string',
    'settings': {
        'case_sensitive': False,
        'partial_match': True,
        'min_keyword_length': 3,
    },
}

NUMERIC_CONSTRAINTS = {
    'constraints': {
        'timeout': {
            'aliases': ['timeout', 'duration', 'interval', 'delay', 'seconds'],
            'min': 0,
            'max': 3600,
            'type': 'integer',
            'unit': 'seconds',
            'description': 'Time spans in seconds',
        },
        'percentage': {
            'aliases': ['percent', 'ratio'],
            'min': 0,
            'max': 100,
            'type': 'integer',
            'unit': 'percent',
            'description': 'Percentages and ratios',
        },
        'port': {
            'aliases': ['port'],
            'min': 1,
            'max': 65535,
            'type': 'integer',
            'description': 'TCP/UDP port numbers',
        },
        'retries': {
            'aliases': ['retries', 'retry', 'attempts'],
            'min': 0,
            'max': 100,
            'type': 'integer',
            'description': 'Retry counts',
        },
        'parallelism': {
            'aliases': ['threads', 'jobs', 'workers'],
            'min': 1,
            'max': 1024,
            'type': 'integer',
            'description': 'Worker and thread counts',
        },
    },
    'default_constraints': {
        'min': 0,
        'max': 2147483647,
        'type': 'integer',
    },
}

ENUM_DEFINITIONS = {
    'enums': {
        'log_level': {
            'aliases': ['log-level', 'loglevel', 'verbosity'],
            'values': ['trace', 'debug', 'info', 'warn', 'error', 'fatal'],
            'case_sensitive': False,
            'description': 'Logging levels',
        },
        'format': {
            'aliases': ['format', 'output'],
            'values': ['json', 'yaml', 'xml', 'toml', 'csv', 'text'],
            'case_sensitive': False,
            'description': 'Output formats',
        },
        'color': {
            'aliases': ['color', 'colour'],
            'values': ['auto', 'always', 'never'],
            'case_sensitive': False,
            'description': 'Color modes',
        },
        'protocol': {
            'aliases': ['protocol'],
            'values': ['http', 'https', 'ftp', 'ssh'],
            'case_sensitive': False,
            'description': 'Network protocols',
        },
        'shell': {
            'aliases': ['shell'],
            'values': ['bash', 'zsh', 'fish', 'powershell', 'elvish'],
            'case_sensitive': False,
            'description': 'Shells for completion scripts',
        },
        'encoding': {
            'aliases': ['encoding'],
            'values': ['utf-8', 'ascii', 'latin-1'],
            'case_sensitive': False,
            'description': 'Text encodings',
        },
    },
    'default_enum': {
        'case_sensitive': False,
        'allow_partial_match': True,
    },
}


@dataclass(frozen=True)
class PatternRule:
    type: str
    priority: int
    keywords: Tuple[str, ...]
    description: str = ''


@dataclass(frozen=True)
class MatchSettings:
    case_sensitive: bool = False
    partial_match: bool = True
    min_keyword_length: int = 3


@dataclass(frozen=True)
class NumericConstraint:
    name: str
    aliases: Tuple[str, ...]
    min: int
    max: int
    unit: Optional[str] = None


@dataclass(frozen=True)
class EnumDefinition:
    name: str
    aliases: Tuple[str, ...]
    values: Tuple[str, ...]


@dataclass(frozen=True)
class AnalyzerConfig:
    """Immutable inference tables, loaded once and shared by reference.

    ``patterns`` is kept sorted by descending priority so each lookup is a
    linear scan. Ties keep table order.
    """
    patterns: Tuple[PatternRule, ...]
    settings: MatchSettings
    default_type: str
    numeric_constraints: Tuple[NumericConstraint, ...]
    default_numeric: Tuple[int, int]
    enum_definitions: Tuple[EnumDefinition, ...]

    @classmethod
    def default(cls) -> 'AnalyzerConfig':
        """Configuration built from the bundled tables"""
        return cls.from_tables(OPTION_PATTERNS, NUMERIC_CONSTRAINTS, ENUM_DEFINITIONS)

    @classmethod
    def from_tables(cls, patterns: Mapping[str, Any], numeric: Mapping[str, Any],
                    enums: Mapping[str, Any]) -> 'AnalyzerConfig':
        """Build from already-parsed tables"""
        try:
            rules = [_pattern_rule(p) for p in _as_list(patterns, 'patterns')]
            settings = MatchSettings(**dict(patterns.get('settings') or {}))
            default_type = str(patterns.get('default_type', 'string'))
            constraints = [_numeric_constraint(name, body)
                           for name, body in _as_dict(numeric, 'constraints').items()]
            defaults = _as_dict(numeric, 'default_constraints')
            default_numeric = (int(defaults['min']), int(defaults['max']))
            definitions = [_enum_definition(name, body)
                           for name, body in _as_dict(enums, 'enums').items()]
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f'Malformed configuration table: {exc}') from exc

        if default_numeric[0] > default_numeric[1]:
            raise ConfigError('default_constraints: min is greater than max')
        if settings.min_keyword_length < 0:
            raise ConfigError('settings: min_keyword_length must not be negative')

        rules.sort(key=lambda rule: rule.priority, reverse=True)
        return cls(
            patterns=tuple(rules),
            settings=settings,
            default_type=default_type,
            numeric_constraints=tuple(constraints),
            default_numeric=default_numeric,
            enum_definitions=tuple(definitions),
        )

    @classmethod
    def from_directory(cls, config_dir: Union[str, Path]) -> 'AnalyzerConfig':
        """Load YAML tables from a directory, using bundled tables for missing files"""
        config_dir = Path(config_dir)
        if not config_dir.is_dir():
            raise ConfigError(f'Configuration directory not found: {config_dir}')
        return cls.from_tables(
            _read_table(config_dir / OPTION_PATTERNS_FILE, OPTION_PATTERNS),
            _read_table(config_dir / NUMERIC_CONSTRAINTS_FILE, NUMERIC_CONSTRAINTS),
            _read_table(config_dir / ENUM_DEFINITIONS_FILE, ENUM_DEFINITIONS),
        )


def _read_table(path: Path, fallback: Mapping[str, Any]) -> Mapping[str, Any]:
    if not path.exists():
        return fallback
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f'Cannot read {path.name}: {exc}') from exc
    table = load_yaml_safe(text)
    if not isinstance(table, dict):
        raise ConfigError(f'{path.name}: top level must be a mapping')
    return table


def _as_list(table: Mapping[str, Any], key: str) -> List[Any]:
    value = table[key]
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list")
    return value


def _as_dict(table: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = table[key]
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be a mapping")
    return value


def _strings(values: Any, key: str) -> Tuple[str, ...]:
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise TypeError(f"'{key}' must be a list of strings")
    return tuple(values)


def _pattern_rule(entry: Mapping[str, Any]) -> PatternRule:
    return PatternRule(
        type=str(entry['type']),
        priority=int(entry['priority']),
        keywords=_strings(entry['keywords'], 'keywords'),
        description=str(entry.get('description', '')),
    )


def _numeric_constraint(name: str, body: Mapping[str, Any]) -> NumericConstraint:
    low, high = int(body['min']), int(body['max'])
    if low > high:
        raise ValueError(f"constraint '{name}': min is greater than max")
    return NumericConstraint(
        name=name,
        aliases=_strings(body['aliases'], 'aliases'),
        min=low,
        max=high,
        unit=body.get('unit'),
    )


def _enum_definition(name: str, body: Mapping[str, Any]) -> EnumDefinition:
    return EnumDefinition(
        name=name,
        aliases=_strings(body['aliases'], 'aliases'),
        values=_strings(body['values'], 'values'),
    )
