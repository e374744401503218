#!/usr/bin/env python3
"""
Option type inference from option names.

Options that take a value are classified by keyword rules (highest priority
first), then numeric options receive bounds and enum options receive their
allowed values from alias tables.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from .config import AnalyzerConfig, PatternRule
from .models import CliOption, OptionKind, OptionType

logger = logging.getLogger(__name__)


def _pattern_type(name: str) -> OptionType:
    if name == "numeric":
        return OptionType.numeric()
    if name == "path":
        return OptionType.path()
    if name == "enum":
        return OptionType.enum()
    if name == "boolean":
        return OptionType.flag()
    return OptionType.string()


class OptionInferrer:
    """Infers option types from names and configured keyword rules"""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig.default()

    def infer_type(self, option: CliOption) -> OptionType:
        """Type for a single option; flags never change"""
        if option.option_type.kind is OptionKind.FLAG:
            return option.option_type

        name = option.canonical_name
        for rule in self.config.patterns:
            if self._matches(name, rule):
                logger.debug("Inferred %s for '%s' (priority %d)", rule.type, name, rule.priority)
                return _pattern_type(rule.type)

        logger.debug("No pattern matched '%s', using %s", name, self.config.default_type)
        return _pattern_type(self.config.default_type)

    def _matches(self, name: str, rule: PatternRule) -> bool:
        settings = self.config.settings
        if not settings.case_sensitive:
            name = name.lower()

        for keyword in rule.keywords:
            if not settings.case_sensitive:
                keyword = keyword.lower()
            if name == keyword:
                return True
            # Short keywords only ever match the whole name
            if (settings.partial_match
                    and len(keyword) >= settings.min_keyword_length
                    and keyword in name):
                return True
        return False

    def infer_types(self, options: Sequence[CliOption]) -> List[CliOption]:
        return [replace(o, option_type=self.infer_type(o)) for o in options]

    def apply_numeric_constraints(self, options: Sequence[CliOption]) -> List[CliOption]:
        """Set bounds on numeric options from the alias table, or the default bounds"""
        result = []
        for option in options:
            if option.option_type.kind is OptionKind.NUMERIC:
                name = option.canonical_name.lower()
                low, high = self.config.default_numeric
                for constraint in self.config.numeric_constraints:
                    if any(alias.lower() in name for alias in constraint.aliases):
                        low, high = constraint.min, constraint.max
                        break
                option = replace(option, option_type=OptionType.numeric(low, high))
            result.append(option)
        return result

    def apply_enum_values(self, options: Sequence[CliOption]) -> List[CliOption]:
        """Fill allowed values of enum options; unmatched options keep an empty list"""
        result = []
        for option in options:
            if option.option_type.kind is OptionKind.ENUM:
                name = option.canonical_name.lower()
                for definition in self.config.enum_definitions:
                    if any(alias.lower() in name for alias in definition.aliases):
                        option = replace(option, option_type=OptionType.enum(definition.values))
                        break
            result.append(option)
        return result

    def refine(self, options: Sequence[CliOption]) -> List[CliOption]:
        """Infer types, then attach numeric bounds and enum values"""
        options = self.infer_types(options)
        options = self.apply_numeric_constraints(options)
        return self.apply_enum_values(options)
