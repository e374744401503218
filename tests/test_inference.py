"""Tests for cliprobe.inference and the analyzer configuration."""

from __future__ import annotations

import copy

import pytest

from cliprobe.config import (
    ENUM_DEFINITIONS,
    NUMERIC_CONSTRAINTS,
    OPTION_PATTERNS,
    AnalyzerConfig,
)
from cliprobe.errors import ConfigError
from cliprobe.inference import OptionInferrer
from cliprobe.models import CliOption, OptionKind, OptionType


def value_option(long: str) -> CliOption:
    return CliOption(long=long, option_type=OptionType.string())


@pytest.fixture
def inferrer() -> OptionInferrer:
    return OptionInferrer(AnalyzerConfig.default())


class TestInferType:
    """Tests for keyword-based type inference."""

    def test_flags_are_never_reclassified(self, inferrer: OptionInferrer) -> None:
        option = CliOption(long="--port")
        assert inferrer.infer_type(option).kind is OptionKind.FLAG

    @pytest.mark.parametrize("long, kind", [
        ("--port", OptionKind.NUMERIC),
        ("--timeout", OptionKind.NUMERIC),
        ("--connect-timeout", OptionKind.NUMERIC),
        ("--max-size", OptionKind.NUMERIC),
        ("--config", OptionKind.PATH),
        ("--output", OptionKind.PATH),
        ("--format", OptionKind.ENUM),
        ("--output-format", OptionKind.ENUM),
        ("--log-level", OptionKind.ENUM),
        ("--name", OptionKind.STRING),
    ])
    def test_default_rules(self, inferrer: OptionInferrer, long: str, kind: OptionKind) -> None:
        assert inferrer.infer_type(value_option(long)).kind is kind

    def test_short_only_option_uses_short_name(self, inferrer: OptionInferrer) -> None:
        option = CliOption(short="-p", option_type=OptionType.string())
        assert inferrer.infer_type(option).kind is OptionKind.STRING

    def test_matching_is_case_insensitive_by_default(self, inferrer: OptionInferrer) -> None:
        option = CliOption(long="--PORT", option_type=OptionType.string())
        assert inferrer.infer_type(option).kind is OptionKind.NUMERIC


class TestRefine:
    """Tests for numeric bounds and enum values."""

    def test_port_bounds(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--port")])
        assert option.option_type == OptionType.numeric(1, 65535)

    def test_timeout_bounds(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--connect-timeout")])
        assert option.option_type == OptionType.numeric(0, 3600)

    def test_parallelism_bounds(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--jobs")])
        assert option.option_type == OptionType.numeric(1, 1024)

    def test_default_bounds(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--max-size")])
        assert option.option_type == OptionType.numeric(0, 2147483647)

    def test_format_values(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--format")])
        assert option.option_type.kind is OptionKind.ENUM
        assert "json" in option.option_type.values
        assert "yaml" in option.option_type.values

    def test_log_level_values(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--log-level")])
        assert option.option_type.values == ("trace", "debug", "info", "warn", "error", "fatal")

    def test_unmatched_enum_stays_empty(self, inferrer: OptionInferrer) -> None:
        [option] = inferrer.refine([value_option("--mode")])
        assert option.option_type == OptionType.enum()

    def test_refine_returns_new_values(self, inferrer: OptionInferrer) -> None:
        before = value_option("--port")
        refined = inferrer.refine([before])
        assert before.option_type.kind is OptionKind.STRING
        assert refined[0] is not before
        assert refined[0].long == "--port"

    def test_order_is_preserved(self, inferrer: OptionInferrer) -> None:
        options = [CliOption(short="-h", long="--help"), value_option("--port"),
                   value_option("--config")]
        assert [o.long for o in inferrer.refine(options)] == ["--help", "--port", "--config"]


class TestMatchSettings:
    """Tests for configurable matching behavior."""

    def _config(self, **settings) -> AnalyzerConfig:
        patterns = copy.deepcopy(OPTION_PATTERNS)
        patterns["settings"].update(settings)
        return AnalyzerConfig.from_tables(patterns, NUMERIC_CONSTRAINTS, ENUM_DEFINITIONS)

    def test_short_keywords_still_match_whole_name(self) -> None:
        inferrer = OptionInferrer(self._config(min_keyword_length=5))
        assert inferrer.infer_type(value_option("--port")).kind is OptionKind.NUMERIC
        assert inferrer.infer_type(value_option("--server-port")).kind is OptionKind.STRING

    def test_partial_match_disabled(self) -> None:
        inferrer = OptionInferrer(self._config(partial_match=False))
        assert inferrer.infer_type(value_option("--timeout")).kind is OptionKind.NUMERIC
        assert inferrer.infer_type(value_option("--connect-timeout")).kind is OptionKind.STRING

    def test_case_sensitive(self) -> None:
        inferrer = OptionInferrer(self._config(case_sensitive=True))
        assert inferrer.infer_type(value_option("--PORT")).kind is OptionKind.STRING

    def test_boolean_rule_yields_flag(self) -> None:
        patterns = copy.deepcopy(OPTION_PATTERNS)
        patterns["patterns"].append({"type": "boolean", "priority": 95, "keywords": ["enable"]})
        config = AnalyzerConfig.from_tables(patterns, NUMERIC_CONSTRAINTS, ENUM_DEFINITIONS)
        option = value_option("--enable-cache")
        assert OptionInferrer(config).infer_type(option).kind is OptionKind.FLAG


class TestAnalyzerConfig:
    """Tests for building the configuration object."""

    def test_patterns_sorted_by_priority(self) -> None:
        priorities = [rule.priority for rule in AnalyzerConfig.default().patterns]
        assert priorities == sorted(priorities, reverse=True)

    def test_higher_priority_rule_wins(self) -> None:
        patterns = copy.deepcopy(OPTION_PATTERNS)
        for rule in patterns["patterns"]:
            if rule["type"] == "path":
                rule["priority"] = 100
        config = AnalyzerConfig.from_tables(patterns, NUMERIC_CONSTRAINTS, ENUM_DEFINITIONS)
        assert config.patterns[0].type == "path"
        # "output-format" matches both the enum and the path rule
        option = value_option("--output-format")
        assert OptionInferrer(config).infer_type(option).kind is OptionKind.PATH

    def test_default_numeric_bounds(self) -> None:
        assert AnalyzerConfig.default().default_numeric == (0, 2147483647)

    def test_missing_key_raises_config_error(self) -> None:
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_tables({}, NUMERIC_CONSTRAINTS, ENUM_DEFINITIONS)

    def test_inverted_bounds_raise_config_error(self) -> None:
        numeric = copy.deepcopy(NUMERIC_CONSTRAINTS)
        numeric["constraints"]["port"]["min"] = 70000
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_tables(OPTION_PATTERNS, numeric, ENUM_DEFINITIONS)

    def test_from_directory_overrides_one_table(self, tmp_path) -> None:
        (tmp_path / "numeric-constraints.yaml").write_text(
            "constraints:\n"
            "  port:\n"
            "    aliases: [port]\n"
            "    min: 1024\n"
            "    max: 49151\n"
            "default_constraints:\n"
            "  min: 0\n"
            "  max: 100\n"
        )
        config = AnalyzerConfig.from_directory(tmp_path)
        inferrer = OptionInferrer(config)
        [port, size] = inferrer.refine([value_option("--port"), value_option("--max-size")])
        assert port.option_type == OptionType.numeric(1024, 49151)
        assert size.option_type == OptionType.numeric(0, 100)
        assert config.patterns == AnalyzerConfig.default().patterns

    def test_from_directory_missing(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_directory(tmp_path / "nope")

    def test_from_directory_rejects_non_mapping(self, tmp_path) -> None:
        (tmp_path / "enum-definitions.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_directory(tmp_path)

    def test_from_directory_rejects_invalid_yaml(self, tmp_path) -> None:
        (tmp_path / "option-patterns.yaml").write_text("patterns: [unclosed\n")
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_directory(tmp_path)
