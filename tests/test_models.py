"""Tests for cliprobe.models."""

from __future__ import annotations

from pathlib import Path

import pytest

from cliprobe import __version__
from cliprobe.models import (
    CliAnalysis,
    CliOption,
    NoArgsBehavior,
    OptionKind,
    OptionType,
    ResourceLimits,
    Subcommand,
    count_options,
    count_subcommands,
)


class TestOptionType:
    """Tests for the OptionType sum type."""

    def test_numeric_bounds_must_be_set_together(self) -> None:
        with pytest.raises(ValueError):
            OptionType.numeric(min=1)
        with pytest.raises(ValueError):
            OptionType(OptionKind.NUMERIC, max=5)

    def test_numeric_without_bounds_is_allowed(self) -> None:
        option_type = OptionType.numeric()
        assert option_type.min is None and option_type.max is None

    def test_flag_rejects_values(self) -> None:
        with pytest.raises(ValueError):
            OptionType(OptionKind.FLAG, values=("a",))

    def test_json_shape(self) -> None:
        assert OptionType.flag().to_json() == "Flag"
        assert OptionType.path().to_json() == "Path"
        assert OptionType.numeric(1, 65535).to_json() == {"Numeric": {"min": 1, "max": 65535}}
        assert OptionType.enum(["json"]).to_json() == {"Enum": {"values": ["json"]}}

    def test_from_json_rejects_unknown_tag(self) -> None:
        with pytest.raises(ValueError):
            OptionType.from_json({"Bogus": {}})


class TestCliOption:
    """Tests for CliOption."""

    def test_canonical_name_prefers_long(self) -> None:
        assert CliOption(short="-t", long="--timeout").canonical_name == "timeout"

    def test_canonical_name_falls_back_to_short(self) -> None:
        assert CliOption(short="-p").canonical_name == "p"

    def test_defaults(self) -> None:
        option = CliOption(long="--verbose")
        assert option.option_type.kind is OptionKind.FLAG
        assert option.required is False
        assert option.default_value is None


class TestCliAnalysis:
    """Tests for CliAnalysis construction and metadata."""

    def _tree(self):
        leaf = Subcommand(name="add", options=(CliOption(long="--force"),), depth=1)
        remote = Subcommand(name="remote", options=(CliOption(long="--verbose"),),
                            subcommands=(leaf,), depth=0)
        status = Subcommand(name="status", depth=0)
        return (remote, status)

    def test_counts_are_recursive(self) -> None:
        tree = self._tree()
        assert count_subcommands(tree) == 3
        assert count_options(tree) == 2

    def test_build_computes_metadata(self) -> None:
        analysis = CliAnalysis.build(
            binary_path=Path("/usr/bin/tool"),
            binary_name="tool",
            help_output="Usage: tool",
            global_options=[CliOption(short="-h", long="--help")],
            subcommands=self._tree(),
            duration_ms=12,
        )
        assert analysis.metadata.total_subcommands == 3
        assert analysis.metadata.total_options == 3
        assert analysis.metadata.analysis_duration_ms == 12
        assert analysis.metadata.analyzer_version == __version__
        assert "T" in analysis.metadata.analyzed_at

    def test_json_round_trip(self) -> None:
        analysis = CliAnalysis.build(
            binary_path=Path("/usr/bin/tool"),
            binary_name="tool",
            help_output="Usage: tool <FILE>",
            version="1.2.3",
            global_options=[CliOption(long="--port", option_type=OptionType.numeric(1, 65535))],
            subcommands=self._tree(),
        )
        data = analysis.to_json()
        assert data["binary_path"] == "/usr/bin/tool"
        assert data["global_options"][0]["option_type"] == {"Numeric": {"min": 1, "max": 65535}}
        assert CliAnalysis.from_json(data) == analysis

    def test_is_frozen(self) -> None:
        analysis = CliAnalysis.build(Path("/bin/x"), "x", "help")
        with pytest.raises(AttributeError):
            analysis.version = "2.0"  # type: ignore[misc]


class TestNoArgsBehavior:
    """Tests for NoArgsBehavior helpers."""

    def test_values_are_snake_case(self) -> None:
        assert {b.value for b in NoArgsBehavior} == {
            "show_help", "require_subcommand", "interactive",
        }

    def test_expected_exit_codes(self) -> None:
        assert NoArgsBehavior.SHOW_HELP.expected_exit_code == 0
        assert NoArgsBehavior.REQUIRE_SUBCOMMAND.expected_exit_code is None
        assert NoArgsBehavior.INTERACTIVE.expected_exit_code == 0

    def test_expected_output_pattern(self) -> None:
        assert NoArgsBehavior.SHOW_HELP.expected_output_pattern == "Usage:"
        assert NoArgsBehavior.INTERACTIVE.expected_output_pattern is None

    def test_display_name(self) -> None:
        assert NoArgsBehavior.INTERACTIVE.display_name == "Interactive Mode"


class TestResourceLimits:
    """Tests for ResourceLimits defaults."""

    def test_defaults(self) -> None:
        limits = ResourceLimits()
        assert limits.max_memory_bytes == 500 * 1024 * 1024
        assert limits.max_file_descriptors == 1024
        assert limits.max_processes == 100
        assert limits.execution_timeout == 300.0

    def test_with_timeout_returns_new_value(self) -> None:
        limits = ResourceLimits()
        shorter = limits.with_timeout(1.0)
        assert shorter.execution_timeout == 1.0
        assert limits.execution_timeout == 300.0
