"""Unit tests for configuration loading and validation."""

import json
from pathlib import Path

import pytest

from r_style_lint.config import CONFIG_ENV_VAR, LintConfig, _read_raw, build_config, load_config, resolve_config
from r_style_lint.errors import ConfigError
from r_style_lint.rules import build_rules, select_rules


class TestDefaults:
    def test_default_values(self) -> None:
        config = LintConfig()
        assert config.pipe_complexity_threshold == 3
        assert config.line_length_limit == 80
        assert config.assignment_operator == "<-"
        assert "scale_fill_viridis_d" in config.allowed_palettes
        assert "rainbow" in config.denied_palette_patterns
        assert config.denied_functions["setwd"] == "here::here()"
        assert config.doc_required_tags == {"title", "param", "return", "examples"}
        assert config.disabled_rules == frozenset()

    def test_empty_mapping_gives_defaults(self) -> None:
        assert build_config({}) == LintConfig()


class TestValidation:
    def test_string_threshold_is_rejected(self) -> None:
        with pytest.raises(ConfigError, match="pipe_complexity_threshold: expected .*received '3'"):
            build_config({"pipe_complexity_threshold": "3"})

    def test_zero_threshold_is_rejected(self) -> None:
        with pytest.raises(ConfigError, match="pipe_complexity_threshold: expected .*received 0"):
            build_config({"pipe_complexity_threshold": 0})

    def test_unknown_option_is_rejected(self) -> None:
        with pytest.raises(ConfigError, match="pipe_threshold: expected a recognised option"):
            build_config({"pipe_threshold": 4})

    def test_unknown_doc_tag_is_rejected(self) -> None:
        with pytest.raises(ConfigError, match="doc_required_tags"):
            build_config({"doc_required_tags": ["title", "author"]})

    def test_non_mapping_is_rejected(self) -> None:
        with pytest.raises(ConfigError, match="expected a mapping"):
            build_config(["pipe_complexity_threshold"])  # type: ignore[arg-type]


class TestLoading:
    def test_load_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.toml"
        path.write_text('pipe_complexity_threshold = 5\ndisabled_rules = ["line-length"]\n', encoding="utf-8")

        config = load_config(path)

        assert config.pipe_complexity_threshold == 5
        assert config.disabled_rules == {"line-length"}

    def test_load_pyproject_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "analysis"\n\n[tool.r-style-lint]\nline_length_limit = 100\n', encoding="utf-8"
        )
        assert load_config(path).line_length_limit == 100

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.json"
        path.write_text(json.dumps({"assignment_operator": "=", "allowed_palettes": ["Dark2"]}), encoding="utf-8")

        config = load_config(path)

        assert config.assignment_operator == "="
        assert config.allowed_palettes == {"Dark2"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.toml")

    def test_malformed_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.toml"
        path.write_text("pipe_complexity_threshold = \n", encoding="utf-8")
        with pytest.raises(ConfigError, match="expected valid TOML"):
            load_config(path)

    @pytest.mark.parametrize("name", ["lint.json", "lint.toml"])
    def test_undecodable_file(self, name: str, tmp_path: Path) -> None:
        path = tmp_path / name
        path.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(ConfigError, match="expected UTF-8 text"):
            load_config(path)

    def test_tool_key_that_is_not_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.toml"
        path.write_text('tool = "x"\n', encoding="utf-8")
        with pytest.raises(ConfigError, match="tool: expected a recognised option"):
            load_config(path)

    def test_tool_table_without_section_is_read_as_options(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.ruff]\nline-length = 100\n', encoding="utf-8")
        with pytest.raises(ConfigError, match="tool: expected a recognised option"):
            load_config(path)

    def test_unreadable_file(self, tmp_path: Path) -> None:
        directory = tmp_path / "lint.toml"
        directory.mkdir()
        with pytest.raises(ConfigError, match="expected a readable file"):
            _read_raw(directory)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.yaml"
        path.write_text("pipe_complexity_threshold: 4\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="expected a .toml or .json file"):
            load_config(path)


class TestResolve:
    def test_defaults_without_path_or_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert resolve_config() == LintConfig()

    def test_env_var_is_used(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        path = tmp_path / "lint.toml"
        path.write_text("pipe_complexity_threshold = 7\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert resolve_config().pipe_complexity_threshold == 7

    def test_explicit_path_wins_over_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("line_length_limit = 120\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))

        assert resolve_config(explicit).line_length_limit == 120


class TestSelectRules:
    def test_disabled_rule_is_removed(self) -> None:
        rules = select_rules(build_rules(), {"line-length"})
        ids = [rule.id for rule in rules]
        assert "line-length" not in ids
        assert len(ids) == len(build_rules()) - 1

    def test_unknown_rule_id_is_a_config_error(self) -> None:
        with pytest.raises(ConfigError, match="disabled_rules"):
            select_rules(build_rules(), {"no-such-rule"})
