import json
import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from r_style_lint.errors import ConfigError

CONFIG_ENV_VAR = "R_STYLE_LINT_CONFIG"
_PYPROJECT_TABLE = "r-style-lint"

DocTag = Literal["title", "param", "return", "examples"]

_VIRIDIS_AESTHETICS = ("colour", "color", "fill")
# ggplot2 ships scale_*_viridis_{d,c,b}; the viridis package ships scale_*_viridis
_VIRIDIS_SCALES = frozenset(
    f"scale_{aesthetic}_viridis_{kind}" for aesthetic in _VIRIDIS_AESTHETICS for kind in ("d", "c", "b")
) | frozenset(f"scale_{aesthetic}_viridis" for aesthetic in _VIRIDIS_AESTHETICS)


class LintConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    pipe_complexity_threshold: StrictInt = Field(default=3, ge=1)
    allowed_palettes: frozenset[str] = _VIRIDIS_SCALES | {"Set2"}
    denied_palette_patterns: frozenset[str] = frozenset(
        {"rainbow", "heat.colors", "terrain.colors", "topo.colors", "jet.colors"}
    )
    denied_functions: dict[str, str] = Field(
        default_factory=lambda: {
            "setwd": "here::here()",
            "attach": "explicit data arguments or with()",
            "require": "library()",
            "sapply": "vapply() or purrr::map_*()",
            "rm": "a fresh R session",
        }
    )
    line_length_limit: StrictInt = Field(default=80, ge=1)
    doc_required_tags: frozenset[DocTag] = frozenset({"title", "param", "return", "examples"})
    assignment_operator: Literal["<-", "="] = "<-"
    path_builders: frozenset[str] = frozenset({"here", "file.path", "path", "system.file"})
    disabled_rules: frozenset[str] = frozenset()


def _expectation(message: str) -> str:
    for prefix in ("Input should be ", "Value error, "):
        if message.startswith(prefix):
            return message[len(prefix) :]
    return message[:1].lower() + message[1:]


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        option = ".".join(str(part) for part in err["loc"]) or "config"
        if err["type"] == "extra_forbidden":
            problems.append(f"{option}: expected a recognised option, received {err['input']!r}")
        else:
            problems.append(f"{option}: expected {_expectation(err['msg'])}, received {err['input']!r}")
    return "; ".join(problems)


def build_config(raw: dict[str, Any]) -> LintConfig:
    """Validate a raw option mapping.

    Raises ConfigError naming the offending option with the expected and
    received values.
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"config: expected a mapping of options, received {raw!r}")
    try:
        return LintConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from None


def _read_raw(config_path: Path) -> dict[str, Any]:
    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            with config_path.open("rb") as handle:
                raw = tomllib.load(handle)
            tool = raw.get("tool")
            if isinstance(tool, dict) and _PYPROJECT_TABLE in tool:
                return tool[_PYPROJECT_TABLE]
            return raw
        if suffix == ".json":
            with config_path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(
            f"{config_path}: expected valid {suffix[1:].upper()}, received malformed file ({exc})"
        ) from None
    except UnicodeDecodeError:
        raise ConfigError(f"{config_path}: expected UTF-8 text, received undecodable bytes") from None
    except OSError as exc:
        raise ConfigError(f"{config_path}: expected a readable file, received {exc.strerror or exc}") from None
    raise ConfigError(f"{config_path}: expected a .toml or .json file, received {suffix or 'no extension'!r}")


def load_config(path: str | Path) -> LintConfig:
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    return build_config(_read_raw(config_path))


def resolve_config(path: str | Path | None = None) -> LintConfig:
    """Load the config from *path*, the environment, or fall back to defaults."""
    chosen = path or os.getenv(CONFIG_ENV_VAR)
    if not chosen:
        return LintConfig()
    return load_config(chosen)
