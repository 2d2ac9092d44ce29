"""Configuration loading and validation.

rsoutline reads an optional ``rsoutline.yaml`` from the working directory (or
one of its parents). Every value has a default, so running without a config
file is the normal case. Precedence, highest first:

1. CLI flags
2. RSOUTLINE_* environment variables
3. rsoutline.yaml
4. Dataclass defaults
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from rsoutline.errors import ConfigError
from rsoutline.utils import PathLike, normalize_path, parse_bool

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "rsoutline.yaml"

# A directory holding one of these is treated as the project root when
# searching upwards for the config file.
PROJECT_MARKERS: tuple[str, ...] = ("Cargo.toml", "pyproject.toml")


class TypeStyle(Enum):
    """How type expressions are turned into display text."""

    SOURCE = "source"
    TOKENS = "tokens"


# ============================================================================
# Configuration Sections
# ============================================================================


def _require(section: str, key: str, value: Any, expected: type) -> None:
    # bool is a subclass of int; an int setting must not accept True/False.
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ValueError(f"{section}.{key} must be {expected.__name__}, got {value!r}")


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Source parsing configuration."""

    grammar_module: str = "tree_sitter_rust"
    allow_partial: bool = False

    def __post_init__(self) -> None:
        _require("parser", "grammar_module", self.grammar_module, str)
        if not self.grammar_module:
            raise ValueError("parser.grammar_module must not be empty")
        _require("parser", "allow_partial", self.allow_partial, bool)


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Outline formatting configuration."""

    indent_unit: str = "  "
    branch_marker: str = "└─ "
    type_style: TypeStyle = TypeStyle.SOURCE
    max_nesting: int = 64

    def __post_init__(self) -> None:
        _require("render", "indent_unit", self.indent_unit, str)
        _require("render", "branch_marker", self.branch_marker, str)
        _require("render", "type_style", self.type_style, TypeStyle)
        _require("render", "max_nesting", self.max_nesting, int)
        if self.max_nesting < 1:
            raise ValueError(f"render.max_nesting must be positive, got {self.max_nesting!r}")


@dataclass(frozen=True, slots=True)
class CliConfig:
    """Command-line behaviour."""

    exit_zero_on_error: bool = False

    def __post_init__(self) -> None:
        _require("cli", "exit_zero_on_error", self.exit_zero_on_error, bool)


# ============================================================================
# Main Configuration
# ============================================================================


@dataclass(frozen=True, slots=True)
class OutlineConfig:
    """Complete rsoutline configuration.

    Frozen dataclass - immutable after creation.
    Loaded once by the CLI, passed explicitly to components.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    cli: CliConfig = field(default_factory=CliConfig)

    def with_overrides(
        self,
        *,
        type_style: TypeStyle | None = None,
        allow_partial: bool | None = None,
        exit_zero_on_error: bool | None = None,
    ) -> OutlineConfig:
        """Return a copy with the given (non-None) values replaced."""
        config = self
        if type_style is not None:
            config = replace(config, render=replace(config.render, type_style=type_style))
        if allow_partial is not None:
            config = replace(config, parser=replace(config.parser, allow_partial=allow_partial))
        if exit_zero_on_error is not None:
            config = replace(config, cli=replace(config.cli, exit_zero_on_error=exit_zero_on_error))
        return config


# ============================================================================
# Loading
# ============================================================================


def load_config(path: PathLike | None = None) -> OutlineConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to rsoutline.yaml. If None, searches current directory
              and parent directories.

    Returns:
        Frozen OutlineConfig instance

    Raises:
        ConfigError: If config file is invalid
    """
    if path is None:
        path = _find_config_file()

    config_path = normalize_path(path)

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        data: dict[str, Any] = {}
    else:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration in {config_path}: expected a mapping")
        logger.debug("Loaded config from %s", config_path)

    try:
        data = _apply_env_overrides(data)
        return _build_config(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _find_config_file() -> Path:
    """Search for rsoutline.yaml in current and parent directories."""
    current = Path.cwd()

    for directory in [current] + list(current.parents):
        config_path = directory / DEFAULT_CONFIG_FILENAME
        if config_path.exists():
            return config_path
        if any((directory / marker).exists() for marker in PROJECT_MARKERS):
            break

    return current / DEFAULT_CONFIG_FILENAME


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides to config.

    Environment variables use RSOUTLINE_ prefix:
    - RSOUTLINE_GRAMMAR_MODULE -> parser.grammar_module
    - RSOUTLINE_ALLOW_PARTIAL -> parser.allow_partial
    - RSOUTLINE_INDENT_UNIT -> render.indent_unit
    - RSOUTLINE_TYPE_STYLE -> render.type_style
    - RSOUTLINE_MAX_NESTING -> render.max_nesting
    - RSOUTLINE_EXIT_ZERO_ON_ERROR -> cli.exit_zero_on_error
    """
    env_mappings = {
        "RSOUTLINE_GRAMMAR_MODULE": ("parser", "grammar_module"),
        "RSOUTLINE_ALLOW_PARTIAL": ("parser", "allow_partial"),
        "RSOUTLINE_INDENT_UNIT": ("render", "indent_unit"),
        "RSOUTLINE_TYPE_STYLE": ("render", "type_style"),
        "RSOUTLINE_MAX_NESTING": ("render", "max_nesting"),
        "RSOUTLINE_EXIT_ZERO_ON_ERROR": ("cli", "exit_zero_on_error"),
    }

    for env_var, (section, key) in env_mappings.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        if key in ("allow_partial", "exit_zero_on_error"):
            value = parse_bool(value)
        elif key == "max_nesting":
            value = int(value)
        section_data = data.get(section)
        if not isinstance(section_data, dict):
            section_data = {}
            data[section] = section_data
        section_data[key] = value

    return data


def _build_config(data: dict[str, Any]) -> OutlineConfig:
    """Build OutlineConfig from dictionary data."""
    unknown = set(data) - {"parser", "render", "cli"}
    if unknown:
        raise ValueError(f"unknown section(s): {', '.join(sorted(unknown))}")

    def get_section(name: str, cls: type) -> Any:
        section_data = data.get(name) or {}
        if not isinstance(section_data, dict):
            raise ValueError(f"section '{name}' must be a mapping")
        section_data = dict(section_data)
        if name == "render" and "type_style" in section_data:
            section_data["type_style"] = TypeStyle(section_data["type_style"])
        return cls(**section_data)

    return OutlineConfig(
        parser=get_section("parser", ParserConfig),
        render=get_section("render", RenderConfig),
        cli=get_section("cli", CliConfig),
    )


def serialize_config(config: OutlineConfig) -> dict[str, Any]:
    """Serialize the configuration to a dictionary."""
    render = asdict(config.render)
    render["type_style"] = config.render.type_style.value
    return {
        "parser": asdict(config.parser),
        "render": render,
        "cli": asdict(config.cli),
    }


__all__ = [
    "ConfigError",
    "TypeStyle",
    "OutlineConfig",
    "ParserConfig",
    "RenderConfig",
    "CliConfig",
    "DEFAULT_CONFIG_FILENAME",
    "load_config",
    "serialize_config",
]
