"""
Configuration for loxexpr, read from ``loxexpr.toml``.

Example::

    [repl]
    prompt = ">> "

    [output]
    show_ast = false
    show_type = false
    source_snippets = true

    [parser]
    power_associativity = "right"

Missing tables and keys fall back to defaults; unknown keys are ignored.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loxexpr.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "loxexpr.toml"

_ASSOCIATIVITIES = ("left", "right")


@dataclass
class ReplConfig:
    """Interactive line-mode settings."""

    prompt: str = "> "


@dataclass
class OutputConfig:
    """What a successful run prints, and how diagnostics look."""

    show_ast: bool = False  # print the parsed tree instead of evaluating
    show_type: bool = False  # print the statically inferred type instead of evaluating
    source_snippets: bool = True  # echo the offending source line under diagnostics


@dataclass
class ParserConfig:
    """Parser settings."""

    power_associativity: str = "left"  # "left" | "right"


@dataclass
class LoxConfig:
    """Top-level configuration."""

    repl: ReplConfig = field(default_factory=ReplConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    path: Path | None = None


def _expect(table: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = table.get(key, default)
    if not isinstance(value, kind):
        raise ConfigError(f"'{key}' must be of type {kind.__name__}, got {type(value).__name__}")
    return value


def load_config(path: Path) -> LoxConfig:
    """Load configuration from a TOML file.

    Raises:
        ConfigError: If the file is not valid TOML or holds unusable values.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    repl_data = data.get("repl", {})
    output_data = data.get("output", {})
    parser_data = data.get("parser", {})

    repl_config = ReplConfig(
        prompt=_expect(repl_data, "prompt", str, "> "),
    )

    output_config = OutputConfig(
        show_ast=_expect(output_data, "show_ast", bool, False),
        show_type=_expect(output_data, "show_type", bool, False),
        source_snippets=_expect(output_data, "source_snippets", bool, True),
    )

    associativity = _expect(parser_data, "power_associativity", str, "left")
    if associativity not in _ASSOCIATIVITIES:
        raise ConfigError(
            f"power_associativity must be one of {', '.join(_ASSOCIATIVITIES)}, "
            f"got {associativity!r}"
        )
    parser_config = ParserConfig(power_associativity=associativity)

    logger.debug("Loaded configuration from %s", path)
    return LoxConfig(
        repl=repl_config,
        output=output_config,
        parser=parser_config,
        path=path,
    )


def find_config(start: Path | None = None) -> Path | None:
    """Return the loxexpr.toml in ``start`` (default: cwd), if one exists."""
    candidate = (start or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    return None


def resolve_config(path: Path | None = None) -> LoxConfig:
    """Load an explicit config path, else a discovered one, else defaults."""
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return load_config(path)
    found = find_config()
    if found is not None:
        return load_config(found)
    return LoxConfig()
