"""Tunable parser settings and their YAML loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from funcad.utils.config import load_section

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "funcad.yaml"


@dataclass(frozen=True)
class ParserOptions:
    """Limits applied while parsing.

    ``max_depth`` bounds how deeply parentheses and call arguments may nest
    inside a single expression.
    """

    max_depth: int = 80

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError("max_depth must be an integer")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ParserOptions:
        unknown = set(data) - {"max_depth"}
        if unknown:
            raise ValueError(f"unknown parser options: {', '.join(sorted(unknown))}")
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_CONFIG_PATH) -> ParserOptions:
        """Build options from the ``parser`` section of a YAML file."""

        return cls.from_mapping(load_section(path, "parser"))


__all__ = ["DEFAULT_CONFIG_PATH", "ParserOptions"]
