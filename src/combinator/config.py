"""TOML config loading for combinator.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

CONFIG_FILENAME = "combinator.toml"


class UnboundPolicy(Enum):
    """What an identifier missing from the store evaluates to."""

    ERROR = "error"
    ZERO = "zero"


@dataclass
class EvaluationConfig:
    unbound: UnboundPolicy = UnboundPolicy.ERROR
    integer_bits: int = 64  # 0 disables the width check


@dataclass
class OutputConfig:
    color: bool = True


@dataclass
class CombinatorConfig:
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find combinator.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> CombinatorConfig:
    """Parse a combinator.toml file into a CombinatorConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = CombinatorConfig()

    if "evaluation" in data:
        ev = data["evaluation"]
        unbound = ev.get("unbound", "error")
        try:
            policy = UnboundPolicy(unbound)
        except ValueError:
            raise ValueError(
                f"{path}: evaluation.unbound must be 'error' or 'zero', got {unbound!r}"
            ) from None
        bits = ev.get("integer_bits", 64)
        if isinstance(bits, bool) or not isinstance(bits, int) or bits < 0:
            raise ValueError(
                f"{path}: evaluation.integer_bits must be a non-negative integer"
            )
        config.evaluation = EvaluationConfig(unbound=policy, integer_bits=bits)

    if "output" in data:
        out = data["output"]
        color = out.get("color", True)
        if not isinstance(color, bool):
            raise ValueError(f"{path}: output.color must be true or false, got {color!r}")
        config.output = OutputConfig(color=color)

    return config
