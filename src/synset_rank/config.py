"""Ranking configuration and its YAML loader."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from synset_rank.exceptions import ConfigError

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITERATIONS = 30
DEFAULT_EPSILON = 1e-4


@dataclass(frozen=True)
class RankingConfig:
    """Parameters of the personalized PageRank power iteration."""

    damping: float = DEFAULT_DAMPING
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    epsilon: float = DEFAULT_EPSILON
    use_weight: bool = True

    def __post_init__(self) -> None:
        if not 0.0 < self.damping < 1.0:
            raise ConfigError(f"damping must be in (0, 1), got {self.damping!r}")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int) \
                or self.max_iterations < 1:
            raise ConfigError(
                f"max_iterations must be a positive integer, got {self.max_iterations!r}"
            )
        if not self.epsilon > 0.0:
            raise ConfigError(f"epsilon must be positive, got {self.epsilon!r}")
        if not isinstance(self.use_weight, bool):
            raise ConfigError(f"use_weight must be true or false, got {self.use_weight!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(
    source: Union[str, Path, Dict[str, Any], None] = None,
) -> RankingConfig:
    """Load a ranking configuration.

    Args:
        source: Path to a YAML file, a YAML string, a parsed dictionary, or
            None for the defaults. A ``ranking:`` top-level section is
            used when present.

    Raises:
        ConfigError: If the YAML is invalid or holds unknown or bad values
        FileNotFoundError: If the file does not exist
    """
    if source is None:
        return RankingConfig()

    if isinstance(source, dict):
        data = source
    elif isinstance(source, Path) or _is_file_path(source):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = _safe_load(f)
    else:
        data = _safe_load(source)

    if "ranking" in data:
        data = data["ranking"]
        if not isinstance(data, dict):
            raise ConfigError("Section 'ranking' must be a mapping")

    known = {f.name for f in fields(RankingConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    try:
        values = {
            "damping": float(data.get("damping", DEFAULT_DAMPING)),
            "max_iterations": data.get("max_iterations", DEFAULT_MAX_ITERATIONS),
            "epsilon": float(data.get("epsilon", DEFAULT_EPSILON)),
            "use_weight": data.get("use_weight", True),
        }
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e
    return RankingConfig(**values)


def _is_file_path(s: str) -> bool:
    """Check if a string looks like a file path."""
    if "\n" in s:
        return False
    if "/" in s or "\\" in s:
        return True
    return s.endswith((".yaml", ".yml"))


def _safe_load(stream: Any) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(stream)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping (dictionary)")
    return data
