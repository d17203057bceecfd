"""
Configuration for GA match.

Loads YAML run configuration and converts it to an immutable RunConfig.
"""

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


DEFAULT_TARGET = "Hello, World!"
DEFAULT_POPULATION_SIZE = 1000
DEFAULT_MUTATION_RATE = 0.01
DEFAULT_GENERATION_CAP = 1000000
DEFAULT_UNBOUNDED = True
DEFAULT_ELITE_PERCENT = 0.1
DEFAULT_CHUNK_SIZE = 64

DEFAULT_CONFIG_PATH = Path(__file__).parent / "ga_match_config.yaml"


class ConfigValidationError(ValueError):
    """Raised when run configuration is invalid."""
    pass


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class RunConfig:
    """
    Immutable search configuration, constructed once at startup.

    Attributes:
        target: Byte string the population evolves toward
        population_size: Individuals per generation
        mutation_rate: Per-gene replacement probability in [0, 1]
        generation_cap: Generations to run when not unbounded
        unbounded: Ignore generation_cap and run until solved
        elite_percent: Share of the sorted population parents are drawn from, in (0, 100]
        random_seed: Seed for the run's generator (None for OS entropy)
        max_workers: Worker pool size (None for cpu count)
        chunk_size: Individuals handled per submitted task
        report_interval: Generations between progress lines (0 disables)
    """
    target: bytes = DEFAULT_TARGET.encode("utf-8")
    population_size: int = DEFAULT_POPULATION_SIZE
    mutation_rate: float = DEFAULT_MUTATION_RATE
    generation_cap: int = DEFAULT_GENERATION_CAP
    unbounded: bool = DEFAULT_UNBOUNDED
    elite_percent: float = DEFAULT_ELITE_PERCENT
    random_seed: Optional[int] = None
    max_workers: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    report_interval: int = 0

    def __post_init__(self):
        """Normalize target to bytes and validate every field."""
        if isinstance(self.target, str):
            object.__setattr__(self, "target", self.target.encode("utf-8"))
        elif isinstance(self.target, (bytearray, memoryview)):
            object.__setattr__(self, "target", bytes(self.target))
        validate_run_config(self)

    @property
    def target_length(self) -> int:
        return len(self.target)

    @property
    def target_text(self) -> str:
        return self.target.decode("utf-8", errors="replace")

    @property
    def elite_count(self) -> int:
        """Size of the elite slice parents are selected from."""
        return max(1, math.ceil(self.population_size * self.elite_percent / 100))

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunConfig":
        """
        Build a RunConfig from a plain mapping (e.g. parsed YAML).

        Missing keys take their defaults.

        Raises:
            ConfigValidationError: If keys are unknown or values are invalid
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Configuration must be a mapping, got: {type(data).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown configuration field(s): {', '.join(unknown)}")

        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Mapping suitable for YAML export."""
        return {
            "target": self.target_text,
            "population_size": self.population_size,
            "mutation_rate": self.mutation_rate,
            "generation_cap": self.generation_cap,
            "unbounded": self.unbounded,
            "elite_percent": self.elite_percent,
            "random_seed": self.random_seed,
            "max_workers": self.max_workers,
            "chunk_size": self.chunk_size,
            "report_interval": self.report_interval,
        }


def validate_run_config(config: RunConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Run configuration

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    if not isinstance(config.target, bytes):
        raise ConfigValidationError(
            f"'target' must be a string or bytes, got: {type(config.target).__name__}"
        )
    if len(config.target) == 0:
        raise ConfigValidationError("'target' must not be empty")

    if not _is_int(config.population_size) or config.population_size <= 0:
        raise ConfigValidationError(
            f"'population_size' must be a positive integer, got: {config.population_size}"
        )

    if not _is_number(config.mutation_rate) or not 0.0 <= config.mutation_rate <= 1.0:
        raise ConfigValidationError(
            f"'mutation_rate' must be a number in [0, 1], got: {config.mutation_rate}"
        )

    if not _is_int(config.generation_cap) or config.generation_cap < 1:
        raise ConfigValidationError(
            f"'generation_cap' must be a positive integer, got: {config.generation_cap}"
        )

    if not isinstance(config.unbounded, bool):
        raise ConfigValidationError(f"'unbounded' must be a boolean, got: {config.unbounded}")

    if not _is_number(config.elite_percent) or not 0.0 < config.elite_percent <= 100.0:
        raise ConfigValidationError(
            f"'elite_percent' must be a number in (0, 100], got: {config.elite_percent}"
        )

    if config.random_seed is not None and (not _is_int(config.random_seed) or config.random_seed < 0):
        raise ConfigValidationError(
            f"'random_seed' must be a non-negative integer, got: {config.random_seed}"
        )

    if config.max_workers is not None and (not _is_int(config.max_workers) or config.max_workers <= 0):
        raise ConfigValidationError(
            f"'max_workers' must be a positive integer, got: {config.max_workers}"
        )

    if not _is_int(config.chunk_size) or config.chunk_size <= 0:
        raise ConfigValidationError(
            f"'chunk_size' must be a positive integer, got: {config.chunk_size}"
        )

    if not _is_int(config.report_interval) or config.report_interval < 0:
        raise ConfigValidationError(
            f"'report_interval' must be a non-negative integer, got: {config.report_interval}"
        )


def load_run_config(config_path: Union[str, Path, None] = None) -> RunConfig:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to YAML file; the packaged default when None

    Returns:
        Validated RunConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if data is None:
        raise ConfigValidationError("Configuration file is empty")

    return RunConfig.from_dict(data)
