"""Configuration loading and validation for dot-evolution sessions."""

from __future__ import annotations

import json
import warnings
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from smartdots.core.vector import Vector2
from smartdots.environment.arena import Arena


class ConfigValidationError(ValueError):
    """Raised when runtime config fails validation."""


# Numeric fields accept ints where floats are expected; bools never count as ints.
_EVOLUTION_FIELDS: dict[str, type[Any]] = {
    "population_size": int,
    "gene_length": int,
    "force_magnitude": float,
    "max_speed": float,
    "mutation_rate": float,
    "elite_count": int,
    "capture_radius": float,
    "boundary_width": float,
    "boundary_height": float,
    "target_position": list,
    "start_position": list,
}
_RUN_FIELDS: dict[str, type[Any]] = {
    "seed": int,
    "generations": int,
    "max_steps_per_generation": int,
}
_LOGGING_FIELDS: dict[str, type[Any]] = {
    "log_interval": int,
    "experiment_name": str,
}
_SECTIONS: dict[str, dict[str, type[Any]]] = {
    "evolution": _EVOLUTION_FIELDS,
    "run": _RUN_FIELDS,
    "logging": _LOGGING_FIELDS,
}
_NULLABLE = {"max_steps_per_generation"}


@dataclass(frozen=True)
class EvolutionSettings:
    """Tunables for one population.

    Defaults reproduce the classic 600x600 "smart dots" setup: the target sits
    near the top centre and dots spawn near the bottom centre.
    """

    population_size: int = 250
    gene_length: int = 400
    force_magnitude: float = 0.3
    max_speed: float = 6.0
    mutation_rate: float = 0.01
    elite_count: int = 4
    capture_radius: float = 8.0
    boundary_width: float = 600.0
    boundary_height: float = 600.0
    target_position: tuple[float, float] = (300.0, 40.0)
    start_position: tuple[float, float] = (300.0, 592.0)

    def __post_init__(self) -> None:
        if self.population_size <= 0:
            raise ConfigValidationError("population_size must be > 0")
        if self.gene_length <= 0:
            raise ConfigValidationError("gene_length must be > 0")
        if self.force_magnitude <= 0.0:
            raise ConfigValidationError("force_magnitude must be > 0")
        if self.max_speed <= 0.0:
            raise ConfigValidationError("max_speed must be > 0")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigValidationError("mutation_rate must be in [0.0, 1.0]")
        if not 0 <= self.elite_count <= self.population_size:
            raise ConfigValidationError("elite_count must be in [0, population_size]")
        if self.capture_radius <= 0.0:
            raise ConfigValidationError("capture_radius must be > 0")
        if self.boundary_width <= 0.0 or self.boundary_height <= 0.0:
            raise ConfigValidationError("boundary dimensions must be > 0")

        arena = self.arena()
        for name in ("target_position", "start_position"):
            point = Vector2.from_sequence(getattr(self, name))
            if not arena.contains(point):
                raise ConfigValidationError(f"{name} {point.as_tuple()} lies outside the arena.")

    def arena(self) -> Arena:
        return Arena(
            width=float(self.boundary_width),
            height=float(self.boundary_height),
            target=Vector2.from_sequence(self.target_position),
            start=Vector2.from_sequence(self.start_position),
            capture_radius=float(self.capture_radius),
        )


@dataclass(frozen=True)
class RunSettings:
    """Driver-level run parameters."""

    seed: int = 0
    generations: int = 10
    max_steps_per_generation: int | None = None

    def __post_init__(self) -> None:
        if self.generations < 0:
            raise ConfigValidationError("generations must be >= 0")
        if self.max_steps_per_generation is not None and self.max_steps_per_generation <= 0:
            raise ConfigValidationError("max_steps_per_generation must be > 0 when set")


@dataclass(frozen=True)
class LoggingSettings:
    """Diagnostics and metrics persistence parameters."""

    log_interval: int = 1
    experiment_name: str = "smart_dots"

    def __post_init__(self) -> None:
        if self.log_interval <= 0:
            raise ConfigValidationError("log_interval must be > 0")


@dataclass(frozen=True)
class SessionConfig:
    """Validated configuration container for one simulation session."""

    evolution: EvolutionSettings = field(default_factory=EvolutionSettings)
    run: RunSettings = field(default_factory=RunSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], strict: bool = True) -> "SessionConfig":
        """Validate a raw mapping (as read from YAML/JSON) and build a config.

        Unknown sections or fields raise in strict mode and warn otherwise.
        Missing fields take their dataclass defaults.
        """
        if not isinstance(payload, Mapping):
            raise ConfigValidationError("Top-level config must be a mapping.")

        extras_top = [key for key in payload if key not in _SECTIONS]
        if extras_top:
            _reject_or_warn(f"Unknown top-level field(s): {extras_top}.", strict)

        sections = {
            name: _validate_section(name, payload.get(name, {}), fields, strict)
            for name, fields in _SECTIONS.items()
        }
        evolution = dict(sections["evolution"])
        for name in ("target_position", "start_position"):
            if name in evolution:
                evolution[name] = _coerce_point(name, evolution[name])

        try:
            return cls(
                evolution=EvolutionSettings(**evolution),
                run=RunSettings(**sections["run"]),
                logging=LoggingSettings(**sections["logging"]),
            )
        except TypeError as exc:
            raise ConfigValidationError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible dictionary view of the configuration."""
        payload = asdict(self)
        for name in ("target_position", "start_position"):
            payload["evolution"][name] = list(payload["evolution"][name])
        return payload


def _reject_or_warn(message: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(message)
    warnings.warn(message, stacklevel=3)


def _matches_type(value: Any, expected_type: type[Any]) -> bool:
    if isinstance(value, bool):
        return False
    if expected_type is float:
        return isinstance(value, (int, float))
    if expected_type is list:
        return isinstance(value, (list, tuple))
    return type(value) is expected_type


def _validate_section(
    section_name: str,
    section_value: Any,
    fields: Mapping[str, type[Any]],
    strict: bool,
) -> dict[str, Any]:
    if section_value is None:
        return {}
    if not isinstance(section_value, Mapping):
        raise ConfigValidationError(f"Section '{section_name}' must be a mapping.")

    section = dict(section_value)
    extras = [key for key in section if key not in fields]
    if extras:
        _reject_or_warn(f"Section '{section_name}' has unknown field(s): {extras}.", strict)

    validated: dict[str, Any] = {}
    for key, expected_type in fields.items():
        if key not in section:
            continue
        value = section[key]
        if value is None and key in _NULLABLE:
            validated[key] = None
            continue
        if not _matches_type(value, expected_type):
            raise ConfigValidationError(
                f"Field '{section_name}.{key}' expected {expected_type.__name__}, got {type(value).__name__}."
            )
        validated[key] = float(value) if expected_type is float else value
    return validated


def _coerce_point(name: str, value: Any) -> tuple[float, float]:
    if len(value) != 2 or not all(_matches_type(item, float) for item in value):
        raise ConfigValidationError(f"Field 'evolution.{name}' must be a two-number list.")
    return (float(value[0]), float(value[1]))


def _read_config_payload(path: Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    if not path.exists():
        raise ConfigValidationError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{path}': {exc}") from exc
    raise ConfigValidationError(f"Unsupported config extension: {suffix}")


def load_config(path: str | Path, strict: bool = True) -> SessionConfig:
    """Load and validate a YAML or JSON session configuration."""
    return SessionConfig.from_mapping(_read_config_payload(Path(path)), strict=strict)
