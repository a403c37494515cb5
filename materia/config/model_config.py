"""Configuration dataclasses for the composition model.

Every dataclass exposes ``validate() -> list[str]`` returning human-readable
error messages (empty when valid); ``materia.config.validation`` turns those
into exceptions.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from materia.config.defaults import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_LOAD_BUILTIN,
    DEFAULT_PRESSURE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOLERANCE,
)

PACKAGED_CATALOG = Path(__file__).parent.parent / "data" / "substances.yaml"


@dataclass
class AmbientConditions:
    """Ambient state used when a material does not specify its own.

    Attributes:
        temperature: Temperature [K]
        pressure: Pressure [kPa]
    """

    temperature: float = DEFAULT_TEMPERATURE
    pressure: float = DEFAULT_PRESSURE

    def validate(self) -> list[str]:
        errors = []
        if self.temperature <= 0:
            errors.append(f"temperature must be > 0 K, got {self.temperature}")
        if self.pressure < 0:
            errors.append(f"pressure must be >= 0 kPa, got {self.pressure}")
        return errors


@dataclass
class ModelConfig:
    """Top-level configuration.

    Attributes:
        ambient: Ambient temperature and pressure
        tolerance: Allowed deviation of a proportion sum from 1
        catalog_path: Substance catalog loaded into the global registry
            (None selects the packaged catalog)
        load_builtin: Whether the global registry loads a catalog at all
    """

    ambient: AmbientConditions = field(default_factory=AmbientConditions)
    tolerance: float = DEFAULT_TOLERANCE
    catalog_path: str | None = DEFAULT_CATALOG_PATH
    load_builtin: bool = DEFAULT_LOAD_BUILTIN

    @property
    def resolved_catalog_path(self) -> Path:
        """Catalog path with the packaged default applied."""
        return Path(self.catalog_path) if self.catalog_path else PACKAGED_CATALOG

    def validate(self) -> list[str]:
        """Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = self.ambient.validate()

        if not (0 <= self.tolerance < 1):
            errors.append(f"tolerance must be in [0, 1), got {self.tolerance}")

        if self.load_builtin and not self.resolved_catalog_path.exists():
            errors.append(f"catalog not found: {self.resolved_catalog_path}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModelConfig:
        data = dict(data)
        ambient = data.pop("ambient", None) or {}
        return cls(ambient=AmbientConditions(**ambient), **data)
