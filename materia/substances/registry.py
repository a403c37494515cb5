"""Substance registry.

The registry is the shared library that substance references resolve
against. A global instance is created on first use and, by default, loads
the packaged catalog (``materia/data/substances.yaml``).
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import yaml

from materia.core.proportions import is_normalized
from materia.substances.base import SubstanceBase
from materia.substances.mixture import Mixture
from materia.substances.reference import SubstanceReference
from materia.substances.substance import Solution, Substance

logger = logging.getLogger(__name__)


class SubstanceRegistry:
    """Central registry for substance definitions.

    Runtime API:
        - get_substance(key) -> SubstanceBase
        - find_substance(name_or_key) -> SubstanceBase | None
        - list_substances() -> list[str]
        - register_substance(substance) -> None

    Validation:
        - Solution and mixture parts sum to 1
        - Densities positive
        - Antoine validity ranges ordered
    """

    def __init__(self, catalog_path: str | Path | None = None):
        """Initialize substance registry.

        Args:
            catalog_path: Path to a substances YAML catalog

        """
        self._substances: dict[str, SubstanceBase] = {}
        self._catalog_path = catalog_path

        if catalog_path:
            self.load_from_yaml(catalog_path)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, (SubstanceBase, SubstanceReference)):
            key = key.key
        return key in self._substances

    def __len__(self) -> int:
        return len(self._substances)

    def register_substance(self, substance: SubstanceBase) -> None:
        """Register a substance under its key.

        Args:
            substance: Substance, Solution or Mixture to register

        Raises:
            ValueError: If the substance is the empty substance (blank key)

        """
        key = substance.key
        if not key:
            raise ValueError("Cannot register a substance with a blank key")

        if key in self._substances:
            warnings.warn(
                f"Substance '{key}' already registered. Overwriting.",
                UserWarning,
                stacklevel=2,
            )

        self._substances[key] = substance
        logger.debug("Registered substance %s (%s)", key, substance.name)

    def get_substance(self, key: str) -> SubstanceBase:
        """Get substance by key.

        Raises:
            KeyError: If substance not found

        """
        if key not in self._substances:
            available = ", ".join(self.list_substances())
            raise KeyError(
                f"Substance '{key}' not found. Available: {available}",
            )

        return self._substances[key]

    def find_substance(self, name: str) -> SubstanceBase | None:
        """Look a substance up by key, display name or common name (case-insensitive).

        Returns:
            The substance, or None if nothing matches

        """
        if name in self._substances:
            return self._substances[name]

        wanted = name.strip().casefold()
        for substance in self._substances.values():
            names = [substance.key, substance.name, *getattr(substance, "common_names", ())]
            if any(n.casefold() == wanted for n in names):
                return substance
        return None

    def list_substances(self) -> list[str]:
        """List all registered substance keys."""
        return list(self._substances.keys())

    def reference(self, key: str) -> SubstanceReference:
        """Reference bound to the registered substance ``key``."""
        return SubstanceReference.to(self.get_substance(key))

    def load_from_yaml(self, yaml_path: str | Path) -> None:
        """Load substances from a YAML catalog.

        Expected format:
            substances:
              - name: Water
                formula: H2O
                density_liquid: 997
                melting_point: 273.15
              - name: Carbon Steel
                type: solution
                parts:
                  - [iron, "0.9975"]
                  - [amorphous_carbon, "0.0025"]

        Solution and mixture parts refer to keys loaded earlier (from this
        file or already registered).

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If YAML format is invalid

        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Substance catalog not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "substances" not in data:
            raise ValueError("YAML must contain 'substances' key")

        loaded = 0
        for entry in data["substances"]:
            try:
                self.register_substance(self.build_substance(entry))
                loaded += 1
            except Exception as e:
                warnings.warn(
                    f"Failed to load substance '{entry.get('name', 'unknown')}': {e}",
                    UserWarning,
                    stacklevel=2,
                )

        logger.debug("Loaded %d substances from %s", loaded, path)

    def _bind(self, parts) -> list[tuple[SubstanceReference, str]]:
        return [(self.reference(key), proportion) for key, proportion in parts]

    def build_substance(self, entry: dict) -> SubstanceBase:
        """Build (without registering) a substance from a catalog entry.

        Aggregate parts are bound to substances already in this registry.

        Raises:
            KeyError: If a part is not registered
            ValueError: If the entry type is unknown or its values are invalid
        """
        entry = dict(entry)
        kind = entry.pop("type", entry.pop("$type", "substance"))
        if kind == "substance":
            return Substance.from_dict(entry)
        if kind == "solution":
            entry["parts"] = self._bind(entry.get("parts") or [])
            return Solution.from_dict(entry)
        if kind == "mixture":
            entry["constituents"] = self._bind(entry.get("constituents") or [])
            return Mixture.from_dict(entry)
        raise ValueError(f"Unknown substance type '{kind}'")

    def save_to_yaml(self, yaml_path: str | Path) -> None:
        """Save all registered substances to a YAML catalog."""
        entries = []
        for substance in self._substances.values():
            record = substance.to_dict()
            record["type"] = record.pop("$type")
            entries.append(record)

        path = Path(yaml_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"substances": entries}, f, default_flow_style=False, sort_keys=False)

    def validate_all(self) -> list[str]:
        """Validate all registered substances.

        Returns:
            List of validation error messages (empty if all valid)

        """
        errors = []

        for key, substance in self._substances.items():
            for attr in ("density_liquid", "density_solid", "density_special"):
                value = getattr(substance, attr, None)
                if value is not None and value <= 0:
                    errors.append(f"{key}: Invalid {attr}={value}")

            low = getattr(substance, "antoine_min_temperature", None)
            high = getattr(substance, "antoine_max_temperature", None)
            if low is not None and high is not None and low > high:
                errors.append(f"{key}: Antoine range inverted ({low} > {high})")

            if not substance.is_leaf and not is_normalized(substance.constituents, 1e-6):
                errors.append(f"{key}: Constituent proportions do not sum to 1")

            for ref in substance.constituents:
                if ref.target is None and ref.key not in self._substances:
                    errors.append(f"{key}: Unresolved constituent '{ref.key}'")

        return errors


# Global registry instance
_global_registry: SubstanceRegistry | None = None


def get_global_registry() -> SubstanceRegistry:
    """Get or create the global substance registry.

    The catalog path and whether to load it at all come from ``ModelConfig``
    defaults (``registry.catalog`` and ``registry.load_builtin``).

    """
    global _global_registry
    if _global_registry is None:
        from materia.config.model_config import ModelConfig

        config = ModelConfig()
        catalog = config.resolved_catalog_path
        if not config.load_builtin:
            _global_registry = SubstanceRegistry()
        elif catalog.exists():
            _global_registry = SubstanceRegistry(catalog)
        else:
            warnings.warn(
                f"Default substance catalog not found: {catalog}. Using empty registry.",
                UserWarning,
                stacklevel=2,
            )
            _global_registry = SubstanceRegistry()

    return _global_registry


def reset_global_registry() -> None:
    """Drop the global registry; it is rebuilt on next access."""
    global _global_registry
    _global_registry = None


def get_substance(key: str) -> SubstanceBase:
    """Get substance from global registry.

    Raises:
        KeyError: If substance not found

    """
    return get_global_registry().get_substance(key)


def list_substances() -> list[str]:
    """List all substance keys in global registry."""
    return get_global_registry().list_substances()


def register_substance(substance: SubstanceBase) -> None:
    """Register substance in global registry."""
    get_global_registry().register_substance(substance)
