"""Packaged defaults for ambient conditions, proportions and the catalog.

Values live in ``defaults.yaml`` beside this module. Pointing the
``MATERIA_DEFAULTS_PATH`` environment variable at another file replaces the
whole document (it is not merged). Nothing here imports other config
modules, so ``defaults.py`` can read values at import time.

Usage:
    from materia.config.yaml_loader import get_default
    pressure = get_default('ambient.pressure')
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ENV_VAR = "MATERIA_DEFAULTS_PATH"
PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")

_document: dict[str, Any] | None = None


def defaults_path() -> Path:
    """File the defaults are read from.

    An override that does not exist is ignored in favour of the packaged
    file.

    Raises:
        FileNotFoundError: If the packaged file is missing too
    """
    override = os.getenv(ENV_VAR)
    if override:
        candidate = Path(override)
        if candidate.is_file():
            return candidate
        logger.warning("%s=%s does not exist; using packaged defaults", ENV_VAR, override)

    if not PACKAGED_DEFAULTS.is_file():
        raise FileNotFoundError(f"Packaged defaults missing: {PACKAGED_DEFAULTS} (set {ENV_VAR})")
    return PACKAGED_DEFAULTS


def _read(path: Path) -> dict[str, Any]:
    logger.debug("Reading defaults from %s", path)
    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f)
    return document if isinstance(document, dict) else {}


def _defaults() -> dict[str, Any]:
    global _document
    if _document is None:
        _document = _read(defaults_path())
    return _document


def get_defaults() -> dict[str, Any]:
    """Deep copy of the whole defaults document."""
    return copy.deepcopy(_defaults())


def get_default(key_path: str, default: Any = None) -> Any:
    """Look up ``section.key`` in the defaults document.

    A missing section or key, a null value, or a path that runs into a
    scalar all give ``default``.

    Example:
        >>> get_default('ambient.temperature')
        273.0
    """
    node: Any = _defaults()
    for part in key_path.split("."):
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return default
    return node


def reload_defaults() -> None:
    """Drop the cached document and read it again (the override is re-checked)."""
    global _document
    _document = _read(defaults_path())
