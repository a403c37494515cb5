"""Configuration Module

Default Configuration (loaded from defaults.yaml):
    from materia.config import get_default, get_defaults

    pressure = get_default('ambient.pressure')
    all_defaults = get_defaults()

Validated configuration:
    from materia.config import ModelConfig, validate_config

    config = ModelConfig()
    validate_config(config)

Import Policy:
    DO NOT use: from materia.config import *

Submodules:
    yaml_loader: YAML configuration loader (get_default, get_defaults)
    defaults: DEFAULT_* constants read from defaults.yaml
    model_config: Configuration dataclasses (AmbientConditions, ModelConfig)
    validation: Validation utilities (validate_config, warn_if_unusual)
"""

from materia.config.yaml_loader import get_default, get_defaults, reload_defaults
from materia.config.model_config import AmbientConditions, ModelConfig
from materia.config.validation import (
    ConfigurationError,
    ConfigurationWarning,
    validate_config,
    warn_if_unusual,
)

__all__ = [
    # YAML defaults
    "get_default",
    "get_defaults",
    "reload_defaults",
    # Dataclasses
    "AmbientConditions",
    "ModelConfig",
    # Validation
    "ConfigurationError",
    "ConfigurationWarning",
    "validate_config",
    "warn_if_unusual",
]
