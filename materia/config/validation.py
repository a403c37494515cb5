"""
Configuration Validation Utilities

Import Policy:
    from materia.config.validation import validate_config, warn_if_unusual

DO NOT use: from materia.config.validation import *
"""

import warnings

from materia.config.model_config import ModelConfig

# Temperatures above this are legal but outside the range any catalog data covers [K]
UNUSUAL_TEMPERATURE = 1.0e4


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigurationWarning(Warning):
    """Warning for physically unusual configuration choices."""

    pass


def validate_config(config: ModelConfig, raise_on_error: bool = True) -> tuple[bool, list[str]]:
    """Validate a model configuration.

    Args:
        config: ModelConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        Tuple of (is_valid, error_messages)

    Raises:
        ConfigurationError: If validation fails and raise_on_error=True
    """
    errors = config.validate()

    if errors:
        if raise_on_error:
            raise ConfigurationError(
                f"Configuration validation failed with {len(errors)} error(s):\n"
                + "\n".join(f"  - {err}" for err in errors)
            )
        return False, errors

    return True, []


def warn_if_unusual(config: ModelConfig) -> list[str]:
    """Warn about legal but physically odd ambient conditions.

    Warnings are issued via Python's warnings module.

    Returns:
        List of warning messages (empty if no warnings)
    """
    messages = []

    if config.ambient.pressure == 0:
        messages.append(
            "Ambient pressure is 0 kPa: every substance with vapor pressure data "
            "will be reported as a gas above its melting point."
        )

    if config.ambient.temperature > UNUSUAL_TEMPERATURE:
        messages.append(
            f"Ambient temperature {config.ambient.temperature:.0f} K exceeds "
            f"{UNUSUAL_TEMPERATURE:.0f} K; catalog densities are not meaningful there."
        )

    for msg in messages:
        warnings.warn(msg, ConfigurationWarning, stacklevel=2)

    return messages
