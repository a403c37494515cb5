"""
Default Configuration Constants for materia

Values are read once from defaults.yaml; the literals below are the fallbacks
used when a key is missing from that file.

IMPORTANT Import Policies:
    1. DO NOT use: from materia.config.defaults import *

    2. DO use explicit imports:
       from materia.config.defaults import DEFAULT_TEMPERATURE, DEFAULT_PRESSURE
"""

from decimal import Decimal

from materia.config.yaml_loader import get_default

# =============================================================================
# Ambient Conditions
# =============================================================================

# Temperature assumed for materials without one [K]
DEFAULT_TEMPERATURE = float(get_default("ambient.temperature", 273.0))

# Pressure used for derived densities [kPa] (one standard atmosphere)
DEFAULT_PRESSURE = float(get_default("ambient.pressure", 101.325))

# =============================================================================
# Proportions
# =============================================================================

# Allowed deviation of a proportion sum from 1
DEFAULT_TOLERANCE = float(get_default("proportions.tolerance", 1e-9))

# Proportion used by combine/add when the caller gives none
DEFAULT_PROPORTION = Decimal(str(get_default("proportions.default", "0.5")))

# =============================================================================
# Substance Registry
# =============================================================================

# Explicit catalog path (None selects the packaged catalog)
DEFAULT_CATALOG_PATH = get_default("registry.catalog", None)

# Whether the global registry loads the catalog on first use
DEFAULT_LOAD_BUILTIN = bool(get_default("registry.load_builtin", True))
