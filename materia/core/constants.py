"""Physical and classification constants.

This module is the Single Source of Truth (SSOT) for constants used by the
composition model. Import from here rather than defining constants locally.

Import Policy:
    from materia.core.constants import GAS_CONSTANT, WATER_KEY

DO NOT use: from materia.core.constants import *
"""

from decimal import Decimal

from scipy import constants as _sc

# =============================================================================
# Fundamental Physical Constants
# =============================================================================

# Molar gas constant [J/(mol·K)]
# With pressure in kPa and molar mass in g/mol, P·M/(R·T) is in kg/m³.
GAS_CONSTANT = _sc.R

# Newtonian constant of gravitation [m³/(kg·s²)]
GRAVITATIONAL_CONSTANT = _sc.G

# =============================================================================
# Vapor Pressure
# =============================================================================

# Antoine coefficients yield bar; vapor pressures are reported in kPa.
ANTOINE_PRESSURE_FACTOR = 100.0

# =============================================================================
# Classification
# =============================================================================

# Catalog key of the canonical water substance
WATER_KEY = "water"

# Atomic numbers of carbon and hydrogen
CARBON_Z = 6
HYDROGEN_Z = 1

# H, O, S and As neither qualify nor disqualify a substance as an ore
ORE_NEUTRAL_Z = frozenset({1, 8, 16, 33})

# Alkali and alkaline-earth groups disqualify ores
ORE_EXCLUDED_GROUPS = frozenset({1, 2})

# Minimum water proportion for an aggregate to count as water
WATER_THRESHOLD = Decimal("0.95")

# Aggregate hydrocarbon rule:
#   hydrocarbon >= HYDROCARBON_MINIMUM
#   hydrocarbon >= HYDROCARBON_BALANCE - (carbon + water)
HYDROCARBON_MINIMUM = Decimal("0.25")
HYDROCARBON_BALANCE = Decimal("0.75")

# Minimum ore-qualifying proportion for an aggregate to count as ore
ORE_THRESHOLD = Decimal("0.5")
