"""Physiological, legal and simulation constants.

Concentrations are g/L (blood) unless stated otherwise; times are minutes.
"""

from typing import Dict

MALE = "male"
FEMALE = "female"

BLOOD = "blood"
BREATH = "breath"
UNITS = (BLOOD, BREATH)

# Widmark r (body-water distribution factor)
DISTRIBUTION_FACTOR: Dict[str, float] = {MALE: 0.68, FEMALE: 0.55}

# Ethanol density (g/mL) for volume x ABV -> grams.
ETHANOL_DENSITY = 0.789

# Average elimination (g/L per hour).
ELIMINATION_RATE_PER_HOUR = 0.15
ELIMINATION_RATE_PER_MINUTE = ELIMINATION_RATE_PER_HOUR / 60

# Blood:breath partition ratio used to turn g/L blood into mg/L breath.
BLOOD_BREATH_RATIO = 2100

STANDARD_LIMIT = "standard"
NOVICE_PRO_LIMIT = "novice_pro"

# Standard limit applies to most drivers; novice/pro to new and professional drivers.
LEGAL_LIMITS: Dict[str, Dict[str, float]] = {
    BLOOD: {STANDARD_LIMIT: 0.5, NOVICE_PRO_LIMIT: 0.3},  # g/L
    BREATH: {STANDARD_LIMIT: 0.25, NOVICE_PRO_LIMIT: 0.15},  # mg/L
}

SIMULATION_TIME_STEP = 5
SIMULATION_MIN_HOURS_AFTER_LAST_DRINK = 12
# Slightly above zero so the tail of the curve doesn't keep the loop running.
SIMULATION_SOBER_THRESHOLD_GL = 0.005
SIMULATION_EARLY_EXIT_MINUTES = 90
ROUGH_SOBER_BUFFER = 1.5

DEFAULT_WAIT_TIME_MINUTES = 20
MIN_DURATION_MINUTES = 1

# Edit ranges accepted from the drink form.
MIN_VOLUME_ML = 1.0
MAX_VOLUME_ML = 5000.0
MIN_ABV_PERCENT = 0.0
MAX_ABV_PERCENT = 100.0
MAX_DURATION_MINUTES = 600.0
MAX_START_MINUTE = 10080.0  # one week
MAX_WAIT_MINUTES = 1440.0
