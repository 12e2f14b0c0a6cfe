"""BAC calculations using a time-stepped Widmark variant.

Model:
- Absorption: each drink is ingested linearly over its consumption window and
  counts fully towards grams / (weight_kg * r) as soon as it is swallowed.
- r = 0.68 (male), 0.55 (female)
- Elimination: 0.15 g/L per hour, counted from the midpoint of the part of
  the window drunk so far (the whole window once it has closed).
- Output unit: blood g/L, or breath mg/L = g/L * 1000 / 2100.
"""

import logging
import math
from typing import List, NamedTuple, Sequence

from bac_engine.constants import (
    BLOOD,
    BLOOD_BREATH_RATIO,
    BREATH,
    ELIMINATION_RATE_PER_HOUR,
    ELIMINATION_RATE_PER_MINUTE,
    ROUGH_SOBER_BUFFER,
    SIMULATION_EARLY_EXIT_MINUTES,
    SIMULATION_MIN_HOURS_AFTER_LAST_DRINK,
    SIMULATION_SOBER_THRESHOLD_GL,
    SIMULATION_TIME_STEP,
)
from bac_engine.drinks import (
    Drink,
    PersonalFactors,
    body_water_litres,
    drink_grams,
    duration_minutes,
    is_number,
    is_valid,
)

logger = logging.getLogger(__name__)


class SimulationSample(NamedTuple):
    time_minutes: float
    concentration: float


def convert_bac(bac_gl: float, unit: str) -> float:
    """g/L blood -> display unit (blood g/L unchanged, breath mg/L)."""
    if unit == BREATH:
        return bac_gl * 1000.0 / BLOOD_BREATH_RATIO
    return bac_gl


def to_blood_gl(value: float, unit: str) -> float:
    """Inverse of convert_bac."""
    if unit == BREATH:
        return value * BLOOD_BREATH_RATIO / 1000.0
    return value


def drink_contribution(drink: Drink, time_minutes: float, body_water_l: float) -> float:
    """Net g/L from one drink at time_minutes: absorbed minus eliminated, never negative."""
    grams = drink_grams(drink)
    if grams <= 0 or body_water_l <= 0 or not is_number(drink.start_minute):
        return 0.0

    start = drink.start_minute
    duration = duration_minutes(drink)
    end = start + duration
    if time_minutes <= start:
        return 0.0

    if time_minutes < end:
        drinking_for = time_minutes - start
        fraction = min(1.0, max(0.0, drinking_for / duration))
        ingested = grams * fraction
        elimination_minutes = drinking_for / 2.0
    else:
        ingested = grams
        elimination_minutes = time_minutes - (start + duration / 2.0)
    elimination_minutes = max(0.0, elimination_minutes)

    potential = ingested / body_water_l
    eliminated = ELIMINATION_RATE_PER_MINUTE * elimination_minutes
    return max(0.0, potential - eliminated)


def bac_at_time(time_minutes: float, drinks: Sequence[Drink], factors: PersonalFactors) -> float:
    """Blood g/L at a given time, summed over all drinks."""
    if not drinks:
        return 0.0
    body_water = body_water_litres(factors)
    if body_water <= 0:
        return 0.0
    total = sum(drink_contribution(d, time_minutes, body_water) for d in drinks)
    return max(0.0, total)


def last_drink_end_minute(drinks: Sequence[Drink]) -> float:
    """Latest end of any consumption window, never before the origin."""
    return max(0.0, max((d.end_minute for d in drinks), default=0.0))


def _simulation_end_time(drinks: Sequence[Drink], factors: PersonalFactors, last_drink_end: float) -> int:
    """Horizon in minutes: last drink end plus the longer of 12 h and a padded rough time-to-sober."""
    body_water = body_water_litres(factors)
    rough_peak = sum(drink_grams(d) / body_water for d in drinks) if body_water > 0 else 0.0
    rough_hours = (rough_peak / ELIMINATION_RATE_PER_HOUR) * ROUGH_SOBER_BUFFER if rough_peak > 0 else 0.0
    after = max(SIMULATION_MIN_HOURS_AFTER_LAST_DRINK * 60, rough_hours * 60)
    return math.ceil(last_drink_end + after)


def bac_curve(
    drinks: Sequence[Drink],
    factors: PersonalFactors,
    unit: str = BLOOD,
    step_minutes: int = SIMULATION_TIME_STEP,
) -> List[SimulationSample]:
    """Sample the concentration from t=0 until well after it returns to zero.

    Stops early once it has stayed under the sober threshold for 90 minutes
    after the last drink, and always ends on a zero sample.
    """
    if body_water_litres(factors) <= 0:
        return []
    ordered = sorted((d for d in drinks if is_valid(d)), key=lambda d: d.start_minute)
    if not ordered:
        return []

    last_drink_end = last_drink_end_minute(ordered)
    end = _simulation_end_time(ordered, factors, last_drink_end)
    sober_display = convert_bac(SIMULATION_SOBER_THRESHOLD_GL, unit)
    exit_steps = math.ceil(SIMULATION_EARLY_EXIT_MINUTES / step_minutes)

    samples: List[SimulationSample] = []
    low_steps = 0
    t = 0
    while t <= end:
        value = convert_bac(bac_at_time(t, ordered, factors), unit)
        samples.append(SimulationSample(t, value))

        if value < sober_display:
            low_steps += 1
        else:
            low_steps = 0

        if t > last_drink_end and low_steps >= exit_steps:
            last = samples[-1]
            if last.concentration > sober_display * 1.1:
                samples.append(SimulationSample(t + step_minutes, 0.0))
            elif last.concentration > 0:
                samples[-1] = SimulationSample(last.time_minutes, 0.0)
            logger.debug("BAC curve settled at t=%s min (horizon %s min)", t, end)
            break
        t += step_minutes

    if samples and samples[-1].concentration > 0:
        samples.append(SimulationSample(samples[-1].time_minutes + step_minutes, 0.0))
    return samples
