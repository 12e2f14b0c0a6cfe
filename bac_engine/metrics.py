"""Summary values read off a sampled BAC series.

All three use linear interpolation between neighbouring samples so the answer
is not quantised to the simulation step.
"""

import math
from typing import NamedTuple, Sequence

from bac_engine.calculations import SimulationSample, convert_bac
from bac_engine.constants import (
    BLOOD,
    LEGAL_LIMITS,
    SIMULATION_SOBER_THRESHOLD_GL,
    STANDARD_LIMIT,
)

# Result threshold sits a touch above the one that ends the simulation.
SOBER_RESULT_BUFFER = 1.05
# "Meaningfully above" sober, for deciding whether time-to-sober is 0.
SIGNIFICANT_FACTOR = 1.1


class Peak(NamedTuple):
    value: float
    time_minutes: float


class SoberTime(NamedTuple):
    minutes: float
    is_estimate: bool


class Summary(NamedTuple):
    peak: Peak
    time_above_limit_minutes: int
    time_to_sober: SoberTime
    legal_limit: float


def legal_limit(unit: str, kind: str = STANDARD_LIMIT) -> float:
    return LEGAL_LIMITS.get(unit, LEGAL_LIMITS[BLOOD])[kind]


def peak(samples: Sequence[SimulationSample]) -> Peak:
    """Highest concentration and the earliest time it is reached."""
    if not samples:
        return Peak(0.0, 0.0)
    best = samples[0]
    for s in samples[1:]:
        if s.concentration > best.concentration:
            best = s
    if best.concentration <= 0:
        return Peak(0.0, 0.0)
    return Peak(best.concentration, best.time_minutes)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def time_above_limit(samples: Sequence[SimulationSample], limit: float) -> int:
    """Minutes spent at or above limit, crossings interpolated, rounded to the minute."""
    if len(samples) < 2:
        return 0
    step = samples[1].time_minutes - samples[0].time_minutes
    if step <= 0:
        return 0

    minutes = 0.0
    for prev, curr in zip(samples, samples[1:]):
        prev_above = prev.concentration >= limit
        curr_above = curr.concentration >= limit
        if prev_above and curr_above:
            minutes += step
        elif curr_above:
            rise = curr.concentration - prev.concentration
            if rise > 0:
                minutes += max(0.0, step - (limit - prev.concentration) / rise * step)
            else:
                minutes += step / 2
        elif prev_above:
            fall = prev.concentration - curr.concentration
            if fall > 0:
                minutes += max(0.0, (prev.concentration - limit) / fall * step)
            else:
                minutes += step / 2
    return _round_half_up(minutes)


def time_to_sober(samples: Sequence[SimulationSample], unit: str) -> SoberTime:
    """Time of the first drop below the sober threshold.

    If the series never gets back under it, the last sample time is returned
    as a lower bound with is_estimate set.
    """
    if not samples:
        return SoberTime(0, False)

    threshold = convert_bac(SIMULATION_SOBER_THRESHOLD_GL, unit) * SOBER_RESULT_BUFFER
    ever_above = any(s.concentration >= threshold * SIGNIFICANT_FACTOR for s in samples)

    for prev, curr in zip(samples, samples[1:]):
        if prev.concentration >= threshold and curr.concentration < threshold:
            fall = prev.concentration - curr.concentration
            span = curr.time_minutes - prev.time_minutes
            if fall > 0 and span > 0:
                crossed = prev.time_minutes + (prev.concentration - threshold) / fall * span
                return SoberTime(math.ceil(crossed), False)
            return SoberTime(math.ceil(curr.time_minutes), False)

    if not ever_above:
        return SoberTime(0, False)

    last = samples[-1]
    if last.concentration < threshold:
        return SoberTime(math.ceil(last.time_minutes), False)
    return SoberTime(last.time_minutes, True)


def summarize(samples: Sequence[SimulationSample], unit: str) -> Summary:
    limit = legal_limit(unit)
    return Summary(
        peak=peak(samples),
        time_above_limit_minutes=time_above_limit(samples, limit),
        time_to_sober=time_to_sober(samples, unit),
        legal_limit=limit,
    )


def format_minutes(minutes: float) -> str:
    """'1h 30m', '45m' or '2h'."""
    if not isinstance(minutes, (int, float)) or math.isnan(minutes) or minutes < 0:
        return "0h 0m"
    hours = int(minutes // 60)
    mins = _round_half_up(minutes % 60)
    if mins == 60:
        hours, mins = hours + 1, 0
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_sober_time(sober: SoberTime) -> str:
    text = format_minutes(sober.minutes)
    return f"> {text}" if sober.is_estimate else text
