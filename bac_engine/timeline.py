"""Drink timeline: relative waits -> absolute start times, plus the edit operations.

Every function returns a new list and never touches the caller's list. Callers
keep drinks in chronological order; each edit re-resolves from the smallest
index whose timing could have changed.
"""

import logging
from dataclasses import replace
from typing import Any, List, Optional, Sequence

from bac_engine.constants import (
    DEFAULT_WAIT_TIME_MINUTES,
    MAX_ABV_PERCENT,
    MAX_DURATION_MINUTES,
    MAX_START_MINUTE,
    MAX_VOLUME_ML,
    MAX_WAIT_MINUTES,
    MIN_ABV_PERCENT,
    MIN_DURATION_MINUTES,
    MIN_VOLUME_ML,
)
from bac_engine.drinks import (
    CUSTOM,
    DRINK_DEFAULTS,
    Drink,
    duration_for_key,
    duration_minutes,
    get_preset,
    is_number,
    make_drink,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "kind",
    "duration",
    "consumption_minutes",
    "preset",
    "volume_ml",
    "abv_percent",
    "start_minute",
    "wait_after_previous_minutes",
)


def _minutes(value: Any) -> float:
    return float(value) if is_number(value) else 0.0


def _next_start(previous: Drink, wait: Any) -> float:
    return _minutes(previous.start_minute) + duration_minutes(previous) + _minutes(wait)


def resolve(drinks: Sequence[Drink], from_index: int) -> List[Drink]:
    """Recompute start_minute for drinks[from_index:] from their predecessors.

    The first drink always ends up with a zero wait. from_index 0 keeps the first
    drink's own start and walks from index 1; out-of-range indices recompute nothing.
    """
    resolved = list(drinks)
    if not resolved:
        return resolved

    if resolved[0].wait_after_previous_minutes != 0:
        resolved[0] = replace(resolved[0], wait_after_previous_minutes=0.0)

    if from_index < 0 or from_index >= len(resolved):
        return resolved

    for i in range(max(1, from_index), len(resolved)):
        prev = resolved[i - 1]
        start = _next_start(prev, resolved[i].wait_after_previous_minutes)
        if resolved[i].start_minute != start:
            resolved[i] = replace(resolved[i], start_minute=start)
    return resolved


def append_drink(drinks: Sequence[Drink], kind: str = "beer", drink_id: Optional[str] = None) -> List[Drink]:
    """Add a drink with the kind's defaults after the last one."""
    if not drinks:
        return [make_drink(kind, start_minute=0.0, wait_after_previous_minutes=0.0, drink_id=drink_id)]
    last = drinks[-1]
    wait = float(DEFAULT_WAIT_TIME_MINUTES)
    drink = make_drink(kind, start_minute=_next_start(last, wait), wait_after_previous_minutes=wait, drink_id=drink_id)
    return list(drinks) + [drink]


def find_index(drinks: Sequence[Drink], drink_id: str) -> int:
    for i, d in enumerate(drinks):
        if d.id == drink_id:
            return i
    return -1


def remove_drink(drinks: Sequence[Drink], drink_id: str) -> List[Drink]:
    index = find_index(drinks, drink_id)
    if index == -1:
        return list(drinks)

    remaining = [d for d in drinks if d.id != drink_id]
    if not remaining:
        return remaining
    if index == 0:
        # new first drink keeps its start; everyone after re-chains from it
        remaining[0] = replace(remaining[0], wait_after_previous_minutes=0.0)
        return resolve(remaining, 1)
    return resolve(remaining, index)


def _parse_numeric(value: Any, current: Any, min_value: float, max_value: float) -> Optional[float]:
    """Form-style numeric parsing: '' clears, garbage keeps the current value."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return current if current is not None else min_value
    if not is_number(parsed):
        return current if current is not None else min_value
    return max(min_value, min(max_value, parsed))


def update_drink(drinks: Sequence[Drink], drink_id: str, field: str, value: Any) -> List[Drink]:
    """Apply one field edit to the drink with drink_id and restore the timeline."""
    index = find_index(drinks, drink_id)
    if index == -1:
        return list(drinks)

    drink = drinks[index]
    resolve_from: Optional[int] = None

    if field == "kind":
        kind = str(value)
        fresh = make_drink(kind, drink_id=drink.id)
        drink = replace(
            fresh,
            start_minute=drink.start_minute,
            wait_after_previous_minutes=drink.wait_after_previous_minutes,
        )
        resolve_from = index + 1
    elif field == "duration":
        key = str(value)
        if key != CUSTOM:
            current = drink.consumption_minutes if is_number(drink.consumption_minutes) else 30.0
            drink = replace(drink, consumption_minutes=duration_for_key(key, current))
        resolve_from = index + 1
    elif field == "consumption_minutes":
        minutes = _parse_numeric(value, drink.consumption_minutes, MIN_DURATION_MINUTES, MAX_DURATION_MINUTES)
        drink = replace(drink, consumption_minutes=minutes)
        resolve_from = index + 1
    elif field == "preset":
        key = str(value)
        preset = get_preset(drink.kind, key)
        if preset is not None:
            drink = replace(drink, preset=key, volume_ml=preset.volume_ml, abv_percent=preset.abv_percent)
        elif key == CUSTOM:
            drink = replace(drink, preset=CUSTOM)
    elif field == "volume_ml":
        volume = _parse_numeric(value, drink.volume_ml, MIN_VOLUME_ML, MAX_VOLUME_ML)
        drink = replace(drink, volume_ml=volume, preset=_custom_preset(drink))
    elif field == "abv_percent":
        abv = _parse_numeric(value, drink.abv_percent, MIN_ABV_PERCENT, MAX_ABV_PERCENT)
        drink = replace(drink, abv_percent=abv, preset=_custom_preset(drink))
    elif field == "start_minute":
        # only the first drink has a free start; the rest are derived
        if index == 0:
            start = _parse_numeric(value, drink.start_minute, 0.0, MAX_START_MINUTE)
            drink = replace(drink, start_minute=start, wait_after_previous_minutes=0.0)
            resolve_from = 1
    elif field == "wait_after_previous_minutes":
        if index > 0:
            wait = _parse_numeric(value, drink.wait_after_previous_minutes, 0.0, MAX_WAIT_MINUTES)
            drink = replace(drink, wait_after_previous_minutes=wait)
            resolve_from = index
    else:
        logger.warning("Ignoring edit of unknown drink field %r", field)
        return list(drinks)

    updated = list(drinks)
    updated[index] = drink
    if resolve_from is None:
        return updated
    return resolve(updated, resolve_from)


def _custom_preset(drink: Drink) -> Optional[str]:
    return CUSTOM if drink.kind in DRINK_DEFAULTS else drink.preset
