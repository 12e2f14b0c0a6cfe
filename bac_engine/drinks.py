"""Drink records, personal factors and the preset tables used to fill them in.

Volumes are mL, strength is ABV percent (5.0 for 5%), times are minutes.
"""

import math
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from bac_engine.constants import (
    DISTRIBUTION_FACTOR,
    ETHANOL_DENSITY,
    MALE,
    MIN_DURATION_MINUTES,
)

CUSTOM = "custom"


@dataclass(frozen=True)
class Drink:
    """One consumption event.

    start_minute is derived from the previous drink for every drink but the
    first; wait_after_previous_minutes is always 0 for the first drink.
    Numeric fields may be None while the user is still typing.
    """

    id: str
    kind: str
    volume_ml: Optional[float]
    abv_percent: Optional[float]
    consumption_minutes: Optional[float]
    start_minute: Optional[float] = 0.0
    wait_after_previous_minutes: Optional[float] = 0.0
    preset: Optional[str] = None

    @property
    def end_minute(self) -> float:
        return (self.start_minute or 0.0) + duration_minutes(self)


@dataclass(frozen=True)
class PersonalFactors:
    gender: str = MALE
    weight_kg: Optional[float] = None


@dataclass(frozen=True)
class DrinkDefaults:
    """A drink category with default volume, strength, duration and preset."""

    kind: str
    name: str
    volume_ml: float
    abv_percent: float
    duration: str  # key into DURATION_OPTIONS
    preset: str


@dataclass(frozen=True)
class Preset:
    key: str
    name: str
    volume_ml: float
    abv_percent: float


DRINK_DEFAULTS: Dict[str, DrinkDefaults] = {
    "beer": DrinkDefaults("beer", "Beer", 330.0, 5.0, "normal", "tercio"),
    "wine": DrinkDefaults("wine", "Wine", 150.0, 12.0, "normal", "copa"),
    "spirits": DrinkDefaults("spirits", "Mixed drink", 50.0, 40.0, "short", "standard"),
}

# (minutes, label). "hidalgo" is a single gulp; the 1-minute floor applies.
DURATION_OPTIONS: Dict[str, Tuple[float, str]] = {
    "hidalgo": (0.1, "Hidalgo (0 min)"),
    "immediate": (5.0, "Fast (5 min)"),
    "short": (10.0, "Short (10 min)"),
    "normal": (30.0, "Normal (30 min)"),
    "long": (60.0, "Long (1 hr)"),
    "extended": (120.0, "Extended (2 hr)"),
}

PRESETS: Dict[str, Dict[str, Preset]] = {
    "beer": {
        "quinto": Preset("quinto", "Quinto/Caña (200ml, 5.2%)", 200.0, 5.2),
        "tercio": Preset("tercio", "Tercio (330ml, 5.2%)", 330.0, 5.2),
        "cana": Preset("cana", "Caña doble (400ml, 5.2%)", 400.0, 5.2),
        "pinta": Preset("pinta", "Pinta (500ml, 5.2%)", 500.0, 5.2),
    },
    "wine": {
        "chatejo": Preset("chatejo", "Chatejo (75ml, 12%)", 75.0, 12.0),
        "copa": Preset("copa", "Copa (150ml, 12%)", 150.0, 12.0),
        "doble": Preset("doble", "Copa generosa (250ml, 12%)", 250.0, 12.0),
    },
    "spirits": {
        "standard": Preset("standard", "Cubata (50ml, 40%)", 50.0, 40.0),
        "double": Preset("double", "Doble (100ml, 40%)", 100.0, 40.0),
        "triple": Preset("triple", "Triple (150ml, 40%)", 150.0, 40.0),
    },
}


def is_number(value: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def grams_from_volume_abv(volume_ml: Any, abv_percent: Any) -> float:
    """Convert mL and ABV percent to grams of ethanol. Invalid input -> 0."""
    volume = volume_ml if is_number(volume_ml) else 0.0
    abv = abv_percent if is_number(abv_percent) else 0.0
    return volume * (abv / 100.0) * ETHANOL_DENSITY


def drink_grams(drink: Drink) -> float:
    return grams_from_volume_abv(drink.volume_ml, drink.abv_percent)


def duration_minutes(drink: Drink) -> float:
    """Consumption window length, never shorter than one minute."""
    minutes = drink.consumption_minutes
    if not is_number(minutes) or minutes <= 0:
        return float(MIN_DURATION_MINUTES)
    return max(float(MIN_DURATION_MINUTES), float(minutes))


def duration_for_key(key: str, default: float = 30.0) -> float:
    option = DURATION_OPTIONS.get(key)
    return option[0] if option else default


def is_valid(drink: Drink) -> bool:
    """Whether every numeric field the simulation reads is usable."""
    return all(
        is_number(v)
        for v in (drink.volume_ml, drink.abv_percent, drink.start_minute, drink.wait_after_previous_minutes)
    )


def body_water_litres(factors: PersonalFactors) -> float:
    """Weight x Widmark r. 0 for unusable weight."""
    weight = factors.weight_kg
    if not is_number(weight) or weight <= 0:
        return 0.0
    r = DISTRIBUTION_FACTOR.get(factors.gender, DISTRIBUTION_FACTOR[MALE])
    return weight * r


def new_drink_id() -> str:
    return uuid.uuid4().hex


def make_drink(
    kind: str = "beer",
    start_minute: float = 0.0,
    wait_after_previous_minutes: float = 0.0,
    drink_id: Optional[str] = None,
) -> Drink:
    """Build a drink from the kind's defaults. Unknown kinds fall back to beer values."""
    defaults = DRINK_DEFAULTS.get(kind, DRINK_DEFAULTS["beer"])
    return Drink(
        id=drink_id or new_drink_id(),
        kind=kind,
        volume_ml=defaults.volume_ml,
        abv_percent=defaults.abv_percent,
        consumption_minutes=duration_for_key(defaults.duration),
        start_minute=start_minute,
        wait_after_previous_minutes=wait_after_previous_minutes,
        preset=defaults.preset if kind in DRINK_DEFAULTS else None,
    )


def get_preset(kind: str, key: str) -> Optional[Preset]:
    return PRESETS.get(kind, {}).get(key)


def list_drink_kinds() -> List[Tuple[str, str]]:
    """Return list of (kind, name) for UI dropdowns."""
    return [(d.kind, d.name) for d in DRINK_DEFAULTS.values()]


def presets_payload() -> Dict[str, Any]:
    """Preset tables as plain dicts for a UI."""
    return {
        "kinds": {
            d.kind: {
                "name": d.name,
                "volume_ml": d.volume_ml,
                "abv_percent": d.abv_percent,
                "duration": d.duration,
                "preset": d.preset,
            }
            for d in DRINK_DEFAULTS.values()
        },
        "durations": {key: {"minutes": m, "name": name} for key, (m, name) in DURATION_OPTIONS.items()},
        "presets": {
            kind: [
                {"key": p.key, "name": p.name, "volume_ml": p.volume_ml, "abv_percent": p.abv_percent}
                for p in entries.values()
            ]
            for kind, entries in PRESETS.items()
        },
    }
