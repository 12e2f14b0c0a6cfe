"""
BAC timeline engine: time-stepped Widmark simulation, drink timeline and summaries.
Use from project root: python -m bac_engine.main
"""

from bac_engine.drinks import (
    DRINK_DEFAULTS,
    Drink,
    PersonalFactors,
    grams_from_volume_abv,
    list_drink_kinds,
)
from bac_engine.timeline import append_drink, remove_drink, resolve, update_drink
from bac_engine.calculations import (
    SimulationSample,
    bac_at_time,
    bac_curve,
    convert_bac,
    drink_contribution,
)
from bac_engine.metrics import peak, time_above_limit, time_to_sober
from bac_engine.simulate import SimulationResult, simulate
from bac_engine.session import Session
from bac_engine.graph import curve_data

__all__ = [
    "Session",
    "Drink",
    "PersonalFactors",
    "SimulationSample",
    "SimulationResult",
    "simulate",
    "resolve",
    "append_drink",
    "remove_drink",
    "update_drink",
    "drink_contribution",
    "bac_at_time",
    "bac_curve",
    "convert_bac",
    "peak",
    "time_above_limit",
    "time_to_sober",
    "curve_data",
    "grams_from_volume_abv",
    "list_drink_kinds",
    "DRINK_DEFAULTS",
]
