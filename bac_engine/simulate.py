"""One-call pipeline: drinks + personal factors -> series and summary values."""

from dataclasses import dataclass
from typing import List, Sequence

from bac_engine.calculations import SimulationSample, bac_curve
from bac_engine.constants import BLOOD
from bac_engine.drinks import Drink, PersonalFactors
from bac_engine.metrics import Peak, SoberTime, summarize


@dataclass(frozen=True)
class SimulationResult:
    unit: str
    samples: List[SimulationSample]
    peak: Peak
    time_above_limit_minutes: int
    time_to_sober: SoberTime
    legal_limit: float


def simulate(drinks: Sequence[Drink], factors: PersonalFactors, unit: str = BLOOD) -> SimulationResult:
    """
    Run the BAC simulation from scratch and read the summaries off the series.
    No drinks or no usable weight gives an empty series with zeroed summaries.
    """
    samples = bac_curve(drinks, factors, unit)
    summary = summarize(samples, unit)
    return SimulationResult(
        unit=unit,
        samples=samples,
        peak=summary.peak,
        time_above_limit_minutes=summary.time_above_limit_minutes,
        time_to_sober=summary.time_to_sober,
        legal_limit=summary.legal_limit,
    )
