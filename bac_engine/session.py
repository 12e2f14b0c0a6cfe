"""
Drinking session: personal factors, display unit and the drink timeline.
Time: minutes from the session origin (0).
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from bac_engine import timeline
from bac_engine.calculations import bac_at_time, convert_bac
from bac_engine.constants import BLOOD, MALE, UNITS
from bac_engine.drinks import Drink, PersonalFactors
from bac_engine.simulate import SimulationResult, simulate


@dataclass
class Session:
    weight_kg: float
    gender: str = MALE
    unit: str = BLOOD
    drinks: Tuple[Drink, ...] = field(default_factory=tuple)

    @property
    def factors(self) -> PersonalFactors:
        return PersonalFactors(gender=self.gender, weight_kg=self.weight_kg)

    def add_drink(self, kind: str = "beer", drink_id: Optional[str] = None) -> Drink:
        self.drinks = tuple(timeline.append_drink(self.drinks, kind, drink_id=drink_id))
        return self.drinks[-1]

    def remove_drink(self, drink_id: str) -> None:
        self.drinks = tuple(timeline.remove_drink(self.drinks, drink_id))

    def update_drink(self, drink_id: str, field_name: str, value: Any) -> None:
        self.drinks = tuple(timeline.update_drink(self.drinks, drink_id, field_name, value))

    def set_unit(self, unit: str) -> None:
        if unit in UNITS:
            self.unit = unit

    def bac_at(self, time_minutes: float) -> float:
        """Concentration in the session's display unit at one instant."""
        return convert_bac(bac_at_time(time_minutes, self.drinks, self.factors), self.unit)

    def result(self) -> SimulationResult:
        return simulate(self.drinks, self.factors, self.unit)
