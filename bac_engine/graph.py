"""
BAC-over-time chart data. Rendering is left to the frontend.
"""

from typing import Dict, List, Sequence, Union

from bac_engine.calculations import SimulationSample
from bac_engine.metrics import format_minutes


def curve_data(samples: Sequence[SimulationSample]) -> List[Dict[str, Union[float, str]]]:
    """Series points for any chart frontend (web, mobile)."""
    return [
        {
            "time_minutes": s.time_minutes,
            "bac": s.concentration,
            "time_formatted": format_minutes(s.time_minutes),
        }
        for s in samples
    ]
