"""Drive-risk advisory helpers.

Conservative messaging for driving decisions based on an estimated
concentration in the selected unit. Educational only; it never guarantees
legal or safe driving.
"""

from bac_engine.calculations import to_blood_gl
from bac_engine.constants import (
    BLOOD,
    NOVICE_PRO_LIMIT,
    SIMULATION_SOBER_THRESHOLD_GL,
    STANDARD_LIMIT,
)
from bac_engine.metrics import legal_limit


def get_drive_advice(concentration: float, unit: str = BLOOD, novice: bool = False) -> dict:
    """Return drive-risk guidance for a concentration in `unit`.

    novice selects the stricter limit for new and professional drivers.
    """
    limit_kind = NOVICE_PRO_LIMIT if novice else STANDARD_LIMIT
    limit = legal_limit(unit, limit_kind)
    stricter = legal_limit(unit, NOVICE_PRO_LIMIT)

    if concentration >= limit:
        return {
            "status": "do_not_drive",
            "title": "Above legal limit",
            "message": f"Estimated level is at or above the {limit} limit. Do not drive.",
            "action": "Use a taxi, public transport or a sober driver.",
            "legal_limit": limit,
        }

    if not novice and concentration >= stricter:
        return {
            "status": "do_not_drive",
            "title": "Likely impaired",
            "message": "Estimated level is below the standard limit but above the novice/professional one.",
            "action": "Do not drive. Wait and recheck.",
            "legal_limit": limit,
        }

    if to_blood_gl(concentration, unit) >= SIMULATION_SOBER_THRESHOLD_GL:
        return {
            "status": "caution",
            "title": "Residual alcohol",
            "message": "Estimated level is low but not zero.",
            "action": "Safest choice is still not to drive.",
            "legal_limit": limit,
        }

    return {
        "status": "ok",
        "title": "No alcohol detected",
        "message": "Estimated level is effectively zero.",
        "action": "If you have not consumed alcohol, impairment risk is lower.",
        "legal_limit": limit,
    }
