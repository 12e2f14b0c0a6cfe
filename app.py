"""BAC timeline Flask API.

Stateless: every request carries the full drink list and gets the new list or
the simulation back.

Run from project root:
    python app.py
"""

import math
import os
from typing import Any

from flask import Flask, jsonify, request

from bac_engine import timeline
from bac_engine.calculations import bac_at_time, convert_bac
from bac_engine.constants import (
    BLOOD,
    FEMALE,
    LEGAL_LIMITS,
    MALE,
    MAX_ABV_PERCENT,
    MAX_DURATION_MINUTES,
    MAX_START_MINUTE,
    MAX_VOLUME_ML,
    MAX_WAIT_MINUTES,
    MIN_ABV_PERCENT,
    MIN_DURATION_MINUTES,
    UNITS,
)
from bac_engine.drinks import Drink, PersonalFactors, new_drink_id, presets_payload
from bac_engine.drive import get_drive_advice
from bac_engine.graph import curve_data
from bac_engine.metrics import format_minutes, format_sober_time
from bac_engine.simulate import simulate

app = Flask(__name__)

MIN_WEIGHT_KG = 30.0
MAX_WEIGHT_KG = 400.0
DEFAULT_MAX_DRINKS = 50


def _max_drinks() -> int:
    try:
        return max(1, int(os.environ.get("BAC_MAX_DRINKS", DEFAULT_MAX_DRINKS)))
    except ValueError:
        return DEFAULT_MAX_DRINKS


def _default_unit() -> str:
    unit = os.environ.get("BAC_DEFAULT_UNIT", BLOOD)
    return unit if unit in UNITS else BLOOD


def _parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "y"}:
            return True
        if lowered in {"false", "0", "no", "n"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _optional_float(value: Any) -> float | None:
    """Numbers and numeric strings -> float; blanks and garbage -> None."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _clamp_float(value: Any, min_value: float, max_value: float) -> float | None:
    """Like _optional_float, then clamped into [min_value, max_value]. Blanks stay None."""
    parsed = _optional_float(value)
    if parsed is None:
        return None
    return max(min_value, min(max_value, parsed))


def _drink_from_json(raw: Any) -> Drink | None:
    if not isinstance(raw, dict):
        return None
    return Drink(
        id=str(raw.get("id") or new_drink_id()),
        kind=str(raw.get("kind", "beer")),
        volume_ml=_clamp_float(raw.get("volume_ml"), 0.0, MAX_VOLUME_ML),
        abv_percent=_clamp_float(raw.get("abv_percent"), MIN_ABV_PERCENT, MAX_ABV_PERCENT),
        consumption_minutes=_clamp_float(raw.get("consumption_minutes"), MIN_DURATION_MINUTES, MAX_DURATION_MINUTES),
        start_minute=_clamp_float(raw.get("start_minute"), 0.0, MAX_START_MINUTE),
        wait_after_previous_minutes=_clamp_float(raw.get("wait_after_previous_minutes"), 0.0, MAX_WAIT_MINUTES),
        preset=raw.get("preset") if isinstance(raw.get("preset"), str) else None,
    )


def _drink_to_json(drink: Drink) -> dict[str, Any]:
    return {
        "id": drink.id,
        "kind": drink.kind,
        "volume_ml": drink.volume_ml,
        "abv_percent": drink.abv_percent,
        "consumption_minutes": drink.consumption_minutes,
        "start_minute": drink.start_minute,
        "wait_after_previous_minutes": drink.wait_after_previous_minutes,
        "preset": drink.preset,
    }


def _drinks_from_request(data: dict[str, Any]) -> tuple[list[Drink] | None, str | None]:
    raw = data.get("drinks", [])
    if not isinstance(raw, list):
        return None, "drinks must be a list"
    if len(raw) > _max_drinks():
        return None, f"At most {_max_drinks()} drinks are supported"
    drinks = [d for d in (_drink_from_json(item) for item in raw) if d is not None]
    return drinks, None


def _drinks_response(drinks: list[Drink]):
    return jsonify({"drinks": [_drink_to_json(d) for d in drinks]})


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/presets")
def api_presets():
    payload = presets_payload()
    payload["units"] = list(UNITS)
    payload["default_unit"] = _default_unit()
    payload["legal_limits"] = LEGAL_LIMITS
    return jsonify(payload)


@app.route("/api/drinks/add", methods=["POST"])
def api_drinks_add():
    data = request.get_json(silent=True) or {}
    drinks, error = _drinks_from_request(data)
    if error:
        return jsonify({"error": error}), 400
    if len(drinks) >= _max_drinks():
        return jsonify({"error": f"At most {_max_drinks()} drinks are supported"}), 400
    kind = str(data.get("kind", "beer")).strip().lower() or "beer"
    return _drinks_response(timeline.append_drink(drinks, kind))


@app.route("/api/drinks/remove", methods=["POST"])
def api_drinks_remove():
    data = request.get_json(silent=True) or {}
    drinks, error = _drinks_from_request(data)
    if error:
        return jsonify({"error": error}), 400
    drink_id = str(data.get("id", "")).strip()
    if not drink_id:
        return jsonify({"error": "id is required"}), 400
    return _drinks_response(timeline.remove_drink(drinks, drink_id))


@app.route("/api/drinks/update", methods=["POST"])
def api_drinks_update():
    data = request.get_json(silent=True) or {}
    drinks, error = _drinks_from_request(data)
    if error:
        return jsonify({"error": error}), 400
    drink_id = str(data.get("id", "")).strip()
    field = str(data.get("field", "")).strip()
    if field not in timeline.EDITABLE_FIELDS:
        return jsonify({"error": f"Unknown field: {field or '(missing)'}"}), 400
    if timeline.find_index(drinks, drink_id) == -1:
        return jsonify({"error": "Drink not found"}), 404
    return _drinks_response(timeline.update_drink(drinks, drink_id, field, data.get("value")))


@app.route("/api/simulate", methods=["POST"])
def api_simulate():
    data = request.get_json(silent=True) or {}
    drinks, error = _drinks_from_request(data)
    if error:
        return jsonify({"error": error}), 400

    gender = str(data.get("gender", MALE)).strip().lower()
    if gender not in {MALE, FEMALE}:
        return jsonify({"error": "Gender must be male or female"}), 400
    weight = _optional_float(data.get("weight_kg"))
    if weight is None:
        return jsonify({"error": "Weight is required"}), 400
    if weight > 0:
        # non-positive weight is passed through and yields an empty series
        weight = max(MIN_WEIGHT_KG, min(weight, MAX_WEIGHT_KG))
    unit = str(data.get("unit") or _default_unit()).strip().lower()
    if unit not in UNITS:
        return jsonify({"error": "Unit must be blood or breath"}), 400
    novice = _parse_bool(data.get("novice"), default=False)

    factors = PersonalFactors(gender=gender, weight_kg=weight)
    result = simulate(drinks, factors, unit)
    app.logger.debug("Simulated %d drinks into %d samples", len(drinks), len(result.samples))

    body: dict[str, Any] = {
        "unit": unit,
        "legal_limit": result.legal_limit,
        "samples": curve_data(result.samples),
        "peak": {
            "value": result.peak.value,
            "time_minutes": result.peak.time_minutes,
            "formatted": format_minutes(result.peak.time_minutes),
        },
        "time_above_limit": {
            "minutes": result.time_above_limit_minutes,
            "formatted": format_minutes(result.time_above_limit_minutes),
        },
        "time_to_sober": {
            "minutes": result.time_to_sober.minutes,
            "is_estimate": result.time_to_sober.is_estimate,
            "formatted": format_sober_time(result.time_to_sober),
        },
    }

    at_minute = _optional_float(data.get("at_minute"))
    if at_minute is not None:
        now = convert_bac(bac_at_time(at_minute, drinks, factors), unit)
        body["at"] = {
            "time_minutes": at_minute,
            "bac": now,
            "drive_advice": get_drive_advice(now, unit, novice=novice),
        }
    return jsonify(body)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
