"""Tests for the BAC math and the simulation. Run from project root: pytest tests/ -v"""
import pytest

from bac_engine.calculations import (
    SimulationSample,
    bac_at_time,
    bac_curve,
    convert_bac,
    drink_contribution,
    to_blood_gl,
)
from bac_engine.constants import BLOOD, BREATH, ELIMINATION_RATE_PER_HOUR
from bac_engine.drinks import Drink, PersonalFactors, body_water_litres, drink_grams, make_drink
from bac_engine.session import Session
from bac_engine.simulate import simulate
from bac_engine.timeline import resolve

MALE_75 = PersonalFactors(gender="male", weight_kg=75)


def beer(start=0.0, volume=330.0, abv=5.0, minutes=30.0, drink_id="b1"):
    return Drink(drink_id, "beer", volume, abv, minutes, start_minute=start)


def test_grams_and_body_water():
    assert drink_grams(beer()) == pytest.approx(330 * 0.05 * 0.789)
    assert body_water_litres(MALE_75) == pytest.approx(51.0)
    assert body_water_litres(PersonalFactors("female", 60)) == pytest.approx(33.0)
    assert body_water_litres(PersonalFactors("male", 0)) == 0.0


def test_contribution_inside_and_after_window():
    grams = 330 * 0.05 * 0.789
    # halfway through: half the grams, elimination over a quarter of the window
    mid = drink_contribution(beer(), 15, 51.0)
    assert mid == pytest.approx(grams / 2 / 51.0 - 0.0025 * 7.5)
    # after: elimination counted from the window midpoint
    after = drink_contribution(beer(), 60, 51.0)
    assert after == pytest.approx(grams / 51.0 - 0.0025 * 45)


def test_contribution_zero_before_start_and_for_empty_drinks():
    assert drink_contribution(beer(start=60), 60, 51.0) == 0.0
    assert drink_contribution(beer(start=60), 10, 51.0) == 0.0
    assert drink_contribution(beer(abv=0.0), 20, 51.0) == 0.0
    assert drink_contribution(beer(volume=None), 20, 51.0) == 0.0


def test_zero_minute_drink_uses_one_minute_floor():
    gulp = beer(minutes=0.0)
    assert drink_contribution(gulp, 1, 51.0) == pytest.approx(drink_grams(gulp) / 51.0 - 0.0025 * 0.5)


def test_scenario_single_beer():
    drinks = [beer()]
    peak_result = simulate(drinks, MALE_75).peak
    assert peak_result.time_minutes >= 30
    assert peak_result.value == pytest.approx(bac_at_time(30, drinks, MALE_75))
    # linear elimination after the window closes
    drop = bac_at_time(40, drinks, MALE_75) - bac_at_time(100, drinks, MALE_75)
    assert drop == pytest.approx(ELIMINATION_RATE_PER_HOUR)
    assert bac_at_time(1000, drinks, MALE_75) == 0.0


def test_single_beer_series_shape():
    result = simulate([beer()], MALE_75)
    samples = result.samples
    times = [s.time_minutes for s in samples]
    assert times[0] == 0
    assert all(b - a == 5 for a, b in zip(times, times[1:]))
    # settles 90 minutes after dropping under the threshold at t=120
    assert times[-1] == 205
    assert samples[-1].concentration == 0.0
    assert result.time_to_sober.minutes == 116
    assert result.time_to_sober.is_estimate is False
    assert result.time_above_limit_minutes == 0


def test_scenario_timeline_wait():
    first = Drink("a", "beer", 330, 5, 30, start_minute=0)
    second = Drink("b", "beer", 330, 5, 30, start_minute=0, wait_after_previous_minutes=20)
    resolved = resolve([first, second], 1)
    assert resolved[1].start_minute == 50


@pytest.mark.parametrize(
    "drinks,factors",
    [
        ([], MALE_75),
        ([beer()], PersonalFactors("male", 0)),
        ([beer()], PersonalFactors("male", None)),
        ([beer(volume=None)], MALE_75),
    ],
)
def test_scenario_empty_inputs(drinks, factors):
    result = simulate(drinks, factors)
    assert result.samples == []
    assert result.peak == (0.0, 0.0)
    assert result.time_above_limit_minutes == 0
    assert result.time_to_sober.minutes == 0
    assert result.time_to_sober.is_estimate is False


def test_scenario_above_limit_matches_crossings():
    wine = Drink("w", "wine", 500, 12, 30, start_minute=0)
    result = simulate([wine], MALE_75)
    potential = 500 * 0.12 * 0.789 / 51.0
    rising_cross = 0.5 / (potential / 30 - 0.00125)
    falling_cross = 15 + (potential - 0.5) / 0.0025
    assert result.time_above_limit_minutes > 0
    assert abs(result.time_above_limit_minutes - (falling_cross - rising_cross)) <= 1


def test_bac_never_negative_and_zero_before_first_start():
    drinks = resolve(
        [
            Drink("a", "beer", 500, 5.2, 30, start_minute=60),
            Drink("b", "spirits", 50, 40, 10, wait_after_previous_minutes=20),
            Drink("c", "wine", 150, 12, 60, wait_after_previous_minutes=90),
        ],
        1,
    )
    for t in range(0, 61, 5):
        assert bac_at_time(t, drinks, MALE_75) == 0.0
    for t in range(0, 1500, 7):
        assert bac_at_time(t, drinks, MALE_75) >= 0.0


def test_peak_grows_with_volume_and_abv():
    peaks = [simulate([beer(volume=v)], MALE_75).peak.value for v in (100, 200, 330, 500, 1000)]
    assert peaks == sorted(peaks)
    peaks = [simulate([beer(abv=a)], MALE_75).peak.value for a in (1, 3, 5, 8, 12)]
    assert peaks == sorted(peaks)


def test_breath_unit_conversion():
    assert convert_bac(0.5, BLOOD) == 0.5
    assert convert_bac(0.525, BREATH) == pytest.approx(0.25)
    for value in (0.0, 0.13, 0.5, 1.7):
        assert to_blood_gl(convert_bac(value, BREATH), BREATH) == pytest.approx(value)

    blood = simulate([beer()], MALE_75, BLOOD)
    breath = simulate([beer()], MALE_75, BREATH)
    assert breath.peak.value == pytest.approx(blood.peak.value * 1000 / 2100)
    assert breath.legal_limit == 0.25


def test_simulation_is_deterministic_and_sorts_input():
    late = beer(start=120, drink_id="late")
    early = beer(start=0, drink_id="early")
    a = bac_curve([late, early], MALE_75)
    b = bac_curve([early, late], MALE_75)
    assert a == b
    assert all(isinstance(s, SimulationSample) for s in a)


def test_session_edits_and_result():
    s = Session(weight_kg=75, gender="male")
    first = s.add_drink("beer")
    second = s.add_drink("wine")
    assert second.start_minute == 50
    s.update_drink(first.id, "consumption_minutes", 60)
    assert s.drinks[1].start_minute == 80
    assert s.bac_at(0) == 0.0
    assert s.result().peak.value > 0
    s.set_unit("furlongs")
    assert s.unit == BLOOD
    s.remove_drink(first.id)
    assert len(s.drinks) == 1
    assert s.drinks[0].wait_after_previous_minutes == 0


def test_drive_advice_bands():
    from bac_engine.drive import get_drive_advice

    assert get_drive_advice(0.6)["title"] == "Above legal limit"
    assert get_drive_advice(0.4)["title"] == "Likely impaired"
    assert get_drive_advice(0.4, novice=True)["title"] == "Above legal limit"
    assert get_drive_advice(0.1)["status"] == "caution"
    assert get_drive_advice(0.0)["status"] == "ok"
    assert get_drive_advice(0.2, BREATH)["title"] == "Likely impaired"
    assert get_drive_advice(0.2, BREATH)["legal_limit"] == 0.25


def test_make_drink_defaults():
    d = make_drink("spirits")
    assert (d.volume_ml, d.abv_percent, d.consumption_minutes, d.preset) == (50.0, 40.0, 10.0, "standard")
    unknown = make_drink("cider")
    assert unknown.kind == "cider"
    assert unknown.volume_ml == 330.0
    assert unknown.preset is None


def test_last_drink_end_never_before_origin():
    from bac_engine.calculations import last_drink_end_minute

    assert last_drink_end_minute([beer(start=-100)]) == 0.0
    assert last_drink_end_minute([beer(start=-100), beer(start=10)]) == 40.0
    assert last_drink_end_minute([]) == 0.0
