"""
BAC timeline CLI demo. Run from project root: python -m bac_engine.main
Builds a sample session, prints the summary values and a coarse curve.
"""

import argparse
import logging
import sys

from bac_engine.constants import BLOOD, FEMALE, MALE, UNITS
from bac_engine.drive import get_drive_advice
from bac_engine.graph import curve_data
from bac_engine.metrics import format_minutes, format_sober_time
from bac_engine.session import Session


def build_demo_session(weight_kg: float, gender: str, unit: str) -> Session:
    """Two beers and a glass of wine with the default 20-minute gaps."""
    session = Session(weight_kg=weight_kg, gender=gender, unit=unit)
    session.add_drink("beer")
    session.add_drink("beer")
    session.add_drink("wine")
    return session


def main():
    parser = argparse.ArgumentParser(description="BAC timeline: simulate concentration over a drinking session")
    parser.add_argument("--weight", type=float, default=75.0, help="Body weight (kg)")
    parser.add_argument("--female", action="store_true", help="Female (default male)")
    parser.add_argument("--unit", choices=UNITS, default=BLOOD, help="blood (g/L) or breath (mg/L)")
    parser.add_argument("--every", type=int, default=60, metavar="MIN", help="Print one curve point every MIN minutes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    session = build_demo_session(args.weight, FEMALE if args.female else MALE, args.unit)
    label = "g/L" if args.unit == BLOOD else "mg/L"
    print(f"Demo session: {len(session.drinks)} drinks, {session.weight_kg} kg {session.gender}")
    for d in session.drinks:
        print(f"  {d.kind:<8} {d.volume_ml:.0f} ml @ {d.abv_percent}%  starts {format_minutes(d.start_minute)}")

    result = session.result()
    if not result.samples:
        print("Nothing to simulate.")
        return 0

    print(f"Peak: {result.peak.value:.3f} {label} at {format_minutes(result.peak.time_minutes)}")
    print(f"Above legal limit ({result.legal_limit} {label}): {format_minutes(result.time_above_limit_minutes)}")
    print(f"Time to sober: {format_sober_time(result.time_to_sober)}")
    advice = get_drive_advice(result.peak.value, args.unit)
    print(f"At peak: {advice['title']}. {advice['action']}")

    every = max(1, args.every)
    for point in curve_data(result.samples):
        if point["time_minutes"] % every == 0:
            print(f"  {point['time_formatted']:>8}  {point['bac']:.3f}")
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
