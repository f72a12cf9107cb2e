import argparse
import json
import sys
from datetime import date

from lunarcal.services.daily_astronomy import generate_range
from lunarcal.services.errors import AppError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="lunarcal", description="Daily moon and sun data for a location")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="print one record per civil day")
    gen.add_argument("--start", required=True, type=date.fromisoformat)
    gen.add_argument("--end", required=True, type=date.fromisoformat)
    gen.add_argument("--lat", required=True, type=float)
    gen.add_argument("--lon", required=True, type=float)
    gen.add_argument("--json", action="store_true", help="emit a JSON array")

    args = parser.parse_args(argv)
    try:
        records = generate_range(args.start, args.end, args.lat, args.lon)
    except AppError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps([rec.to_dict() for rec in records], indent=2))
        return 0
    for rec in records:
        phase = rec.phase.value if rec.phase else "-"
        print(
            f"{rec.date.isoformat()}  {rec.percentage_visible:3d}% {'waxing' if rec.is_waxing else 'waning'}  "
            f"{phase:<13}  sun {rec.sunrise or '--:--'}-{rec.sunset or '--:--'}  "
            f"moon {rec.moonrise or '--:--'}/{rec.moonset or '--:--'}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
