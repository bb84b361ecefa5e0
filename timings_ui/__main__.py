import argparse
import logging

from timings import Controls
from timings.controls import SCALE_DEFAULT

from .app import run
from .theme import DPR_DEFAULT


def main(argv=None):
    parser = argparse.ArgumentParser(prog="timings_ui", description="Interactive build timings viewer")
    parser.add_argument("path", nargs="?", help="timings JSON file (built-in sample when omitted)")
    parser.add_argument("--scale", type=float, default=SCALE_DEFAULT, help="pixels per second")
    parser.add_argument("--min-unit-time", type=float, default=0.0, help="hide units shorter than this (s)")
    parser.add_argument("--dpr", type=float, default=DPR_DEFAULT, help="device pixel ratio")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        controls = Controls(min_unit_time=args.min_unit_time, scale=args.scale)
    except ValueError as exc:
        parser.error(str(exc))
    run(args.path, controls, dpr=args.dpr)


if __name__ == "__main__":
    main()
