"""Command-line entry point: ``python -m gravity_stars``."""
import argparse
import logging
from dataclasses import replace

from .config import DEFAULT_CONFIG, BoundaryMode, PhysicsMode


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Hold to grow a star, flick to launch it.")
    parser.add_argument("--width", type=int, default=1200)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--no-wrap", action="store_true", help="let stars leave the screen")
    parser.add_argument("--orbit-playground", action="store_true",
                        help="no damping, speed ceiling or merging")
    parser.add_argument("--no-merge", action="store_true", help="disable merging")
    parser.add_argument("--max-stars", type=int, default=DEFAULT_CONFIG.max_stars)
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def build_config(args):
    return replace(
        DEFAULT_CONFIG,
        boundary_mode=BoundaryMode.NONE if args.no_wrap else BoundaryMode.WRAP,
        physics_mode=PhysicsMode.ORBIT_PLAYGROUND if args.orbit_playground else PhysicsMode.N_BODY,
        enable_merging=not args.no_merge,
        max_stars=args.max_stars,
    ).validated()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # Imported late so --help works without a display
    from .app import run
    run(args.width, args.height, build_config(args), fps=args.fps)


if __name__ == "__main__":
    main()
