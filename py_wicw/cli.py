"""Command line entry point for offline level generation."""

import json
import sys

import structlog

from .bootstrap import build_services

logger = structlog.get_logger()


def _theme_dict(theme) -> dict:
    return {
        "world_number": theme.world_number,
        "theme_name": theme.theme_name,
        "description": theme.description,
        "ambient_color": list(theme.ambient_color),
        "music_track": theme.music_track,
        "start_level": theme.start_level,
        "end_level": theme.end_level,
    }


def main(argv=None):
    """Main function."""
    import argparse

    parser = argparse.ArgumentParser(description="Generate window cleaning levels")
    subparsers = parser.add_subparsers(dest="command", required=True)

    level_parser = subparsers.add_parser("level", help="Generate one level descriptor")
    level_parser.add_argument("index", type=int, help="Level index (1-based)")

    world_parser = subparsers.add_parser("world", help="Pre-generate every level of a world")
    world_parser.add_argument("world", type=int, help="World number")
    world_parser.add_argument("--summary", action="store_true", help="Print counts only")

    theme_parser = subparsers.add_parser("theme", help="Show a world theme")
    theme_parser.add_argument("world", type=int, help="World number")

    args = parser.parse_args(argv)

    with build_services(setup_logging=True) as services:
        orchestrator = services.orchestrator
        try:
            if args.command == "level":
                output = orchestrator.generate(args.index).to_dict()
            elif args.command == "world":
                processed = orchestrator.pre_generate_world(args.world)
                start_level, end_level = orchestrator.world_range(args.world)
                levels = [orchestrator.cached(i) for i in range(start_level, end_level + 1)]
                flagged = [d.level_index for d in levels if d is not None and not d.is_solvable]
                output = {"world_number": args.world, "processed": processed, "flagged": flagged}
                if not args.summary:
                    output["levels"] = [d.to_dict() for d in levels if d is not None]
            else:
                theme = orchestrator.get_world_theme(args.world)
                if theme is None:
                    logger.error("World not found", world=args.world)
                    return 1
                output = _theme_dict(theme)
        except ValueError as e:
            logger.error("Generation failed", error=str(e))
            return 1

    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
