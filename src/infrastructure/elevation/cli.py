"""Command line interface for elevation lookups."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from domain.elevation.errors import ConfigurationError
from domain.elevation.value_objects import Coordinate

from .config import ENV_PREFIX, SOURCE_FIELDS, DataDirectories
from .device_points import read_device_points, write_device_points
from .factory import build_resolver

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DATA = 1
EXIT_CONFIG = 2
EXIT_INVALID_INPUT = 3


def _resolve_log_level(args: argparse.Namespace) -> int:
    """Resolve effective logging level from explicit level or verbosity flags."""
    if args.log_level is not None:
        return getattr(logging, args.log_level)

    # Start from WARNING, then apply -v and -q offsets with DEBUG/ERROR clamp.
    level = logging.WARNING - (10 * int(args.verbose)) + (10 * int(args.quiet))
    return max(logging.DEBUG, min(logging.ERROR, level))


def _configure_logging(args: argparse.Namespace) -> None:
    effective_level = _resolve_log_level(args)
    root_logger = logging.getLogger()
    root_logger.setLevel(effective_level)
    if not root_logger.handlers:
        logging.basicConfig(level=effective_level)


def _resolve_directories(args: argparse.Namespace) -> DataDirectories:
    """Explicit flags win, then --data-root, then the environment."""
    explicit = {
        field: getattr(args, field)
        for field in SOURCE_FIELDS.values()
        if getattr(args, field) is not None
    }
    if args.data_root is not None:
        return DataDirectories.from_root(args.data_root).model_copy(update=explicit)

    # Flags count as set variables, so only the remaining sources need the env
    environ = dict(os.environ)
    for name, field in SOURCE_FIELDS.items():
        if field in explicit:
            environ[f"{ENV_PREFIX}{name}_DIR"] = str(explicit[field])
    return DataDirectories.from_env(environ)


def _format_elevation(elevation: float | None) -> str:
    return "no data" if elevation is None else f"{elevation} m"


def _cmd_lookup(args: argparse.Namespace) -> int:
    coord = Coordinate(latitude=args.latitude, longitude=args.longitude)
    with build_resolver(_resolve_directories(args)) as resolver:
        print(f"{coord.latitude},{coord.longitude}")
        for name, elevation in resolver.elevations_by_source(coord).items():
            print(f"{name} = {_format_elevation(elevation)}")
        elevation = resolver.get_elevation(coord)
    print(f"Elevation = {_format_elevation(elevation)}")
    return EXIT_OK if elevation is not None else EXIT_NO_DATA


def _cmd_update(args: argparse.Namespace) -> int:
    points = read_device_points(args.input)
    with build_resolver(
        _resolve_directories(args), max_open_tiles=args.max_open_tiles
    ) as resolver:
        resolver.update_elevations(points)
    write_device_points(points, args.output)
    log.info("Wrote %d points to %s", len(points), Path(args.output).name)
    return EXIT_OK


def _add_directory_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("data directories")
    group.add_argument(
        "--data-root",
        type=Path,
        help="Directory holding NED1/, NED2/, SRTM1/ and SRTM3/ subdirectories",
    )
    for name, field in SOURCE_FIELDS.items():
        group.add_argument(
            f"--{field}", type=Path, help=f"{name} tile directory (overrides root)"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geo-elevation",
        description="Ground elevation from NED/SRTM tiles.",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging"
    )
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less logging")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Explicit log level (overrides -v/-q)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser(
        "lookup", help="Print every source's elevation and the resolved one"
    )
    lookup.add_argument("latitude", type=float)
    lookup.add_argument("longitude", type=float)
    _add_directory_options(lookup)
    lookup.set_defaults(func=_cmd_lookup)

    update = subparsers.add_parser(
        "update", help="Fill calculated altitude on a device point XML file"
    )
    update.add_argument("input", type=Path, help="ArrayOfDevicePoint XML to read")
    update.add_argument("output", type=Path, help="Where to write the updated XML")
    update.add_argument(
        "--max-open-tiles",
        type=int,
        default=None,
        help="Bound open tile handles per source (LRU)",
    )
    _add_directory_options(update)
    update.set_defaults(func=_cmd_update)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)
    try:
        return args.func(args)
    except ConfigurationError as e:
        log.error("%s", e)
        return EXIT_CONFIG
    except ValueError as e:
        log.error("%s", e)
        return EXIT_INVALID_INPUT
    except OSError as e:
        name = Path(e.filename).name if e.filename else "<unknown>"
        log.error(
            "Cannot access %s (errno=%s, strerror=%s)", name, e.errno, e.strerror
        )
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
