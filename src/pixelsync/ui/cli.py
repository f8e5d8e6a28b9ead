from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pixelsync.adapters.geojson_surface import GeoJsonSurface
from pixelsync.app import boot_territories, load_all_territories, refresh_territories
from pixelsync.common import configure_logging
from pixelsync.config import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile territory overlays with the store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_surface_args(command: argparse.ArgumentParser) -> None:
        command.add_argument(
            "--geojson",
            type=Path,
            action="append",
            required=True,
            help="GeoJSON feature collection to load as a surface layer (repeatable)",
        )
        command.add_argument(
            "--out",
            type=Path,
            help="Directory to write the resulting overlay PNGs into",
        )

    refresh = subparsers.add_parser("refresh", help="Reconcile specific territories")
    refresh.add_argument("territory_ids", nargs="+", help="Territory ids to reconcile")
    refresh.add_argument(
        "--force",
        action="store_true",
        help="Bypass and clear cached canvases before reading",
    )
    add_surface_args(refresh)

    load = subparsers.add_parser("load", help="Reconcile all owned or painted territories")
    add_surface_args(load)

    boot = subparsers.add_parser("boot", help="Progressively reconcile territories")
    boot.add_argument("territory_ids", nargs="+", help="Territory ids, most important first")
    add_surface_args(boot)

    return parser.parse_args(list(argv))


def _load_surface(paths: Sequence[Path]) -> GeoJsonSurface:
    missing = [str(path) for path in paths if not path.is_file()]
    if missing:
        raise ValueError(f"GeoJSON file not found: {', '.join(missing)}")
    return GeoJsonSurface.from_files(paths)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        surface = _load_surface(parsed_args.geojson)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.verbose:
        configure_logging(level=logging.DEBUG, force=True)

    try:
        if parsed_args.command == "refresh":
            refresh_territories(
                parsed_args.territory_ids,
                surface=surface,
                force_refresh=parsed_args.force,
            )
        elif parsed_args.command == "load":
            load_all_territories(surface=surface)
        elif parsed_args.command == "boot":
            boot_territories(parsed_args.territory_ids, surface=surface)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

        if parsed_args.out is not None:
            written = surface.export_overlays(parsed_args.out)
            log.info("Wrote %s overlay images to %s", len(written), parsed_args.out)

    except ConfigurationError as exc:
        log.error("Configuration problem: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
