"""
Application Entry Point
=======================
Parses the command line, sets up logging, builds the session and starts the
Qt event loop.

Usage:
    $ python -m palettetracker --profile hucast --view two-palettes
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from palettetracker.config import DEFAULT_PROFILE, DEFAULT_SAVE_PATH
from palettetracker.logging_config import setup_logging
from palettetracker.model.exceptions import UnknownProfile
from palettetracker.model.io import TrackerConfiguration
from palettetracker.model.profiles import ALL_PROFILES

logger = logging.getLogger(__name__)

VIEW_MODES = ("hybrid", "view-only-mouse", "view-only-keys", "two-palettes")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="palettetracker",
        description="Hexagon palette tracker for speedrun item and goal counts."
    )
    parser.add_argument("--profile", default=DEFAULT_PROFILE, help="profile key (see --list-profiles)")
    parser.add_argument("--layout", type=int, default=0, help="layout index within the profile")
    parser.add_argument("--view", choices=VIEW_MODES, default="hybrid", help="palette arrangement")
    parser.add_argument("--save-file", default=DEFAULT_SAVE_PATH, help="HDF5 file to restore from and save to")
    parser.add_argument("--no-save", action="store_true", help="do not read or write a save file")
    parser.add_argument("--background", default=None, help="view background color, e.g. '#00ff00'")
    parser.add_argument("--reset", action="store_true", help="start from fresh values")
    parser.add_argument("--list-profiles", action="store_true", help="print the available profiles and exit")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def list_profiles() -> str:
    lines = []
    for key, profile in ALL_PROFILES.items():
        lines.append(f"{key:32} {profile.name} ({len(profile.layouts)} layouts)")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_profiles:
        print(list_profiles())
        return 0

    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # Qt is only needed once a window is shown
    from palettetracker.app.application import create_app
    from palettetracker.app.ui.main_window import MainWindow
    from palettetracker.controller.session import TrackerSession

    configuration = TrackerConfiguration(
        profile=args.profile,
        layout=args.layout,
        view=args.view,
        background=args.background,
    )
    try:
        session = TrackerSession(
            configuration,
            save_path=None if args.no_save else args.save_file,
            key_input=args.view != "view-only-mouse",
        )
    except (UnknownProfile, IndexError) as e:
        logger.error(f"Cannot start session: {e}")
        return 2

    if args.reset:
        session.reset()

    app = create_app()
    window = MainWindow(session)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
