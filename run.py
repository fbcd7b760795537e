"""roomgrow CLI entry point.

Provides subcommands for running the Socket.IO build server and for building a
single dungeon from the terminal. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _load_version() -> str:
    try:
        with open("VERSION", "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    roomgrow dungeon builder

    Run the Flask-SocketIO build server, or grow a single dungeon and print it.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          DUNGEON_ROOM_GRID_SIZE  Default seed grid cells along the shorter side (default: 20)
          DUNGEON_WIGGLE          Default seed jitter as a fraction of the grid step (default: 0)
          DUNGEON_FREQUENCY       Default seed acceptance probability (default: 1)
          ROOMGROW_LOG_LEVEL      debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Build a 96x64 dungeon with a fixed seed
          python run.py build --width 96 --height 64 --seed 42

          # Build into a mask file ('#' cells are blocked) and print JSON
          python run.py build --mask level.txt --json
        """
    )

    parser = argparse.ArgumentParser(
        prog="roomgrow",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"roomgrow {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO build server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Build one dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Grow rooms, carve floors and doors, then print the tile rows:
              '#' void   '.' floor   'W' wall   'D' door   ' ' unclaimed
            """
        ),
    )
    build_parser.add_argument("--width", type=int, default=None, help="Surface width (default: env or 128)")
    build_parser.add_argument("--height", type=int, default=None, help="Surface height (default: env or 128)")
    build_parser.add_argument("--mask", default=None, help="Text file of rows; '#' cells are blocked")
    build_parser.add_argument("--grid", dest="room_grid_size", type=int, default=None, help="Room grid size (min 8)")
    build_parser.add_argument("--wiggle", type=float, default=None, help="Seed jitter, fraction of grid step")
    build_parser.add_argument("--frequency", type=float, default=None, help="Seed acceptance probability")
    build_parser.add_argument("--seed", default=None, help="Integer or string seed")
    build_parser.add_argument("--json", dest="as_json", action="store_true", help="Print seed, info and tiles as JSON")
    build_parser.set_defaults(command="build")

    # If no subcommand provided, default to server
    if not any(a in ("server", "build") for a in argv):
        argv = list(argv) + ["server"]

    args = parser.parse_args(argv)
    return args


def _read_mask(path: str) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\r\n") for line in f if line.strip("\r\n")]


def run_build(args) -> int:
    from roomgrow.dungeon import RasterSurface, prepare_build, room_info
    from roomgrow.dungeon.config import DungeonConfig, coerce_seed
    from roomgrow.dungeon.tiles import surface_to_rows
    from roomgrow.logging_utils import log

    defaults = DungeonConfig.from_env()
    if args.mask:
        if not os.path.exists(args.mask):
            print(f"[ERROR] File not found: {args.mask}")
            return 1
        rows = _read_mask(args.mask)
        if not rows:
            print(f"[ERROR] Mask file is empty: {args.mask}")
            return 1
        map_spec = RasterSurface.from_mask(rows)
    else:
        width = args.width or defaults.width
        height = args.height or defaults.height
        if width <= 0 or height <= 0:
            print("[ERROR] width and height must be positive")
            return 1
        map_spec = (width, height)
    seed = coerce_seed(args.seed) if args.seed is not None else None
    builder = prepare_build(
        map_spec,
        room_grid_size=args.room_grid_size,
        wiggle=args.wiggle,
        frequency=args.frequency,
        seed=seed,
        config=defaults,
    )
    builder.generate_rooms()
    info = room_info(builder)
    seed = builder.config.seed
    rows = surface_to_rows(builder.surface, info.floor_color, info.void_color, info.doors)
    log.info(event="cli_build", seed=seed, rooms=len(info.rooms), doors=len(info.doors), ticks=info.metrics.get("ticks"))
    if args.as_json:
        print(json.dumps({"seed": seed, "info": info.to_dict(), "tiles": rows}))
    else:
        print("\n".join(rows))
        print(f"rooms={len(info.rooms)} doors={len(info.doors)} seed={seed}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if args and getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "build":
        return run_build(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from roomgrow.logging_utils import log
    from roomgrow.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}roomgrow Build Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "roomgrow Build Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('WebSockets:'):12} {value('enabled')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port)

    info_prefix = f"{Fore.CYAN}[INFO]{Style.RESET_ALL}" if _COLOR_ENABLED else "[INFO]"
    print(f"{info_prefix} Listening for connections... Press Ctrl+C to stop.")
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def cli() -> None:
    """Console-script entry point."""
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
