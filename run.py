"""Maze Explorer CLI entry point.

Provides subcommands for running the JSON API server, printing generated
levels, drawing bot paths and running a headless bot simulation. Accepts
configuration via flags and environment variables, with optional .env loading.

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

from explorer import __version__
from explorer.logging_utils import configure as configure_logging

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except (AttributeError, ValueError):  # pragma: no cover - detached streams
    _COLOR_ENABLED = False

PATH_MARK = "."


def _version() -> str:
    return __version__


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Maze Explorer

    Generate seeded room-and-corridor levels, compute bot paths with BFS, DFS,
    A* or room-exploring search, and serve it all as a JSON API. Configuration
    can be provided via CLI flags or environment variables. If both are
    present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          EXPLORER_LEVEL_WIDTH    Level width in cells (default: 100)
          EXPLORER_LEVEL_HEIGHT   Level height in cells (default: 100)
          EXPLORER_MAX_ROOMS      Room placement attempts (default: 40)
          EXPLORER_LOG_LEVEL      debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a level and its generation metrics
          python run.py generate --seed 42 --metrics

          # Draw the A* route from the spawn room to the exit
          python run.py path --seed 42 --algorithm astar

          # Let the bot play three levels headless
          python run.py simulate --seed 42 --levels 3
        """
    )

    parser = argparse.ArgumentParser(
        prog="explorer",
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
        version=f"Maze Explorer {_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask JSON API server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    def level_flags(p):
        p.add_argument("--seed", default=None, help="Level seed (int or any string; default: time based)")
        p.add_argument("--width", type=int, default=None, help="Level width (default: env or 100)")
        p.add_argument("--height", type=int, default=None, help="Level height (default: env or 100)")
        p.add_argument("--max-rooms", dest="max_rooms", type=int, default=None, help="Room placement attempts")
        p.add_argument("--room-min", dest="room_min_size", type=int, default=None, help="Minimum room side")
        p.add_argument("--room-max", dest="room_max_size", type=int, default=None, help="Maximum room side")

    gen_parser = subparsers.add_parser("generate", help="Print a generated level as ASCII")
    level_flags(gen_parser)
    gen_parser.add_argument("--metrics", action="store_true", help="Also print generation metrics as JSON")
    gen_parser.set_defaults(command="generate")

    path_parser = subparsers.add_parser("path", help="Print the bot route from the spawn room to the exit")
    level_flags(path_parser)
    path_parser.add_argument(
        "--algorithm",
        default="bfs",
        choices=["bfs", "dfs", "astar", "explore"],
        help="Search strategy (default: bfs)",
    )
    path_parser.add_argument("--no-map", dest="no_map", action="store_true", help="Only print the path summary")
    path_parser.set_defaults(command="path")

    sim_parser = subparsers.add_parser("simulate", help="Run the bot headless on a simulated clock")
    level_flags(sim_parser)
    sim_parser.add_argument(
        "--algorithm",
        default="explore",
        choices=["bfs", "dfs", "astar", "explore"],
        help="Search strategy (default: explore)",
    )
    sim_parser.add_argument("--levels", type=int, default=1, help="Stop after this many exits (default: 1)")
    sim_parser.add_argument("--max-ticks", dest="max_ticks", type=int, default=200_000, help="Tick limit")
    sim_parser.add_argument("--step-ms", dest="step_ms", type=float, default=16.0, help="Simulated ms per tick")
    sim_parser.add_argument(
        "--instant", action="store_true", help="Bot jumps cell to cell instead of animating"
    )
    sim_parser.add_argument(
        "--wait-autostart",
        dest="wait_autostart",
        action="store_true",
        help="Do not switch the bot on; wait for the idle auto-start",
    )
    sim_parser.set_defaults(command="simulate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def _paint(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _level_config(args):
    from explorer.dungeon import LevelConfig, coerce_seed

    config = LevelConfig.from_env(
        seed=coerce_seed(args.seed),
        width=args.width,
        height=args.height,
        max_rooms=args.max_rooms,
        room_min_size=args.room_min_size,
        room_max_size=args.room_max_size,
    )
    config.validate()
    return config


def render_path(level, path) -> str:
    """ASCII rows with path cells marked; exit and walls stay visible."""
    from explorer.dungeon import FLOOR

    on_path = set(path)
    lines = []
    for y in range(level.height):
        chars = []
        for x in range(level.width):
            ch = level.grid[x][y]
            chars.append(PATH_MARK if (x, y) in on_path and ch == FLOOR else ch)
        lines.append("".join(chars))
    return "\n".join(lines)


def cmd_generate(args) -> int:
    from explorer.dungeon import generate_level

    level = generate_level(_level_config(args))
    print(level.ascii())
    if args.metrics:
        print(json.dumps(level.metrics, indent=2, sort_keys=True))
    if not level.usable:
        print(_paint(f"[ERROR] seed {level.seed} produced no usable level", Fore.RED), file=sys.stderr)
        return 1
    print(f"seed={level.seed} rooms={len(level.rooms)} exit={level.exit_pos}")
    return 0


def cmd_path(args) -> int:
    from explorer.dungeon import GridGraph, generate_level
    from explorer.services.pathfinding import find_path

    level = generate_level(_level_config(args))
    if not level.usable:
        print(_paint(f"[ERROR] seed {level.seed} produced no usable level", Fore.RED), file=sys.stderr)
        return 1
    graph = GridGraph(level.grid)
    sx, sz = level.spawn_point()
    start = (int(sx), int(sz))
    path = find_path(args.algorithm, start, level.exit_pos, graph, level.rooms)
    if not args.no_map:
        print(render_path(level, path))
    print(f"seed={level.seed} algorithm={args.algorithm} start={start} goal={level.exit_pos} length={len(path)}")
    return 0 if path else 1


def cmd_simulate(args) -> int:
    from explorer.services.config import BotTiming
    from explorer.services.motion import BotMovePolicy
    from explorer.services.session import GameSession, LevelGenerationError
    from explorer.services.time_service import ManualClock

    config = _level_config(args)
    clock = ManualClock()
    try:
        sess = GameSession(
            config=config,
            timing=BotTiming.from_env(),
            clock=clock,
            seed=config.seed,
            algorithm=args.algorithm,
        )
    except LevelGenerationError as e:
        print(_paint(f"[ERROR] {e}", Fore.RED), file=sys.stderr)
        return 1
    if args.instant:
        sess.bot.move_policy = BotMovePolicy.INSTANT
    if not args.wait_autostart:
        sess.handle_input("toggle_bot")

    exits = 0
    ticks = 0
    discovered = 0
    while ticks < args.max_ticks and exits < args.levels:
        clock.advance(args.step_ms)
        discovered = sess.discovery.count()
        state = sess.tick()
        ticks += 1
        if state["level_changed"]:
            exits += 1
            print(f"level {exits} cleared after {ticks} ticks ({discovered} cells discovered)")
            if exits < args.levels and not args.wait_autostart:
                sess.handle_input(f"select_algorithm:{args.algorithm}")
                sess.handle_input("toggle_bot")
    print(
        f"ticks={ticks} simulated_ms={int(clock.now())} levels_cleared={exits} "
        f"discovered={sess.discovery.count()} seed={sess.level.seed}"
    )
    return 0 if exits >= args.levels else 1


def _print_banner(mode: str, host: str, port: int) -> None:
    title = _paint("Maze Explorer", Fore.CYAN + Style.BRIGHT)

    def label(text: str) -> str:
        return _paint(text, Fore.YELLOW)

    def value(val) -> str:
        return _paint(str(val), Fore.GREEN)

    divider = _paint("=" * 40, Fore.MAGENTA)
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Version:'):12} {value(_version())}",
        divider,
        "",
    ]
    print("\n".join(lines))


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()
    # log settings are read at import; pick up the ones the env file just set
    configure_logging()

    mode = (getattr(args, "command", None) or "server").lower()

    try:
        if mode == "generate":
            return cmd_generate(args)
        if mode == "path":
            return cmd_path(args)
        if mode == "simulate":
            return cmd_simulate(args)
    except ValueError as e:
        print(_paint(f"[ERROR] {e}", Fore.RED), file=sys.stderr)
        return 2

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from explorer.logging_utils import log
    from explorer.server import start_server

    _print_banner(mode, host, port)
    log.info(event="startup", mode=mode, host=host, port=port)
    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
