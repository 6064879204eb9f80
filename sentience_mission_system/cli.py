"""Command line entry point.

    sentience [bundle]
    python -m sentience_mission_system [bundle]

Starts the robot described by the bundle (or the default bundle), then
runs until ``exit`` is typed on stdin, stdin closes, or the process is
interrupted (Ctrl-C or SIGTERM). Exit status is 0 after a clean start and
shutdown, 1 when bootstrap failed.
"""

import argparse
import signal
import sys
from typing import Any, List, Optional, TextIO

from sentience_avionics.configuration import StartupConfiguration
from sentience_mission_system.bootstrap import SentienceManager, create_app_context
from sentience_mission_system.context import AppContext

EXIT_COMMAND = "exit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sentience",
        description="Start a robot from a configuration bundle",
    )
    parser.add_argument(
        "bundle",
        nargs="?",
        default="",
        help="Configuration bundle name (default bundle if omitted)",
    )
    return parser


def wait_for_exit(stream: TextIO) -> None:
    """Block until the exit command is read or the stream ends."""
    for line in stream:
        if line.strip() == EXIT_COMMAND:
            return


def _interrupt(signum: int, frame: Any) -> None:
    raise KeyboardInterrupt


def run(
    bundle: Optional[str] = None,
    *,
    context: Optional[AppContext] = None,
    stdin: Optional[TextIO] = None,
    install_signals: bool = False,
) -> int:
    """Bootstrap, wait for shutdown, deactivate.

    Returns:
        Process exit status
    """
    if install_signals:
        signal.signal(signal.SIGTERM, _interrupt)

    app_context = context or create_app_context()
    manager = SentienceManager(app_context)
    manager.configure(StartupConfiguration(args=[bundle] if bundle else []))

    if not manager.initialise():
        manager.deactivate()
        return 1

    try:
        wait_for_exit(stdin or sys.stdin)
    except KeyboardInterrupt:
        app_context.logger.info("interrupted")
    finally:
        manager.deactivate()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args.bundle, install_signals=True)


if __name__ == "__main__":
    sys.exit(main())
