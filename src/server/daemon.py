"""Production-ready daemon for running server as a Linux service."""

import argparse
import asyncio
import atexit
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import daemon
from daemon.pidfile import PIDLockFile

from .config import load_config_file
from .dictionary_loader import build_dictionary
from .logger import stop_logging_listener
from .server import Server

# Path to the PID file for the daemon process
PID_FILE = "/tmp/autocomplete_daemon.pid"
# Paths to log files for stdout and stderr
STDOUT_LOG = "/tmp/autocomplete_stdout.log"
STDERR_LOG = "/tmp/autocomplete_stderr.log"
# Working directory for the daemon process
WORKDIR = Path("/tmp/")
# File creation mask for the daemon process
UMASK = 0o027
# The configuration settings file of the server
CONFIG_PATH = Path(__file__).parent.parent.parent / "config.txt"


def cleanup() -> None:
    """Cleanup function to be called on exit."""
    stop_logging_listener()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse the daemon's command line.

    Args:
        argv (list[str], optional): Arguments to parse instead of sys.argv.

    Returns:
        argparse.Namespace: The parsed arguments.

    """
    parser = argparse.ArgumentParser(
        description="Run the autocomplete dictionary server as a daemon.",
    )
    parser.add_argument(
        "--ip",
        choices=["local", "public"],
        default="public",
        help="Connect to the server locally or over the internet",
    )
    parser.add_argument(
        "--config_path",
        type=str,
        help="Optional path to the config file.",
        required=False,
    )
    parser.add_argument(
        "--max_words",
        type=int,
        default=None,
        required=False,
    )
    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> None:
    """Run the server."""
    ip = "0.0.0.0" if args.ip == "public" else "127.0.0.1"
    config_path = (
        Path(args.config_path) if args.config_path is not None else CONFIG_PATH
    )

    configuration_settings = load_config_file(config_path)
    dictionary = build_dictionary(
        configuration_settings.words_path,
        args.max_words,
    )

    server_instance = Server(ip, config_path, dictionary)
    await server_instance.start(
        generation_path=WORKDIR,
        certfile_path=Path("cert.pem"),
        key_file_path=Path("key.pem"),
        log_details=True,
    )


def handle_sigterm(signum: int, frame: Any) -> None:
    """Handle SIGTERM or SIGINT signals to perform a graceful shutdown of
    the application.

    Args:
        signum (int): The signal number received.
        frame (FrameType): The current stack frame (unused).

    """
    cleanup()
    sys.exit(0)


if __name__ == "__main__":
    arguments = parse_args()
    if arguments.config_path is not None:
        arguments.config_path = str(Path(arguments.config_path).resolve())

    atexit.register(cleanup)

    with (
        open(STDOUT_LOG, "a") as stdout_log,
        open(STDERR_LOG, "a") as stderr_log,
        daemon.DaemonContext(
            working_directory=str(WORKDIR),
            umask=UMASK,
            pidfile=PIDLockFile(PID_FILE),
            stdout=stdout_log,
            stderr=stderr_log,
            detach_process=True,
            signal_map={
                signal.SIGTERM: handle_sigterm,
                signal.SIGINT: handle_sigterm,
            },
        ),
    ):
        asyncio.run(main(arguments))
