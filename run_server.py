"""This module provides the entry point for running the server."""

import argparse
import asyncio
import os
import socket
import subprocess
import sys
from pathlib import Path
from typing import Any, Optional

from src.server.config import load_config_file
from src.server.dictionary_loader import build_dictionary
from src.server.server import Server

WORKDIR = Path("/tmp/")
CONFIG_PATH = Path(__file__).parent / "config.txt"


def get_local_ip() -> Any:
    """Return the local IP address of the server.

    Returns:
        str: The local IP address as a string.

    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.connect(("8.8.8.8", 80))
        return s.getsockname()[0]


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser shared by the runner and the daemon."""
    parser = argparse.ArgumentParser(
        description="Run the autocomplete dictionary server.",
    )
    parser.add_argument(
        "--ip",
        choices=["local", "public"],
        default="public",
        help="Connect to the server locally or over the internet",
    )
    parser.add_argument(
        "--mode",
        default="normal",
        choices=["normal", "daemon"],
        help="Run mode: 'normal' or 'daemon' (default: normal)",
    )
    parser.add_argument(
        "--config_path",
        type=str,
        default=str(CONFIG_PATH),
        help="Optional path to the config file.",
        required=False,
    )
    parser.add_argument(
        "--max_words",
        type=int,
        default=None,
        help="Only load this many words from the word list.",
        required=False,
    )
    return parser


async def serve(
    ip: str,
    config_path: Path,
    max_words: Optional[int],
    workdir: Path,
) -> None:
    """Load the dictionary and run the server until it is stopped.

    Args:
        ip (str): The address to bind.
        config_path (Path): The configuration file.
        max_words (int | None): Word limit passed to the loader.
        workdir (Path): Where the SSL certificate and key live.

    """
    configuration_settings = load_config_file(config_path)
    print(configuration_settings)

    dictionary = build_dictionary(configuration_settings.words_path, max_words)

    server_instance = Server(ip, config_path, dictionary)
    await server_instance.start(
        generation_path=workdir,
        certfile_path=Path("cert.pem"),
        key_file_path=Path("key.pem"),
        log_details=True,
    )


async def main() -> None:
    """Run the server."""
    args = build_parser().parse_args()

    ip = "0.0.0.0" if args.ip == "public" else get_local_ip()

    if args.mode == "daemon":
        env = os.environ.copy()
        env["PYTHONPATH"] = str(Path(__file__).parent)
        command = [
            sys.executable,
            "-m",
            "src.server.daemon",
            "--ip",
            str(args.ip),
            "--config_path",
            str(Path(args.config_path).resolve()),
        ]
        if args.max_words is not None:
            command += ["--max_words", str(args.max_words)]
        subprocess.run(command, check=False, env=env, cwd=os.getcwd())
        return

    await serve(ip, Path(args.config_path), args.max_words, WORKDIR)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("[SERVER] Shutdown signal received.")
