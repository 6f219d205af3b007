"""Handle a client's dictionary request: membership, completion,
insertion and size queries.
"""

import json
import logging
from typing import NamedTuple

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)

from .config import ServerConfig

WORD_EXISTS = "WORD EXISTS"
WORD_NOT_FOUND = "WORD NOT FOUND"
WORD_ADDED = "WORD ADDED"
WORD_ALREADY_EXISTS = "WORD ALREADY EXISTS"
UPDATES_DISABLED = "ERROR: Updates are disabled"

COMMANDS = ("ISWORD", "COMPLETE", "ADD", "SIZE")


class ProtocolError(Exception):
    """Raised when a request does not follow the text protocol."""


class Request(NamedTuple):
    """A parsed client request."""

    command: str
    argument: str = ""
    limit: int = 0


def parse_request(raw: str) -> Request:
    """Split a raw request line into its command and arguments.

    Supported forms are ``ISWORD <word>``, ``COMPLETE <limit> [prefix]``,
    ``ADD <word>`` and ``SIZE``. Command names are case-insensitive.

    Args:
        raw (str): The decoded request, surrounding whitespace removed.

    Raises:
        ProtocolError: If the command is unknown or its arguments are
        missing or malformed.

    Returns:
        Request: The parsed request.

    """
    command, _, rest = raw.strip().partition(" ")
    command, rest = command.upper(), rest.strip()

    if command not in COMMANDS:
        raise ProtocolError(f"Unknown command '{command}'")

    if command == "SIZE":
        return Request(command)

    if command == "COMPLETE":
        limit_str, prefix = (rest.split(maxsplit=1) + ["", ""])[:2]
        try:
            limit = int(limit_str)
        except ValueError as e:
            raise ProtocolError(
                f"COMPLETE expects an integer limit, got '{limit_str}'",
            ) from e
        return Request(command, prefix, limit)

    if not rest:
        raise ProtocolError(f"{command} expects a word")

    return Request(command, rest)


def handle_request(
    dictionary: AutoCompleteDictionaryTrie,
    configuration_settings: ServerConfig,
    raw: str,
) -> str:
    """Answer a single request against the dictionary.

    Args:
        dictionary (AutoCompleteDictionaryTrie): The served dictionary.
        configuration_settings (ServerConfig): The server configuration,
            used for the completion cap and the update switch.
        raw (str): The decoded request line.

    Returns:
        str: The response line, without the trailing newline.

    """
    try:
        request = parse_request(raw)
    except ProtocolError as e:
        logging.warning(f"Rejected request '{raw}': {e}")
        return f"ERROR: {e}"

    if request.command == "ISWORD":
        return (
            WORD_EXISTS
            if dictionary.is_word(request.argument)
            else WORD_NOT_FOUND
        )

    if request.command == "COMPLETE":
        limit = min(request.limit, configuration_settings.max_completions)
        completions = dictionary.predict_completions(request.argument, limit)
        return "COMPLETIONS " + json.dumps(completions)

    if request.command == "ADD":
        if not configuration_settings.allow_updates:
            return UPDATES_DISABLED
        if dictionary.add_word(request.argument):
            logging.info(f"Added word '{request.argument.lower()}'")
            return WORD_ADDED
        return WORD_ALREADY_EXISTS

    return f"SIZE {dictionary.size()}"
