"""Configuration parser for the server."""

from pathlib import Path
from typing import cast

DEFAULT_MAX_COMPLETIONS = 10


class ConfigBoolParsingError(Exception):
    """Raised when the parsing of bool strings in
    the config file was not successful.
    """


class ConfigNotFoundError(Exception):
    """Raised when any of the required configuration settings
    is not provided.
    """


class ConfigValueError(Exception):
    """Raised when a configuration setting is out of its allowed range."""


class ServerConfig:
    """A class to save server configuration settings."""

    def __init__(
        self,
        words_path: Path,
        port: int,
        use_ssl: bool,
        max_completions: int = DEFAULT_MAX_COMPLETIONS,
        allow_updates: bool = False,
    ) -> None:
        """Initialize the server configuration.

        Args:
            words_path (Path): The path to the word list loaded
            into the dictionary.
            port (int): The port number the server will listen to.
            use_ssl (bool): Whether the server should use SSL.
            max_completions (int): The most completions a single
            request may receive.
            allow_updates (bool): Whether clients may add words.

        """
        self.words_path = words_path
        self.port = port
        self.use_ssl = use_ssl
        self.max_completions = max_completions
        self.allow_updates = allow_updates

    def __repr__(self) -> str:
        """Return a string representation of the configuration object.

        Returns:
            str: A formatted string representing the configuration settings.

        """
        return f"""
                Server configuration settings:
                Words path: {self.words_path}
                SSL enabled: {"YES" if self.use_ssl else "NO"}
                Updates allowed: {"YES" if self.allow_updates else "NO"}
                Max completions: {self.max_completions}
                Used port number: {self.port}
            """


def parse_bool(key: str, val: str) -> bool:
    """Parse given values into boolean ones (True or False).

    Args:
        key (str): The key to parse the boolean for.
        val (str): The value to be parsed to boolean.

    Raises:
        ConfigBoolParsingError: If an error occured
        while parsing the value to boolean.

    Returns:
        bool: True or False depending on the output of the parser.

    """
    if val.strip().lower() in {"true", "1", "yes"}:
        return True
    if val.strip().lower() in {"false", "0", "no"}:
        return False

    raise ConfigBoolParsingError(
        f"Invalid boolean value for key '{key}' in the configuration file. "
        "Expected 'true', 'false', '1', '0', 'yes', or 'no' "
        "(case-insensitive).",
    )


def load_config_file(config_file_path: Path) -> ServerConfig:
    """Load and parse the configuration file.

    Args:
        config_file_path (Path): Path to the config file.

    Raises:
        ConfigNotFoundError: If required settings are missing.
        ConfigValueError: If `max_completions` is not positive.
        FileNotFoundError: If the config file or the word list
        does not exist.

    Returns:
        ServerConfig: Parsed config object.

    """
    if not config_file_path.exists():
        raise FileNotFoundError(
            f"Missing required configuration file: '{config_file_path}'. "
            "Please ensure the file exists and the path is correct.",
        )

    words_path = port = use_ssl = None
    max_completions = DEFAULT_MAX_COMPLETIONS
    allow_updates = False

    with config_file_path.open("r", encoding="utf-8") as file:
        for line in file:
            line = line.strip()

            # Skip blank lines and comments
            if not line or line.startswith("#"):
                continue

            key, sep, value = line.partition("=")
            if sep != "=":
                continue

            key = key.strip().lower()
            value = value.strip()

            if key == "wordspath":
                # Relative paths are relative to the config file
                words_path = config_file_path.parent / Path(value)
            elif key == "use_ssl":
                use_ssl = parse_bool("use_ssl", value)
            elif key == "port":
                port = int(value)
            elif key == "max_completions":
                max_completions = int(value)
            elif key == "allow_updates":
                allow_updates = parse_bool("allow_updates", value)

    required = {
        "words_path": words_path,
        "port": port,
        "use_ssl": use_ssl,
    }

    for key, val in required.items():
        if val is None:
            raise ConfigNotFoundError(
                f"Missing required configuration: '{key}'. "
                f"""Please ensure the config file includes a valid line for
                '{"wordspath" if key == "words_path" else key.upper()}'.""",
            )

    if max_completions < 1:
        raise ConfigValueError(
            "Invalid value for 'max_completions': "
            f"{max_completions}. It must be at least 1.",
        )

    if words_path is not None and not words_path.exists():
        raise FileNotFoundError(
            f"The required file {words_path} doesn't exist.",
        )

    return ServerConfig(
        cast("Path", words_path),
        cast("int", port),
        cast("bool", use_ssl),
        max_completions,
        allow_updates,
    )
