from pathlib import Path

import pytest

from src.server.config import (
    DEFAULT_MAX_COMPLETIONS,
    ConfigBoolParsingError,
    ConfigNotFoundError,
    ConfigValueError,
    ServerConfig,
    load_config_file,
    parse_bool,
)

# Test data for valid configurations
VALID_CONFIG = """
# Server configuration
wordspath = {words_path}
port = 8888
use_ssl = yes
max_completions = 25
allow_updates = true
"""

MINIMAL_CONFIG = """
wordspath = {words_path}
port = 8888
use_ssl = no
"""

MISSING_KEY_CONFIG = """
wordspath = {words_path}
use_ssl = false
"""

INVALID_BOOL_CONFIG = """
wordspath = {words_path}
port = 8888
use_ssl = maybe
"""

INVALID_PORT_CONFIG = """
wordspath = {words_path}
port = abc
use_ssl = false
"""

INVALID_MAX_COMPLETIONS_CONFIG = """
wordspath = {words_path}
port = 8888
use_ssl = false
max_completions = 0
"""


def write_config(tmp_path, template, words_path):
    config_path = tmp_path / "config.txt"
    config_path.write_text(template.format(words_path=words_path))
    return config_path


# Test parse_bool function
@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("True", True),
        ("TRUE", True),
        ("1", True),
        ("yes", True),
        ("false", False),
        ("False", False),
        ("FALSE", False),
        ("0", False),
        ("no", False),
    ],
)
def test_parse_bool_valid(value, expected):
    """Test valid boolean values."""
    assert parse_bool("test_key", value) == expected


@pytest.mark.parametrize("value", ["maybe", "2", "yess", "tru", "invalid"])
def test_parse_bool_invalid(value):
    """Test invalid boolean values."""
    with pytest.raises(ConfigBoolParsingError) as excinfo:
        parse_bool("test_key", value)
    assert "Invalid boolean value for key 'test_key'" in str(excinfo.value)


# Test ServerConfig class
def test_server_config_defaults(words_file):
    config = ServerConfig(words_path=words_file, port=8888, use_ssl=False)

    assert config.words_path == words_file
    assert config.port == 8888
    assert config.use_ssl is False
    assert config.max_completions == DEFAULT_MAX_COMPLETIONS
    assert config.allow_updates is False


def test_server_config_repr(server_config, words_file):
    """Test the string representation of ServerConfig."""
    repr_str = repr(server_config)

    assert "Server configuration settings" in repr_str
    assert str(words_file) in repr_str
    assert "SSL enabled: NO" in repr_str
    assert "Updates allowed: YES" in repr_str
    assert "Max completions: 5" in repr_str
    assert "Used port number: 8888" in repr_str


# Test load_config_file function
def test_load_valid_config(tmp_path, words_file):
    config = load_config_file(write_config(tmp_path, VALID_CONFIG, words_file))

    assert config.words_path == words_file
    assert config.port == 8888
    assert config.use_ssl is True
    assert config.max_completions == 25
    assert config.allow_updates is True


def test_load_minimal_config_uses_defaults(tmp_path, words_file):
    config = load_config_file(
        write_config(tmp_path, MINIMAL_CONFIG, words_file),
    )

    assert config.max_completions == DEFAULT_MAX_COMPLETIONS
    assert config.allow_updates is False


def test_load_config_relative_words_path(tmp_path, words_file):
    """Relative word list paths are resolved against the config file."""
    config = load_config_file(
        write_config(tmp_path, MINIMAL_CONFIG, words_file.name),
    )

    assert config.words_path == tmp_path / words_file.name
    assert config.words_path.exists()


def test_load_config_missing_file():
    """Test loading a configuration from a non-existent file."""
    with pytest.raises(FileNotFoundError) as excinfo:
        load_config_file(Path("/non/existent/path"))
    assert "Missing required configuration file" in str(excinfo.value)


def test_load_config_missing_key(tmp_path, words_file):
    """Test configuration with a missing required key."""
    config_path = write_config(tmp_path, MISSING_KEY_CONFIG, words_file)

    with pytest.raises(ConfigNotFoundError) as excinfo:
        load_config_file(config_path)
    assert "Missing required configuration: 'port'" in str(excinfo.value)


def test_load_config_missing_words_path(tmp_path):
    config_path = tmp_path / "config.txt"
    config_path.write_text("port = 1\nuse_ssl = no\n")

    with pytest.raises(ConfigNotFoundError) as excinfo:
        load_config_file(config_path)
    assert "'words_path'" in str(excinfo.value)
    assert "'wordspath'" in str(excinfo.value)


def test_load_config_invalid_bool(tmp_path, words_file):
    """Test configuration with an invalid boolean value."""
    config_path = write_config(tmp_path, INVALID_BOOL_CONFIG, words_file)

    with pytest.raises(ConfigBoolParsingError) as excinfo:
        load_config_file(config_path)
    assert "Invalid boolean value for key 'use_ssl'" in str(excinfo.value)


def test_load_config_invalid_port(tmp_path, words_file):
    """Test configuration with an invalid port value."""
    config_path = write_config(tmp_path, INVALID_PORT_CONFIG, words_file)

    with pytest.raises(ValueError):
        load_config_file(config_path)


def test_load_config_invalid_max_completions(tmp_path, words_file):
    config_path = write_config(
        tmp_path,
        INVALID_MAX_COMPLETIONS_CONFIG,
        words_file,
    )

    with pytest.raises(ConfigValueError) as excinfo:
        load_config_file(config_path)
    assert "'max_completions'" in str(excinfo.value)


def test_load_config_case_insensitivity_and_comments(tmp_path, words_file):
    """Test that keys are case-insensitive and comments are ignored."""
    config_content = f"""
    # This is a comment
    WORDSPATH = {words_file}
    # Another comment
    PORT = 1234
    USE_SSL = 1
    invalid_line_without_equals
    MAX_COMPLETIONS = 3
    """

    config_path = tmp_path / "config.txt"
    config_path.write_text(config_content)

    config = load_config_file(config_path)

    assert config.words_path == words_file
    assert config.port == 1234
    assert config.use_ssl is True
    assert config.max_completions == 3


def test_load_config_missing_words_file(tmp_path):
    """Test that FileNotFoundError is raised if wordspath doesn't exist."""
    non_existent = tmp_path / "non_existent.txt"
    config_path = write_config(tmp_path, MINIMAL_CONFIG, non_existent)

    with pytest.raises(FileNotFoundError) as excinfo:
        load_config_file(config_path)
    assert (
        f"The required file {non_existent} "
        "doesn't exist" in str(excinfo.value)
    )
