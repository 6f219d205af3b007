"""Flask web application exposing the autocomplete dictionary over HTTP.

A search box can call `/complete` on every keystroke and `/is-word` to
confirm a full entry.
"""

import argparse
from pathlib import Path
from typing import Any

from flask import Flask, current_app, jsonify, request

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)
from src.server.config import DEFAULT_MAX_COMPLETIONS, load_config_file
from src.server.dictionary_loader import build_dictionary


def _dictionary() -> AutoCompleteDictionaryTrie:
    """Return the dictionary the running application was created with."""
    return current_app.extensions["autocomplete_dictionary"]


def index() -> Any:
    """Describe the service.

    Returns:
        Response: JSON with the dictionary size and the available routes.

    """
    return jsonify(
        {
            "service": "autocomplete-dictionary",
            "size": _dictionary().size(),
            "routes": ["/complete", "/is-word", "/size"],
        },
    )


def complete() -> Any:
    """Return the shortest completions of the `prefix` query parameter.

    `limit` defaults to the configured maximum and is capped by it.

    Returns:
        Response: JSON with the prefix and its completions, or a 400
        error when `limit` is not an integer.

    """
    prefix = request.args.get("prefix", "")
    max_completions = current_app.config["MAX_COMPLETIONS"]
    try:
        limit = int(request.args.get("limit", max_completions))
    except ValueError:
        return jsonify({"error": "'limit' must be an integer"}), 400

    completions = _dictionary().predict_completions(
        prefix,
        min(limit, max_completions),
    )
    return jsonify({"prefix": prefix, "completions": completions})


def is_word() -> Any:
    """Tell whether the `word` query parameter is a stored word.

    Returns:
        Response: JSON with the word and the membership flag.

    """
    word = request.args.get("word")
    if word is None:
        return jsonify({"error": "'word' is required"}), 400
    return jsonify({"word": word, "is_word": _dictionary().is_word(word)})


def size() -> Any:
    """Return the number of stored words."""
    return jsonify({"size": _dictionary().size()})


def create_app(
    dictionary: AutoCompleteDictionaryTrie,
    max_completions: int = DEFAULT_MAX_COMPLETIONS,
) -> Flask:
    """Create the Flask application serving `dictionary`.

    Args:
        dictionary (AutoCompleteDictionaryTrie): The dictionary to serve.
        max_completions (int): The most completions a request may get.

    Returns:
        Flask: The configured application.

    """
    app = Flask(__name__)
    app.config["MAX_COMPLETIONS"] = max_completions
    app.extensions["autocomplete_dictionary"] = dictionary

    app.add_url_rule("/", "index", index)
    app.add_url_rule("/complete", "complete", complete)
    app.add_url_rule("/is-word", "is_word", is_word)
    app.add_url_rule("/size", "size", size)
    return app


if __name__ == "__main__":
    """Run the Flask application."""
    parser = argparse.ArgumentParser(description="Run the HTTP front end.")
    parser.add_argument(
        "--config_path",
        type=str,
        default=str(Path(__file__).parent / "config.txt"),
    )
    parser.add_argument("--port", type=int, default=5000)
    args = parser.parse_args()

    configuration_settings = load_config_file(Path(args.config_path))
    create_app(
        build_dictionary(configuration_settings.words_path),
        configuration_settings.max_completions,
    ).run(port=args.port, debug=True)
