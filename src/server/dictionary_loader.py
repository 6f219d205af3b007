"""Feed word lists into the autocomplete dictionary."""

import logging
import time
from pathlib import Path
from typing import Optional

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)


def load_dictionary(
    dictionary: AutoCompleteDictionaryTrie,
    words_path: Path,
    max_words: Optional[int] = None,
) -> int:
    """Add every word of a line oriented word list to `dictionary`.

    Args:
        dictionary (AutoCompleteDictionaryTrie): The dictionary to fill.
        words_path (Path): The word list, one word per line. Blank lines
            and lines starting with '#' are skipped.
        max_words (int, optional): Stop after this many words have been
            read. Defaults to None (read the whole file).

    Raises:
        FileNotFoundError: If `words_path` does not exist.

    Returns:
        int: The number of words that were new to the dictionary.

    """
    if not words_path.exists():
        raise FileNotFoundError(
            f"Missing word list: '{words_path}'. "
            "Please ensure the file exists and the path is correct.",
        )

    start_time = time.perf_counter()
    read_count = added_count = 0

    with words_path.open("r", encoding="utf-8") as file:
        for line in file:
            if max_words is not None and read_count >= max_words:
                break

            word = line.strip()

            # Skip blank lines and comments
            if not word or word.startswith("#"):
                continue

            read_count += 1
            if dictionary.add_word(word):
                added_count += 1

    duration = (time.perf_counter() - start_time) * 1000
    logging.info(
        f"Loaded {added_count} new words ({read_count} read) from "
        f"'{words_path}' in {duration:.2f} ms. Dictionary size: "
        f"{dictionary.size()}",
    )
    return added_count


def build_dictionary(
    words_path: Path,
    max_words: Optional[int] = None,
) -> AutoCompleteDictionaryTrie:
    """Create a new dictionary holding the words of `words_path`.

    Args:
        words_path (Path): The word list to load.
        max_words (int, optional): Maximum number of words to read.

    Returns:
        AutoCompleteDictionaryTrie: The loaded dictionary.

    """
    dictionary = AutoCompleteDictionaryTrie()
    load_dictionary(dictionary, words_path, max_words)
    return dictionary
