from pathlib import Path

import pytest

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)
from src.server.dictionary_loader import build_dictionary, load_dictionary


@pytest.fixture
def messy_words_file(tmp_path):
    file_path = tmp_path / "messy.txt"
    file_path.write_text(
        "# sample word list\n"
        "Apple\n"
        "\n"
        "  banana  \n"
        "apple\n"
        "cherry\n",
        encoding="utf-8",
    )
    return file_path


def test_load_dictionary_adds_every_word(words_file):
    trie = AutoCompleteDictionaryTrie()

    added = load_dictionary(trie, words_file)

    assert added == 10
    assert trie.size() == 10
    assert trie.is_word("caterpillar")


def test_load_dictionary_skips_blanks_comments_and_duplicates(
    messy_words_file,
):
    trie = AutoCompleteDictionaryTrie()

    added = load_dictionary(trie, messy_words_file)

    assert added == 3
    assert trie.size() == 3
    assert trie.is_word("apple")
    assert trie.is_word("banana")
    assert not trie.is_word("# sample word list")


def test_load_dictionary_respects_max_words(messy_words_file):
    trie = AutoCompleteDictionaryTrie()

    added = load_dictionary(trie, messy_words_file, max_words=2)

    assert added == 2
    assert trie.is_word("apple")
    assert trie.is_word("banana")
    assert not trie.is_word("cherry")


def test_load_dictionary_into_non_empty_dictionary(words_file):
    trie = AutoCompleteDictionaryTrie()
    trie.add_word("cat")
    trie.add_word("zebra")

    added = load_dictionary(trie, words_file)

    assert added == 9
    assert trie.size() == 11


def test_load_dictionary_missing_file():
    with pytest.raises(FileNotFoundError) as excinfo:
        load_dictionary(
            AutoCompleteDictionaryTrie(),
            Path("/non/existent/words.txt"),
        )
    assert "Missing word list" in str(excinfo.value)


def test_build_dictionary_returns_new_dictionary_each_time(words_file):
    first = build_dictionary(words_file)
    second = build_dictionary(words_file)

    assert first is not second
    assert first.size() == second.size() == 10
    assert first.predict_completions("ca", 3) == ["cat", "car", "cats"]
