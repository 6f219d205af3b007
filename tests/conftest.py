import pytest

from src.custom_data_structures.Trie.AutoCompleteTrie import (
    AutoCompleteDictionaryTrie,
)
from src.server.config import ServerConfig
from src.server.ssl_utils import generate_certificate_and_key

WORDS = [
    "cat",
    "car",
    "cats",
    "caterpillar",
    "step",
    "stem",
    "stew",
    "steer",
    "steep",
    "dog",
]


@pytest.fixture
def dictionary():
    """A dictionary holding the words most tests query."""
    trie = AutoCompleteDictionaryTrie()
    for word in WORDS:
        trie.add_word(word)
    return trie


@pytest.fixture
def words_file(tmp_path):
    """A word list on disk with the same words as `dictionary`."""
    path = tmp_path / "words.txt"
    path.write_text("\n".join(WORDS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def server_config(words_file):
    return ServerConfig(
        words_path=words_file,
        port=8888,
        use_ssl=False,
        max_completions=5,
        allow_updates=True,
    )


@pytest.fixture(scope="session")
def ssl_certs(tmp_path_factory):
    """Generate a self-signed certificate once per test session.

    Tests that need it are skipped when OpenSSL is not installed.
    """
    certs_dir = tmp_path_factory.mktemp("certs")
    if not generate_certificate_and_key(certs_dir):
        pytest.skip("OpenSSL is required to generate test certificates")
    return certs_dir / "cert.pem", certs_dir / "key.pem"
