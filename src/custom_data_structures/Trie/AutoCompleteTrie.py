"""This module represents the implementation of a Trie structure that's
used as a word dictionary with prefix based completion suggestions.
"""

import logging
from collections import deque
from collections.abc import Iterator
from typing import Optional

logger = logging.getLogger(__name__)


def _require_str(value: object, name: str) -> str:
    """Reject anything that is not a string at the dictionary boundary.

    Args:
        value (object): The value received from the caller.
        name (str): The argument name, used in the error message.

    Raises:
        TypeError: If `value` is not a string (``None`` included).

    Returns:
        str: The same value, typed as a string.

    """
    if not isinstance(value, str):
        raise TypeError(
            f"'{name}' must be a string, got {type(value).__name__}.",
        )
    return value


class TrieNode:
    """Represent a node in the trie structure."""

    def __init__(self, character: Optional[str] = None, text: str = "") -> None:
        """Initialize a new Trie node.

        Attributes:
            character (str | None): The character this node adds to its
            parent's text, None for the root.
            text (str): The full lowercase string from the root to this node.
            ends_word (bool): Indicates whether `text` is a stored word.
            children (dict): A dictionary mapping characters to
            their corresponding child TrieNode instances.

        """
        self.character = character
        self.text = text
        self.ends_word = False
        # Keys keep insertion order, which fixes the traversal order
        self.children: dict[str, TrieNode] = {}

    def get_child(self, c: str) -> Optional["TrieNode"]:
        """Return the child stored under `c`, or None if there is none."""
        return self.children.get(c)

    def insert(self, c: str) -> "TrieNode":
        """Return the child for `c`, creating it first if needed.

        Args:
            c (str): The character of the child node.

        Returns:
            TrieNode: The existing child, or the new one whose text is
            this node's text followed by `c`.

        """
        child = self.children.get(c)
        if child is None:
            child = TrieNode(c, self.text + c)
            self.children[c] = child
        return child

    def get_valid_next_characters(self) -> list[str]:
        """Return the characters that have a child, in insertion order."""
        return list(self.children)

    def __repr__(self) -> str:
        return f"TrieNode(text={self.text!r}, ends_word={self.ends_word})"


class AutoCompleteDictionaryTrie:
    """Word dictionary backed by a trie that also predicts completions."""

    def __init__(self) -> None:
        """Initialize the root node and the word counter."""
        self.root = TrieNode()
        self._size = 0

    def add_word(self, word: str) -> bool:
        """Insert a word into the trie, folding it to lowercase first.

        Existing nodes are reused and new ones are created only for the
        part of the word that is not in the trie yet. Adding "now" when
        "no" is already stored creates a single node for the 'w'.

        Args:
            word (str): The word to add. The empty string is allowed and
            marks the root itself as a word.

        Raises:
            TypeError: If `word` is not a string.

        Returns:
            bool: True if the word was added, False if it was already
            in the dictionary.

        """
        lower_case_word = _require_str(word, "word").lower()
        node = self.root
        for char in lower_case_word:
            node = node.insert(char)

        if node.ends_word:
            return False

        node.ends_word = True
        self._size += 1
        return True

    def size(self) -> int:
        """Return the number of words in the dictionary.

        This is the number of distinct words added, not the number of
        nodes in the trie.
        """
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_word(self, s: str) -> bool:
        """Check whether `s` is a complete word in the dictionary.

        Args:
            s (str): The string to look up, in any case.

        Raises:
            TypeError: If `s` is not a string.

        Returns:
            bool: True only if the whole string was added as a word. A
            string that is only the prefix of stored words is not a word.

        """
        node = self._get_node(_require_str(s, "s").lower())
        return node is not None and node.ends_word

    def __contains__(self, s: object) -> bool:
        """Support `word in dictionary`.

        Unlike `is_word`, a non-string operand such as None is not an
        error here: it is simply not contained, as with the built-in
        containers.
        """
        return isinstance(s, str) and self.is_word(s)

    def predict_completions(
        self,
        prefix: str,
        num_completions: int,
    ) -> list[str]:
        """Return up to `num_completions` of the shortest stored words
        that start with `prefix`.

        The words come back in order of non-decreasing length. If the
        prefix itself is a word it is the first result. Every length
        class shorter than the last one returned is complete; when the
        quota runs out in the middle of a length class, the words of that
        class are taken in traversal order: the node reached first from
        the prefix wins, and siblings go in the order their characters
        were first inserted.

        For example, with only "step", "stem", "stew", "steer" and "steep"
        stored, four completions of "ste" are "step", "stem", "stew" and
        one of "steer" / "steep".

        Args:
            prefix (str): The stem to complete, in any case.
            num_completions (int): The maximum number of words wanted.
            Zero or a negative number asks for nothing.

        Raises:
            TypeError: If `prefix` is not a string or `num_completions`
            is not an integer.

        Returns:
            list[str]: The completions, or an empty list if the prefix is
            not in the trie.

        """
        stem = _require_str(prefix, "prefix").lower()
        if isinstance(num_completions, bool) or not isinstance(
            num_completions,
            int,
        ):
            raise TypeError(
                "'num_completions' must be an integer, got "
                f"{type(num_completions).__name__}.",
            )

        completions: list[str] = []
        if num_completions <= 0:
            return completions

        start = self._get_node(stem)
        if start is None:
            return completions

        # Each node has a single parent, so nothing is ever queued twice
        queue: deque[TrieNode] = deque([start])
        remaining = num_completions
        while queue and remaining > 0:
            node = queue.popleft()
            if node.ends_word:
                completions.append(node.text)
                remaining -= 1
            queue.extend(node.children.values())

        return completions

    def iter_nodes(self) -> Iterator[TrieNode]:
        """Yield every node of the trie in pre-order, root first."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            # Reversed so that the first inserted child is visited first
            stack.extend(reversed(list(node.children.values())))

    def print_tree(self) -> list[str]:
        """Dump the text of every node in pre-order for debugging.

        Returns:
            list[str]: The dumped lines, one per node.

        """
        lines = [node.text for node in self.iter_nodes()]
        for line in lines:
            logger.debug("%s", line)
        return lines

    def _get_node(self, s: str) -> Optional[TrieNode]:
        """Follow the exact path spelled by `s` from the root.

        Args:
            s (str): The already lowercased string to look up.

        Returns:
            TrieNode | None: The node whose text is `s` (the root for the
            empty string), or None as soon as a character has no child.

        """
        node = self.root
        for char in s:
            child = node.get_child(char)
            if child is None:
                return None
            node = child
        return node
