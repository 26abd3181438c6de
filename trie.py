from typing import Dict, Iterator, Optional

from diagnostics import warning


class TrieNode:
    def __init__(self, char: str = "", prefix: str = ""):
        # char: the character on the edge leading here ("" for the root)
        self.char = char
        # word: every character from the root down to (and including) this node
        self.word = prefix + char
        # children: dict mapping single char → TrieNode
        self.children: Dict[str, "TrieNode"] = {}
        # is_word: True if the path from root down to here spells a dictionary word
        self.is_word = False

    def child(self, ch: str) -> "TrieNode":
        """Return the child for `ch`, creating it on first use."""
        node = self.children.get(ch)
        if node is None:
            node = TrieNode(ch, self.word)
            self.children[ch] = node
        return node

    def __repr__(self):
        return f"TrieNode({self.word!r}, is_word={self.is_word}, children={len(self.children)})"


class Trie:
    """
    Dictionary of words stored as a prefix tree.

    With `ignore_case` (the default) every word and every query is upper-cased
    before it touches the tree, so "cat", "Cat" and "CAT" share one branch and
    stored words come back upper-case.
    """

    def __init__(self, ignore_case: bool = True):
        self.root = TrieNode()
        self._ignore_case = ignore_case
        self._longest_word_length = 0
        self._word_count = 0
        self._node_count = 0

    @property
    def ignore_case(self) -> bool:
        return self._ignore_case

    @property
    def longest_word_length(self) -> int:
        """Length of the longest word inserted so far (0 for an empty trie)."""
        return self._longest_word_length

    @property
    def node_count(self) -> int:
        """Number of nodes below the root."""
        return self._node_count

    def __len__(self):
        return self._word_count

    def __contains__(self, word):
        return self.contains_word(word)

    def _normalize(self, text: str) -> str:
        return text.upper() if self._ignore_case else text

    def insert(self, word: Optional[str]):
        """
        Insert `word` into this trie. Empty or missing words are reported and ignored.
        """
        if not word:
            warning(f"invalid empty word for trie: {word!r}")
            return

        word = self._normalize(word)
        if len(word) > self._longest_word_length:
            self._longest_word_length = len(word)

        node = self.root
        for ch in word:
            if ch not in node.children:
                self._node_count += 1
            node = node.child(ch)
        if not node.is_word:
            node.is_word = True
            self._word_count += 1

    def contains_word(self, word: Optional[str]) -> bool:
        """
        Traverse the trie following each character of `word`.
        Returns True if, after consuming all letters, the node exists and node.is_word is True.
        """
        if not word:
            return False
        node = self.root
        for ch in self._normalize(word):
            node = node.children.get(ch)
            if node is None:
                return False
        return node.is_word

    def longest_substring_match(self, text: Optional[str]) -> Optional[str]:
        """
        Return the longest dictionary word found anywhere inside `text`, or None.

        Every start offset is walked down the trie for as long as edges exist.
        Offsets stop being tried once the remaining text is no longer than the
        best match, so a long early hit cuts the search short. Between words of
        equal length the one starting first wins.
        """
        if not text:
            return None
        text = self._normalize(text)
        size = len(text)

        best = None
        best_length = 0
        start = 0
        while size - start > best_length:
            node = self.root
            for pos in range(start, size):
                node = node.children.get(text[pos])
                if node is None:
                    break
                if node.is_word and len(node.word) > best_length:
                    best = node.word
                    best_length = len(best)
            start += 1
        return best

    def iter_words(self) -> Iterator[str]:
        """Yield every stored word, visiting children in character order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_word:
                yield node.word
            # reversed so that the smallest character is popped first
            for ch in sorted(node.children, reverse=True):
                stack.append(node.children[ch])
