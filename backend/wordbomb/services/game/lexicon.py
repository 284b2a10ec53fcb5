from typing import Iterable

from wordbomb.constants import ARABIC_WORDS


class Lexicon:
    """Read-only word membership oracle."""

    def __init__(self, words: Iterable[str]):
        self._words = frozenset(w.strip() for w in words if w and w.strip())

    @classmethod
    def default(cls) -> 'Lexicon':
        return cls(ARABIC_WORDS)

    @classmethod
    def from_file(cls, path: str) -> 'Lexicon':
        """Load one word per line; blank lines and `#` comments are skipped."""
        with open(path, encoding='utf-8') as fh:
            return cls(line for line in fh if not line.lstrip().startswith('#'))

    def contains(self, word: str) -> bool:
        return word in self._words

    def __contains__(self, word) -> bool:
        return self.contains(word)

    def __len__(self) -> int:
        return len(self._words)
