from dataclasses import dataclass
from typing import AbstractSet, Optional

from .lexicon import Lexicon


TOO_SHORT = 'TooShort'
ALREADY_USED = 'AlreadyUsed'
MISSING_COMBINATION = 'MissingCombination'
NOT_IN_DICTIONARY = 'NotInDictionary'


@dataclass(frozen=True)
class WordVerdict:
    accepted: bool
    reason: Optional[str] = None
    message: Optional[str] = None


ACCEPTED = WordVerdict(True)


class WordValidator:
    """Decides whether a submitted word is accepted for the active combination.

    Checks run in a fixed order so the reported reason is stable: the
    optional minimum length, reuse within the current game, the required
    combination, then dictionary membership.
    """

    def __init__(self, lexicon: Lexicon, min_length: int = 0):
        self.lexicon = lexicon
        self.min_length = min_length

    def validate(self, word: str, combination: str, used_words: AbstractSet[str]) -> WordVerdict:
        if self.min_length and len(word) < self.min_length:
            return WordVerdict(False, TOO_SHORT, f'Word too short (minimum {self.min_length} letters)')
        if word in used_words:
            return WordVerdict(False, ALREADY_USED, 'Word already used')
        if combination not in word:
            return WordVerdict(False, MISSING_COMBINATION, f'Word must contain "{combination}"')
        if not self.lexicon.contains(word):
            return WordVerdict(False, NOT_IN_DICTIONARY, 'Word not in dictionary')
        return ACCEPTED
