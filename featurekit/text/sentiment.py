"""
Wordlist sentiment models
Models that classify a list of words using fixed word lists, so there is
nothing to train.
"""

import abc
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .annotations import count_matching


class BipolarSentiment(Enum):
    POSITIVE = 1
    NEUTRAL = 0
    NEGATIVE = -1


class WordListSentimentModel(abc.ABC):
    """
    Base class for sentiment models driven by word lists.

    Subclasses implement predict() and clone(). Training data is accepted and
    ignored by estimate().
    """

    def num_items_to_estimate(self) -> int:
        raise NotImplementedError("Word list models are not estimated from data")

    def estimate(self, data: Iterable[Tuple[List[str], object]]) -> None:
        pass

    @abc.abstractmethod
    def predict(self, words: List[str]):
        """Sentiment of a list of words."""

    @abc.abstractmethod
    def clone(self) -> 'WordListSentimentModel':
        pass

    def validate(self, example: Tuple[List[str], object]) -> bool:
        """True if the prediction for example's words equals its expected sentiment."""
        words, expected = example
        return self.predict(words) == expected

    def calculate_error(self, data: Sequence[Tuple[List[str], object]]) -> float:
        """Fraction of examples predicted wrongly."""
        if len(data) == 0:
            raise ValueError("Cannot calculate the error of an empty dataset")

        correct = count_matching(data, self.validate)
        return 1.0 - correct / len(data)


class CountingWordListSentimentModel(WordListSentimentModel):
    """Compares how many words appear in the positive and negative lists."""

    def __init__(self, positive: Iterable[str], negative: Iterable[str], case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self.positive = frozenset(self._norm(w) for w in positive)
        self.negative = frozenset(self._norm(w) for w in negative)

    def _norm(self, word: str) -> str:
        return word if self.case_sensitive else word.lower()

    def predict(self, words: List[str]) -> BipolarSentiment:
        normed = [self._norm(w) for w in words]
        score = (count_matching(normed, self.positive.__contains__)
                 - count_matching(normed, self.negative.__contains__))

        if score > 0:
            return BipolarSentiment.POSITIVE
        if score < 0:
            return BipolarSentiment.NEGATIVE
        return BipolarSentiment.NEUTRAL

    def clone(self) -> 'CountingWordListSentimentModel':
        return CountingWordListSentimentModel(self.positive, self.negative, self.case_sensitive)
