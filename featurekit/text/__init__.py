"""Text helpers: wordlist sentiment models and token annotations"""

from .annotations import (
    PartOfSpeech,
    POSAnnotation,
    TokenAnnotation,
    all_have_annotation,
    count_matching,
    list_to_array,
    pos_strings,
    string_tokens,
)
from .sentiment import (
    BipolarSentiment,
    CountingWordListSentimentModel,
    WordListSentimentModel,
)

__all__ = [
    'PartOfSpeech',
    'POSAnnotation',
    'TokenAnnotation',
    'all_have_annotation',
    'count_matching',
    'list_to_array',
    'pos_strings',
    'string_tokens',
    'BipolarSentiment',
    'CountingWordListSentimentModel',
    'WordListSentimentModel',
]
