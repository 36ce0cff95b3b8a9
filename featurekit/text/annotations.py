"""
Token annotations and helpers for lists of them.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple, Type, TypeVar

A = TypeVar('A', bound='TextAnnotation')


class PartOfSpeech(Enum):
    """Penn Treebank tags; UK marks a token the tagger could not classify."""

    CC = 'CC'
    CD = 'CD'
    DT = 'DT'
    EX = 'EX'
    FW = 'FW'
    IN = 'IN'
    JJ = 'JJ'
    JJR = 'JJR'
    JJS = 'JJS'
    LS = 'LS'
    MD = 'MD'
    NN = 'NN'
    NNS = 'NNS'
    NNP = 'NNP'
    NNPS = 'NNPS'
    PDT = 'PDT'
    POS = 'POS'
    PRP = 'PRP'
    PRP_S = 'PRP$'
    RB = 'RB'
    RBR = 'RBR'
    RBS = 'RBS'
    RP = 'RP'
    SYM = 'SYM'
    TO = 'TO'
    UH = 'UH'
    VB = 'VB'
    VBD = 'VBD'
    VBG = 'VBG'
    VBN = 'VBN'
    VBP = 'VBP'
    VBZ = 'VBZ'
    WDT = 'WDT'
    WP = 'WP'
    WP_S = 'WP$'
    WRB = 'WRB'
    UK = 'UK'

    @classmethod
    def from_tag(cls, tag: str) -> 'PartOfSpeech':
        try:
            return cls(tag)
        except ValueError:
            return cls.UK


class TextAnnotation:
    """Base annotation; annotations can carry further annotations keyed by type."""

    def __init__(self) -> None:
        self._annotations: Dict[type, List['TextAnnotation']] = {}

    def add_annotation(self, annotation: 'TextAnnotation') -> None:
        self._annotations.setdefault(type(annotation), []).append(annotation)

    def get_annotations_for(self, cls: Type[A]) -> List[A]:
        return list(self._annotations.get(cls, []))

    def annotation_keys(self) -> List[type]:
        return list(self._annotations)


class POSAnnotation(TextAnnotation):
    def __init__(self, pos: PartOfSpeech) -> None:
        super().__init__()
        self.pos = pos

    def __str__(self):
        return self.pos.value


class TokenAnnotation(TextAnnotation):
    def __init__(self, token: str, start: int = 0, end: int = 0) -> None:
        super().__init__()
        self.string_token = token
        self.start = start
        self.end = end

    @property
    def span(self) -> Tuple[int, int]:
        return self.start, self.end


def string_tokens(tokens: Iterable[TokenAnnotation]) -> List[str]:
    """Raw text of each token."""
    return [token.string_token for token in tokens]


def pos_strings(tokens: Iterable[TokenAnnotation]) -> List[str]:
    """
    First part-of-speech tag of each token.

    Tokens tagged UK are replaced by their own text. Tokens without any
    POSAnnotation raise ValueError.
    """
    result = []
    for token in tokens:
        tags = token.get_annotations_for(POSAnnotation)
        if not tags:
            raise ValueError(f"Token {token.string_token!r} has no part-of-speech annotation")

        if tags[0].pos is PartOfSpeech.UK:
            result.append(token.string_token)
        else:
            result.append(str(tags[0]))
    return result


def list_to_array(items: Iterable[str]) -> Tuple[str, ...]:
    return tuple(items)


def all_have_annotation(items: Iterable[TextAnnotation], cls: Type[TextAnnotation]) -> bool:
    """False if any item lacks an annotation of type cls."""
    return all(cls in item.annotation_keys() for item in items)


def count_matching(items: Iterable, predicate: Callable[[object], bool]) -> int:
    return sum(1 for item in items if predicate(item))
