"""Phonetic encoding, token conversion and word splitting for the search index."""

from .cologne import (
    PhoneticEncoder,
    ColognePhoneticEncoder,
    cologne_phonetic,
)
from .tokens import (
    MAX_DIGITS,
    SearchTerm,
    TokenConverter,
    ReverseTokenConverter,
    reverse_code_to_token,
)
from .words import normalize_query, split_words, unique_words
from .stopwords import DEFAULT_LANG, StopWordCache

__all__ = [
    "PhoneticEncoder",
    "ColognePhoneticEncoder",
    "cologne_phonetic",
    "MAX_DIGITS",
    "SearchTerm",
    "TokenConverter",
    "ReverseTokenConverter",
    "reverse_code_to_token",
    "normalize_query",
    "split_words",
    "unique_words",
    "DEFAULT_LANG",
    "StopWordCache",
]
