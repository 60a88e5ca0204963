"""
Word tokenization shared by indexing and querying.

- Letters only (Unicode letter class, str.isalpha); digits, numeric symbols
  such as ½ or ², underscores and punctuation act as separators.
- Words shorter than MIN_WORD_LENGTH are dropped.
"""

import re
from typing import AbstractSet, List, Optional

MIN_WORD_LENGTH = 2

_WHITESPACE = re.compile(r"\s+")


def _letters_only(text: str) -> str:
    return "".join(c if c.isalpha() else " " for c in text)


def normalize_query(q: str) -> str:
    """Trim and collapse whitespace runs to a single space."""
    return _WHITESPACE.sub(" ", (q or "").strip())


def split_words(
    text: str,
    max_words: Optional[int] = None,
    stop_words: Optional[AbstractSet[str]] = None,
) -> List[str]:
    """
    Lowercase, replace non-letter runs with a space, split, drop short words.
    With stop_words, drop listed words (no set -> no filtering).
    With max_words, stop after that many words; the rest is ignored.
    """
    text = _letters_only((text or "").lower()).strip()
    if not text or (max_words is not None and max_words <= 0):
        return []
    out: List[str] = []
    for w in text.split():
        if len(w) < MIN_WORD_LENGTH:
            continue
        if stop_words and w in stop_words:
            continue
        out.append(w)
        if max_words is not None and len(out) >= max_words:
            break
    return out


def unique_words(words: List[str]) -> List[str]:
    """Drop duplicates, keep first-seen order."""
    return list(dict.fromkeys(words))
