"""
Phonetic encoding for pronunciation-tolerant search.

- Cologne phonetics ("Koelner Phonetik"): digit code for words that sound alike,
  tuned for German spelling variants (Meier / Mayer / Maier -> "67").
- Codes are later turned into integer tokens (see phonetic.tokens) so that a
  prefix test on codes becomes a modulo test on tokens.
"""

import re
from typing import List

_UMLAUTS = str.maketrans({"Ä": "A", "Ö": "O", "Ü": "U", "ä": "a", "ö": "o", "ü": "u", "ß": "s"})
_NON_ALPHA = re.compile(r"[^A-Z]")

_VOWELS = frozenset("AEIJOUY")
# Letters after C that select the "hard" 4 instead of 8
_C_HARD = frozenset("AHKLOQRUX")


class PhoneticEncoder:
    """Maps a single word to a digit-string phonetic code."""

    def encode(self, word: str) -> str:
        raise NotImplementedError


def _normalize(word: str) -> str:
    """Uppercase, fold German umlauts and sharp s, keep A-Z only."""
    word = word.strip()
    if not word:
        return ""
    return _NON_ALPHA.sub("", word.translate(_UMLAUTS).upper())


def _letter_code(c: str, prev: str, nxt: str, first: bool) -> str:
    """Raw code (0, 1 or 2 digits) for one letter given its neighbours."""
    if c in _VOWELS:
        return "0"
    if c == "H":
        return ""
    if c == "B":
        return "1"
    if c == "P":
        return "3" if nxt == "H" else "1"
    if c in "DT":
        return "8" if nxt in ("C", "S", "Z") else "2"
    if c in "FVW":
        return "3"
    if c in "GKQ":
        return "4"
    if c == "C":
        if not first and prev in ("S", "Z"):
            return "8"
        return "4" if nxt in _C_HARD else "8"
    if c == "X":
        return "8" if prev in ("C", "K", "Q") else "48"
    if c == "L":
        return "5"
    if c in "MN":
        return "6"
    if c == "R":
        return "7"
    if c in "SZ":
        return "8"
    return ""


def cologne_digits(word: str) -> List[str]:
    """
    Emitted digit sequence before zero removal.
    Consecutive duplicates are collapsed against the last *emitted* digit,
    so the two digits of X take part in collapsing too.
    """
    chars = _normalize(word)
    out: List[str] = []
    last = ""
    for i, c in enumerate(chars):
        prev = chars[i - 1] if i > 0 else ""
        nxt = chars[i + 1] if i + 1 < len(chars) else ""
        for d in _letter_code(c, prev, nxt, i == 0):
            if d == last:
                continue
            out.append(d)
            last = d
    return out


def cologne_phonetic(word: str) -> str:
    """
    Cologne phonetic code of word, e.g. "Mueller" -> "657".
    Zeros survive only in the first position. Empty for words without A-Z.
    """
    digits = cologne_digits(word)
    return "".join(d for i, d in enumerate(digits) if d != "0" or i == 0)


class ColognePhoneticEncoder(PhoneticEncoder):
    """Injectable wrapper around cologne_phonetic."""

    name = "cologne"

    def encode(self, word: str) -> str:
        return cologne_phonetic(word)
