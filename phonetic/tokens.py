"""
Phonetic code -> integer token.

Reversing the digits turns "query code is a prefix of stored code" into
"stored_token % 10**len(query_code) == query_token", a single integer
comparison the database can evaluate on an indexed BIGINT column.

Leading zeros of the reversed string are lost by int(); the digit length must
therefore always be taken from the code, never from str(token).
"""

import re
from typing import NamedTuple, Tuple

# 10**18 still fits a signed 64-bit column
MAX_DIGITS = 18

_NON_DIGIT = re.compile(r"[^0-9]")


class SearchTerm(NamedTuple):
    """A (token, digit length) pair: the unit stored and matched."""

    token: int
    length: int

    @property
    def modulus(self) -> int:
        return 10 ** max(1, min(MAX_DIGITS, self.length))

    def matches(self, stored_token: int) -> bool:
        """True if stored_token's code starts with this term's code."""
        return stored_token % self.modulus == self.token


class TokenConverter:
    """Maps a phonetic code to a (token, digit length) pair."""

    def to_token(self, code: str) -> Tuple[int, int]:
        raise NotImplementedError


def reverse_code_to_token(code: str) -> Tuple[int, int]:
    """
    Reverse the digits of code and parse base-10.
    Returns (0, 0) when code holds no digits; callers discard token <= 0.
    Codes longer than MAX_DIGITS keep their leading digits (the prefix).
    """
    digits = _NON_DIGIT.sub("", code or "")
    if not digits:
        return 0, 0
    digits = digits[:MAX_DIGITS]
    return int(digits[::-1]), len(digits)


def token_to_code(token: int, length: int) -> str:
    """Inverse of reverse_code_to_token; zfill restores zeros int() dropped."""
    return str(token).zfill(length)[::-1]


class ReverseTokenConverter(TokenConverter):
    """Injectable wrapper around reverse_code_to_token."""

    name = "reverse"

    def to_token(self, code: str) -> Tuple[int, int]:
        return reverse_code_to_token(code)
