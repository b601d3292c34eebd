# src/codec/text_codec.py — v1
"""Fixed-shift substitution cipher over ASCII letters and digits.

This is obfuscation, not confidentiality: the shift is a public constant.
Letters rotate within their own case (mod 26), digits rotate mod 10, and
every other character passes through unchanged, so ``decode(encode(s))``
is the identity for any string.
"""

from __future__ import annotations

SHIFT = 7

_LETTER_COUNT = 26
_DIGIT_COUNT = 10


def encode(text: str, shift: int = SHIFT) -> str:
    """Rotate letters and digits of ``text`` forward by ``shift``."""
    return "".join(_rotate(ch, shift) for ch in text)


def decode(text: str, shift: int = SHIFT) -> str:
    """Inverse of :func:`encode` for the same ``shift``."""
    return "".join(_rotate(ch, -shift) for ch in text)


def _rotate(ch: str, shift: int) -> str:
    if "A" <= ch <= "Z":
        return _shift_within(ch, "A", _LETTER_COUNT, shift)
    if "a" <= ch <= "z":
        return _shift_within(ch, "a", _LETTER_COUNT, shift)
    if "0" <= ch <= "9":
        return _shift_within(ch, "0", _DIGIT_COUNT, shift)
    return ch


def _shift_within(ch: str, first: str, modulus: int, shift: int) -> str:
    index = ord(ch) - ord(first)
    # Python's % is non-negative for a positive modulus, so negative
    # shifts wrap the same way as (index - S + modulus) % modulus.
    return chr((index + shift) % modulus + ord(first))
