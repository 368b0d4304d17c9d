# pagebinder/ordering/natural.py
# ============================================================
# Natural Order Sequencer
# ============================================================
# Orders file names the way a person would: embedded numbers
# are compared by value, so "page2.jpg" sorts before
# "page10.jpg". Only ASCII digits ('0'..'9') form numeric
# tokens.
#
# Usage:
#   from pagebinder.ordering.natural import compare, sort_names
#   compare("img9.png", "img10.png")   # -> -1
#   sort_names(["p10", "p2", "p1"])     # -> ["p1", "p2", "p10"]
# ============================================================

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable

from config.settings import Ordering

DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class FileToken:
    """
    One run of a file name: either all ASCII digits or no digits at all.

    Attributes:
        text: The literal characters of the run.
    """
    text: str

    @property
    def is_numeric(self) -> bool:
        # Classification only looks at the first character
        return self.text[0] in DIGITS

    @property
    def value(self) -> int:
        return int(self.text)


def tokenize(name: str) -> list[FileToken]:
    """
    Split a name into alternating digit / non-digit runs.

    The tokens cover the whole name without gaps, so joining their
    text gives back the original string. An empty name has no tokens.

    Example:
        >>> [t.text for t in tokenize("img010b.png")]
        ['img', '010', 'b.png']
    """
    tokens: list[FileToken] = []
    current: list[str] = []
    current_is_digit = False

    for ch in name:
        is_digit = ch in DIGITS
        if current and is_digit != current_is_digit:
            tokens.append(FileToken("".join(current)))
            current = []
        current.append(ch)
        current_is_digit = is_digit

    if current:
        tokens.append(FileToken("".join(current)))

    return tokens


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare(name_a: str, name_b: str) -> int:
    """
    Compare two names in natural order.

    Returns -1, 0 or 1. Numeric tokens are compared by value and
    text tokens by code point. Tokens with the same numeric value
    but different spelling ("09" and "9") are treated as equal and
    the walk continues with the next token, so "img09.png" equals
    "img9.png". Stopping at such a tie would make "a01b" equal both
    "a1c" and "a01a" while "a01b" > "a01a", which is not a consistent
    ordering. When one token list is a prefix of the other the
    shorter one sorts first.
    """
    tokens_a = tokenize(name_a)
    tokens_b = tokenize(name_b)

    for tok_a, tok_b in zip(tokens_a, tokens_b):
        if tok_a.text == tok_b.text:
            continue
        if tok_a.is_numeric and tok_b.is_numeric:
            result = _cmp(tok_a.value, tok_b.value)
            if result == 0:
                continue
            return result
        return _cmp(tok_a.text, tok_b.text)

    return _cmp(len(tokens_a), len(tokens_b))


natural_key = cmp_to_key(compare)


def sort_names(names: Iterable[str], ordering: Ordering = Ordering.NATURAL) -> list[str]:
    """
    Sort names ascending using the requested ordering.

    Natural ordering is stable, so names that compare equal
    ("a09" and "a9") keep their relative input order.
    """
    if ordering == Ordering.LEXICAL:
        return sorted(names)
    return sorted(names, key=natural_key)
