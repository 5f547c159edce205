"""Character classes, scoring constants and bonus tables for fuzzy matching."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass, field
from enum import IntEnum

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Bonus for matching at the start of a word; chosen so that it is cancelled
# once the gap between acronym characters grows beyond about 8 characters.
BONUS_BOUNDARY = SCORE_MATCH // 2

# Bonus for non-word characters, used for consecutive chunks starting with one.
BONUS_NON_WORD = SCORE_MATCH // 2

# camelCase and letter123 transitions earn slightly less than a word boundary.
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION

# Minimum bonus for characters inside a consecutive chunk.
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)

# The bonus at the first pattern character counts this many times.
BONUS_FIRST_CHAR_MULTIPLIER = 2

_WHITE_CHARS = " \t\n\v\f\r\x85\xa0"
_DEFAULT_DELIMITERS = "/,:;|"


class CharClass(IntEnum):
    """Classes of characters that drive the position bonuses."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a match: the matched span, its score and optional positions.

    A failed match has ``start == end == -1``.
    """

    start: int
    end: int
    score: int
    positions: list[int] | None = field(default=None, compare=False)

    @property
    def matched(self) -> bool:
        return self.start >= 0


class Scheme:
    """A scoring scheme: bonus values and the character classification they use."""

    def __init__(
        self,
        name: str,
        bonus_boundary_white: int,
        bonus_boundary_delimiter: int,
        initial_char_class: CharClass,
        delimiters: str,
    ) -> None:
        self.name = name
        self.bonus_boundary_white = bonus_boundary_white
        self.bonus_boundary_delimiter = bonus_boundary_delimiter
        self.initial_char_class = initial_char_class
        self.delimiters = delimiters
        self._ascii_classes = tuple(self._classify_ascii(chr(code)) for code in range(128))
        self.bonus_matrix = tuple(
            tuple(self.bonus_for(prev, cls) for cls in CharClass) for prev in CharClass
        )

    def __repr__(self) -> str:
        return f"Scheme({self.name!r})"

    def _classify_ascii(self, char: str) -> CharClass:
        if "a" <= char <= "z":
            return CharClass.LOWER
        if "A" <= char <= "Z":
            return CharClass.UPPER
        if "0" <= char <= "9":
            return CharClass.NUMBER
        if char in _WHITE_CHARS:
            return CharClass.WHITE
        if char in self.delimiters:
            return CharClass.DELIMITER
        return CharClass.NON_WORD

    def _classify_non_ascii(self, char: str) -> CharClass:
        category = unicodedata.category(char)
        if category == "Ll":
            return CharClass.LOWER
        if category == "Lu":
            return CharClass.UPPER
        if category.startswith("N"):
            return CharClass.NUMBER
        if category.startswith("L"):
            return CharClass.LETTER
        if char.isspace():
            return CharClass.WHITE
        if char in self.delimiters:
            return CharClass.DELIMITER
        return CharClass.NON_WORD

    def char_class_of(self, char: str) -> CharClass:
        """Return the class of a single character."""
        if ord(char) < 128:
            return self._ascii_classes[ord(char)]
        return self._classify_non_ascii(char)

    def bonus_for(self, prev_class: CharClass, char_class: CharClass) -> int:
        """Return the bonus for a character of ``char_class`` following ``prev_class``."""
        if char_class > CharClass.NON_WORD:
            if prev_class == CharClass.WHITE:
                return self.bonus_boundary_white
            if prev_class == CharClass.DELIMITER:
                return self.bonus_boundary_delimiter
            if prev_class == CharClass.NON_WORD:
                return BONUS_BOUNDARY

        if (prev_class == CharClass.LOWER and char_class == CharClass.UPPER) or (
            prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
        ):
            return BONUS_CAMEL123

        if char_class in (CharClass.NON_WORD, CharClass.DELIMITER):
            return BONUS_NON_WORD
        if char_class == CharClass.WHITE:
            return self.bonus_boundary_white
        return 0

    def bonus_at(self, text: str, idx: int) -> int:
        """Return the bonus of the character at ``idx`` in ``text``."""
        if idx == 0:
            return self.bonus_boundary_white
        prev_class = self.char_class_of(text[idx - 1])
        return self.bonus_matrix[prev_class][self.char_class_of(text[idx])]


def _path_delimiters() -> str:
    if os.sep == "/":
        return "/"
    return os.sep + "/"


_SCHEMES: dict[str, Scheme] = {
    "default": Scheme(
        "default",
        BONUS_BOUNDARY + 2,
        BONUS_BOUNDARY + 1,
        CharClass.WHITE,
        _DEFAULT_DELIMITERS,
    ),
    "path": Scheme(
        "path",
        BONUS_BOUNDARY,
        BONUS_BOUNDARY + 1,
        CharClass.DELIMITER,
        _path_delimiters(),
    ),
    "history": Scheme(
        "history",
        BONUS_BOUNDARY,
        BONUS_BOUNDARY,
        CharClass.WHITE,
        _DEFAULT_DELIMITERS,
    ),
}


def get_scheme(name: str) -> Scheme:
    """Return the scoring scheme called ``name`` ("default", "path" or "history")."""
    try:
        return _SCHEMES[name]
    except KeyError:
        raise ValueError(f"invalid scoring scheme: {name}") from None