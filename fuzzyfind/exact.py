"""Exact, boundary, prefix, suffix and equality matching of a pattern in a text."""

from __future__ import annotations

from itertools import takewhile

from .fuzzy import _fold_case, _no_match, _prepare, ascii_fuzzy_index, calculate_score
from .normalize import normalize_rune
from .scheme import (
    BONUS_BOUNDARY,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Scheme,
    get_scheme,
)

_LATIN1_SPACES = "\t\n\v\f\r \x85\xa0"


def _is_space(char: str) -> bool:
    if ord(char) < 256:
        return char in _LATIN1_SPACES
    return char.isspace()


def _leading_whitespaces(text: str) -> int:
    return sum(1 for _ in takewhile(_is_space, text))


def _trailing_whitespaces(text: str) -> int:
    return sum(1 for _ in takewhile(_is_space, reversed(text)))


def _exact_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    boundary_check: bool,
    text: str,
    pattern: str,
    scheme: Scheme,
) -> MatchResult:
    if not pattern:
        return MatchResult(0, 0, 0)

    len_runes = len(text)
    len_pattern = len(pattern)
    if len_runes < len_pattern:
        return _no_match()

    idx, _ = ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return _no_match()

    # Only the bonus at the first character position is taken into account
    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < len_runes:
        text_idx = index if forward else len_runes - index - 1
        char = _prepare(text[text_idx], case_sensitive, normalize)
        pattern_idx = pidx if forward else len_pattern - pidx - 1
        ok = pattern[pattern_idx] == char
        if ok:
            if pattern_idx == 0:
                bonus = scheme.bonus_at(text, text_idx)
            if boundary_check:
                ok = bonus >= BONUS_BOUNDARY
                if ok and pattern_idx == 0:
                    ok = text_idx == 0 or (
                        scheme.char_class_of(text[text_idx - 1]) <= CharClass.DELIMITER
                    )
                if ok and pattern_idx == len_pattern - 1:
                    ok = text_idx == len_runes - 1 or (
                        scheme.char_class_of(text[text_idx + 1]) <= CharClass.DELIMITER
                    )
        if ok:
            pidx += 1
            if pidx == len_pattern:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return _no_match()

    if forward:
        sidx = best_pos - len_pattern + 1
        eidx = best_pos + 1
    else:
        sidx = len_runes - (best_pos + 1)
        eidx = len_runes - (best_pos - len_pattern + 1)

    if boundary_check:
        # Underscore boundaries rank lower than the other kinds of boundaries
        score = bonus
        deduct = bonus - BONUS_BOUNDARY + 1
        if sidx > 0 and text[sidx - 1] == "_":
            score -= deduct + 1
            deduct = 1
        if eidx < len_runes and text[eidx] == "_":
            score -= deduct
        # Base score so that this can compete with other kinds of matches
        score += SCORE_MATCH * len_pattern + scheme.bonus_boundary_white * (len_pattern + 1)
    else:
        score, _ = calculate_score(
            case_sensitive, normalize, text, pattern, sidx, eidx, False, scheme
        )
    return MatchResult(sidx, eidx, score)


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the occurrence of ``pattern`` in ``text`` with the highest bonus."""
    return _exact_match(
        case_sensitive, normalize, forward, False, text, pattern, scheme or get_scheme("default")
    )


def exact_match_boundary(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find an occurrence of ``pattern`` that starts and ends on word boundaries."""
    return _exact_match(
        case_sensitive, normalize, forward, True, text, pattern, scheme or get_scheme("default")
    )


def _same_char(char: str, expected: str, case_sensitive: bool, normalize: bool) -> bool:
    if not case_sensitive:
        char = _fold_case(char)
    if normalize:
        char = normalize_rune(char)
    return char == expected


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match ``pattern`` at the start of ``text``, ignoring leading whitespace."""
    scheme = scheme or get_scheme("default")
    if not pattern:
        return MatchResult(0, 0, 0)

    trimmed_len = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    if len(text) - trimmed_len < len(pattern):
        return _no_match()

    segment = text[trimmed_len : trimmed_len + len(pattern)]
    if not all(
        _same_char(char, expected, case_sensitive, normalize)
        for char, expected in zip(segment, pattern)
    ):
        return _no_match()

    end = trimmed_len + len(pattern)
    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, trimmed_len, end, False, scheme
    )
    return MatchResult(trimmed_len, end, score)


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match ``pattern`` at the end of ``text``, ignoring trailing whitespace."""
    scheme = scheme or get_scheme("default")
    trimmed_len = len(text)
    if not pattern or not _is_space(pattern[-1]):
        trimmed_len -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed_len, trimmed_len, 0)

    diff = trimmed_len - len(pattern)
    if diff < 0:
        return _no_match()

    segment = text[diff:trimmed_len]
    if not all(
        _same_char(char, expected, case_sensitive, normalize)
        for char, expected in zip(segment, pattern)
    ):
        return _no_match()

    score, _ = calculate_score(
        case_sensitive, normalize, text, pattern, diff, trimmed_len, False, scheme
    )
    return MatchResult(diff, trimmed_len, score)


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match when ``text``, stripped of surrounding whitespace, equals ``pattern``."""
    scheme = scheme or get_scheme("default")
    len_pattern = len(pattern)
    if len_pattern == 0:
        return _no_match()

    trimmed_len = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    trimmed_end_len = 0 if _is_space(pattern[-1]) else _trailing_whitespaces(text)

    if len(text) - trimmed_len - trimmed_end_len != len_pattern:
        return _no_match()

    if normalize:
        segment = text[trimmed_len : trimmed_len + len_pattern]
        matched = all(
            normalize_rune(expected)
            == normalize_rune(char if case_sensitive else _fold_case(char))
            for char, expected in zip(segment, pattern)
        )
    else:
        segment = text[trimmed_len : len(text) - trimmed_end_len]
        if not case_sensitive:
            segment = segment.lower()
        matched = segment == pattern

    if not matched:
        return _no_match()
    white = scheme.bonus_boundary_white
    score = (SCORE_MATCH + white) * len_pattern + (BONUS_FIRST_CHAR_MULTIPLIER - 1) * white
    return MatchResult(trimmed_len, trimmed_len + len_pattern, score)