"""Fuzzy matching: a greedy scan (v1) and an optimal scoring alignment (v2)."""

from __future__ import annotations

from .normalize import normalize_rune
from .scheme import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Scheme,
    get_scheme,
)

# Above this many cells the score matrix is not built; the greedy scan is used.
_MATRIX_LIMIT = 100 * 1024


def _no_match() -> MatchResult:
    return MatchResult(-1, -1, 0)


def _fold_case(char: str) -> str:
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 127:
        lowered = char.lower()
        return lowered[0] if lowered else char
    return char


def _prepare(char: str, case_sensitive: bool, normalize: bool) -> str:
    if not case_sensitive:
        char = _fold_case(char)
    if normalize:
        char = normalize_rune(char)
    return char


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    rest = text[start:]
    idx = rest.find(char)
    if idx == 0:
        return start
    if not case_sensitive and "a" <= char <= "z":
        scope = rest[:idx] if idx > 0 else rest
        upper_idx = scope.find(char.upper())
        if upper_idx >= 0:
            idx = upper_idx
    if idx < 0:
        return -1
    return start + idx


def ascii_fuzzy_index(text: str, pattern: str, case_sensitive: bool) -> tuple[int, int]:
    """Narrow the range of ``text`` that can hold ``pattern``.

    Returns ``(-1, -1)`` when no match is possible and the whole range when
    the text is not ASCII.
    """
    if not text.isascii():
        return 0, len(text)
    if not pattern.isascii():
        return -1, -1
    if not pattern:
        return 0, len(text)

    first_idx = idx = last_idx = 0
    for pidx, char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, char, idx)
        if idx < 0:
            return -1, -1
        if pidx == 0 and idx > 0:
            # Step back one so that the bonus of the first character is known
            first_idx = idx - 1
        last_idx = idx
        idx += 1

    last_char = pattern[-1]
    upper_char = last_char.upper() if not case_sensitive and "a" <= last_char <= "z" else last_char
    scope = text[last_idx:]
    offset = max(scope.rfind(last_char, 1), scope.rfind(upper_char, 1))
    if offset > 0:
        return first_idx, last_idx + offset + 1
    return first_idx, last_idx + 1


def calculate_score(
    case_sensitive: bool,
    normalize: bool,
    text: str,
    pattern: str,
    sidx: int,
    eidx: int,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> tuple[int, list[int] | None]:
    """Score the match of ``pattern`` within ``text[sidx:eidx]`` with the v2 criteria."""
    scheme = scheme or get_scheme("default")
    pidx, score, in_gap, consecutive, first_bonus = 0, 0, False, 0, 0
    positions: list[int] | None = [] if with_pos else None
    prev_class = scheme.initial_char_class
    if sidx > 0:
        prev_class = scheme.char_class_of(text[sidx - 1])

    for idx, raw in enumerate(text[sidx:eidx], start=sidx):
        char_class = scheme.char_class_of(raw)
        char = _prepare(raw, case_sensitive, normalize)
        if pidx < len(pattern) and char == pattern[pidx]:
            if positions is not None:
                positions.append(idx)
            score += SCORE_MATCH
            bonus = scheme.bonus_matrix[prev_class][char_class]
            if consecutive == 0:
                first_bonus = bonus
            else:
                # Break the consecutive chunk on a stronger boundary
                if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                    first_bonus = bonus
                bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
            if pidx == 0:
                score += bonus * BONUS_FIRST_CHAR_MULTIPLIER
            else:
                score += bonus
            in_gap = False
            consecutive += 1
            pidx += 1
        else:
            score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            in_gap = True
            consecutive = 0
            first_bonus = 0
        prev_class = char_class
    return score, positions


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the first fuzzy occurrence, then shrink it by scanning backwards.

    ``pattern`` must already be lower case when not case sensitive, and
    normalized when ``normalize`` is set.
    """
    scheme = scheme or get_scheme("default")
    if not pattern:
        return MatchResult(0, 0, 0)
    idx, _ = ascii_fuzzy_index(text, pattern, case_sensitive)
    if idx < 0:
        return _no_match()

    seq = text if forward else text[::-1]
    pat = pattern if forward else pattern[::-1]
    pidx, sidx, eidx = 0, -1, -1

    for index, raw in enumerate(seq):
        if _prepare(raw, case_sensitive, normalize) == pat[pidx]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == len(pat):
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return _no_match()

    pidx -= 1
    for index in reversed(range(sidx, eidx)):
        if _prepare(seq[index], case_sensitive, normalize) == pat[pidx]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = len(text) - eidx, len(text) - sidx

    score, positions = calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos, scheme
    )
    return MatchResult(sidx, eidx, score, positions)


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the highest scoring fuzzy alignment of ``pattern`` in ``text``.

    A Smith-Waterman style search in which pattern characters may not be
    omitted. Very large inputs fall back to :func:`fuzzy_match_v1`.
    """
    scheme = scheme or get_scheme("default")
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0, [] if with_pos else None)
    n = len(text)
    if m > n:
        return _no_match()
    if n * m > _MATRIX_LIMIT:
        return fuzzy_match_v1(case_sensitive, normalize, forward, text, pattern, with_pos, scheme)

    # Phase 1: narrow the search range
    min_idx, max_idx = ascii_fuzzy_index(text, pattern, case_sensitive)
    if min_idx < 0:
        return _no_match()
    n = max_idx - min_idx

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first = [0] * m
    chars = list(text[min_idx:max_idx])

    # Phase 2: bonus for each position and the first row of the matrix
    max_score, max_score_pos = 0, 0
    pidx, last_idx = 0, 0
    pchar0 = pchar = pattern[0]
    prev_h0, prev_class, in_gap = 0, scheme.initial_char_class, False
    for off, char in enumerate(chars):
        char_class = scheme.char_class_of(char)
        if not case_sensitive and char_class == CharClass.UPPER:
            char = _fold_case(char)
        if normalize and ord(char) > 127:
            char = normalize_rune(char)
        chars[off] = char

        bonus = scheme.bonus_matrix[prev_class][char_class]
        bonuses[off] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first[pidx] = off
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = off

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[off] = score
            c0[off] = 1
            if m == 1 and (forward and score > max_score or not forward and score >= max_score):
                max_score, max_score_pos = score, off
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[off] = max(prev_h0 + gap, 0)
            c0[off] = 0
            in_gap = True
        prev_h0 = h0[off]

    if pidx != m:
        return _no_match()
    if m == 1:
        pos = min_idx + max_score_pos
        return MatchResult(pos, pos + 1, max_score, [pos] if with_pos else None)

    # Phase 3: fill in the score matrix
    f0 = first[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0 : last_idx + 1]
    runs = [0] * (width * m)
    runs[:width] = c0[f0 : last_idx + 1]

    for pidx in range(1, m):
        f = first[pidx]
        pchar = pattern[pidx]
        base = pidx * width + f - f0
        diag = base - 1 - width
        scores[base - 1] = 0
        in_gap = False
        for k, char in enumerate(chars[f : last_idx + 1]):
            col = f + k
            s1 = 0
            consecutive = 0
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            s2 = scores[base - 1 + k] + gap

            if pchar == char:
                s1 = scores[diag + k] + SCORE_MATCH
                b = bonuses[col]
                consecutive = runs[diag + k] + 1
                if consecutive > 1:
                    fb = bonuses[col - consecutive + 1]
                    if b >= BONUS_BOUNDARY and b > fb:
                        consecutive = 1
                    else:
                        b = max(b, BONUS_CONSECUTIVE, fb)
                if s1 + b < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += b
            runs[base + k] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and (forward and score > max_score or not forward and score >= max_score):
                max_score, max_score_pos = score, col
            scores[base + k] = score

    # Phase 4: backtrace to recover character positions
    positions: list[int] | None = [] if with_pos else None
    j = f0
    if positions is not None:
        i = m - 1
        j = max_score_pos
        prefer_match = True
        while True:
            row = i * width
            j0 = j - f0
            s = scores[row + j0]
            s1 = s2 = 0
            if i > 0 and j >= first[i]:
                s1 = scores[row - width + j0 - 1]
            if j > first[i]:
                s2 = scores[row + j0 - 1]

            if s > s1 and (s > s2 or s == s2 and prefer_match):
                positions.append(j + min_idx)
                if i == 0:
                    break
                i -= 1
            below = row + width + j0 + 1
            prefer_match = runs[row + j0] > 1 or (below < len(runs) and runs[below] > 0)
            j -= 1

    return MatchResult(min_idx + j, min_idx + max_score_pos + 1, max_score, positions)