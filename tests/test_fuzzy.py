import pytest

from fuzzyfind.fuzzy import (
    ascii_fuzzy_index,
    calculate_score,
    fuzzy_match_v1,
    fuzzy_match_v2,
)
from fuzzyfind.scheme import (
    BONUS_BOUNDARY as BB,
    BONUS_CAMEL123 as CAMEL,
    BONUS_CONSECUTIVE as CONS,
    BONUS_FIRST_CHAR_MULTIPLIER as MUL,
    BONUS_NON_WORD as NW,
    SCORE_GAP_EXTENSION as GE,
    SCORE_GAP_START as GS,
    SCORE_MATCH as SM,
    get_scheme,
)

DEFAULT = get_scheme("default")
W = DEFAULT.bonus_boundary_white
D = DEFAULT.bonus_boundary_delimiter


def assert_match(fn, case_sensitive, normalize, forward, text, pattern, sidx, eidx, score):
    if not case_sensitive:
        pattern = pattern.lower()
    result = fn(case_sensitive, normalize, forward, text, pattern, True, DEFAULT)
    if result.positions:
        positions = sorted(result.positions)
        start, end = positions[0], positions[-1] + 1
    else:
        start, end = result.start, result.end
    assert (start, end, result.score) == (sidx, eidx, score)


FUZZY_CASES = [
    (False, "fooBarbaz1", "oBZ", 2, 9, SM * 3 + CAMEL + GS + GE * 3),
    (False, "foo bar baz", "fbb", 0, 9, SM * 3 + W * MUL + W * 2 + 2 * GS + 4 * GE),
    (False, "/AutomatorDocument.icns", "rdoc", 9, 13, SM * 4 + CAMEL + CONS * 2),
    (False, "/man1/zshcompctl.1", "zshc", 6, 10, SM * 4 + D * MUL + D * 3),
    (False, "/.oh-my-zsh/cache", "zshc", 8, 13, SM * 4 + BB * MUL + BB * 2 + GS + D),
    (False, "ab0123 456", "12356", 3, 10, SM * 5 + CONS * 3 + GS + GE),
    (False, "abc123 456", "12356", 3, 10, SM * 5 + CAMEL * MUL + CAMEL * 2 + CONS + GS + GE),
    (False, "foo/bar/baz", "fbb", 0, 9, SM * 3 + W * MUL + D * 2 + 2 * GS + 4 * GE),
    (False, "fooBarBaz", "fbb", 0, 7, SM * 3 + W * MUL + CAMEL * 2 + 2 * GS + 2 * GE),
    (False, "foo barbaz", "fbb", 0, 8, SM * 3 + W * MUL + W + GS * 2 + GE * 3),
    (False, "fooBar Baz", "foob", 0, 4, SM * 4 + W * MUL + W * 3),
    (False, "xFoo-Bar Baz", "foo-b", 1, 6, SM * 5 + CAMEL * MUL + CAMEL * 2 + NW + BB),
    (True, "fooBarbaz", "oBz", 2, 9, SM * 3 + CAMEL + GS + GE * 3),
    (True, "Foo/Bar/Baz", "FBB", 0, 9, SM * 3 + W * MUL + D * 2 + GS * 2 + GE * 4),
    (True, "FooBarBaz", "FBB", 0, 7, SM * 3 + W * MUL + CAMEL * 2 + GS * 2 + GE * 2),
    (True, "FooBar Baz", "FooB", 0, 4, SM * 4 + W * MUL + W * 2 + max(CAMEL, W)),
    (True, "foo-bar", "o-ba", 2, 6, SM * 4 + BB * 3),
    (True, "fooBarbaz", "oBZ", -1, -1, 0),
    (True, "Foo Bar Baz", "fbb", -1, -1, 0),
    (True, "fooBarbaz", "fooBarbazz", -1, -1, 0),
]


@pytest.mark.parametrize("fn", [fuzzy_match_v1, fuzzy_match_v2])
@pytest.mark.parametrize("forward", [True, False])
@pytest.mark.parametrize("case_sensitive, text, pattern, sidx, eidx, score", FUZZY_CASES)
def test_fuzzy_match(fn, forward, case_sensitive, text, pattern, sidx, eidx, score):
    assert_match(fn, case_sensitive, False, forward, text, pattern, sidx, eidx, score)


def test_fuzzy_match_backward_v1():
    assert_match(fuzzy_match_v1, False, False, True, "foobar fb", "fb", 0, 4,
                 SM * 2 + W * MUL + GS + GE)
    assert_match(fuzzy_match_v1, False, False, False, "foobar fb", "fb", 7, 9,
                 SM * 2 + W * MUL + W)


@pytest.mark.parametrize("fn", [fuzzy_match_v1, fuzzy_match_v2])
@pytest.mark.parametrize("forward", [True, False])
def test_empty_pattern(fn, forward):
    assert_match(fn, True, False, forward, "foobar", "", 0, 0, 0)


@pytest.mark.parametrize("fn", [fuzzy_match_v1, fuzzy_match_v2])
@pytest.mark.parametrize(
    "text, pattern, sidx, eidx, score",
    [
        ("Só Danço Samba", "So", 0, 2, 62),
        ("Só Danço Samba", "sodc", 0, 7, 97),
        ("Danço", "danco", 0, 5, 140),
    ],
)
def test_normalize(fn, text, pattern, sidx, eidx, score):
    assert_match(fn, False, True, True, text, pattern, sidx, eidx, score)


def test_long_string():
    half = 65535
    text = "x" * half + "z" + "x" * (half - 1)
    assert_match(fuzzy_match_v2, True, False, True, text, "zx", half, half + 2, SM * 2 + CONS)


def test_long_string_with_normalize():
    text = "x" * 30000 + " Minímal example"
    assert_match(fuzzy_match_v1, False, True, False, text, "minim", 30001, 30006, 140)


@pytest.mark.parametrize(
    "text, pattern, case_sensitive, expected",
    [
        ("fooBarbaz", "obz", False, (0, 9)),
        ("abcabc", "c", True, (1, 6)),
        ("foo", "x", False, (-1, -1)),
        ("foo", "é", False, (-1, -1)),
        ("héllo", "h", False, (0, 5)),
        ("fooBar", "b", True, (-1, -1)),
    ],
)
def test_ascii_fuzzy_index(text, pattern, case_sensitive, expected):
    assert ascii_fuzzy_index(text, pattern, case_sensitive) == expected


def test_calculate_score_matches_source_formula():
    score, positions = calculate_score(False, False, "fooBarBaz", "fbb", 0, 7, True, DEFAULT)
    assert score == SM * 3 + W * MUL + CAMEL * 2 + 2 * GS + 2 * GE
    assert positions == [0, 3, 6]


def test_calculate_score_without_positions():
    score, positions = calculate_score(False, False, "fooBar Baz", "foob", 0, 4, False, DEFAULT)
    assert score == SM * 4 + W * MUL + W * 3
    assert positions is None


@pytest.mark.parametrize("fn", [fuzzy_match_v1, fuzzy_match_v2])
@pytest.mark.parametrize(
    "text, pattern",
    [("src/fuzzy/finder.py", "sff"), ("Hello World", "hwd"), ("a-b-c-d", "abcd")],
)
def test_positions_hold_pattern_characters(fn, text, pattern):
    result = fn(False, False, True, text, pattern, True, DEFAULT)
    positions = sorted(result.positions)
    assert len(positions) == len(pattern)
    assert "".join(text[p] for p in positions).lower() == pattern
    assert result.start <= positions[0] and positions[-1] < result.end


def test_v2_without_positions():
    result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", False, DEFAULT)
    assert result.positions is None
    assert (result.end, result.score) == (9, SM * 3 + W * MUL + W * 2 + 2 * GS + 4 * GE)


def test_v2_single_character_prefers_boundary():
    result = fuzzy_match_v2(False, False, True, "xbx b", "b", True, DEFAULT)
    assert (result.start, result.end) == (4, 5)
    assert result.positions == [4]
    assert result.score == SM + W * MUL


def test_pattern_longer_than_text():
    assert not fuzzy_match_v2(False, False, True, "ab", "abc", True, DEFAULT).matched
    assert not fuzzy_match_v1(False, False, True, "ab", "abc", True, DEFAULT).matched


def test_default_scheme_used_when_omitted():
    with_default = fuzzy_match_v2(False, False, True, "foo/bar", "fb", False)
    explicit = fuzzy_match_v2(False, False, True, "foo/bar", "fb", False, DEFAULT)
    assert with_default == explicit


def test_history_scheme_changes_score():
    history = get_scheme("history")
    result = fuzzy_match_v1(False, False, True, "foo bar", "fb", False, history)
    assert result.score == SM * 2 + BB * MUL + BB + GS + GE * 2