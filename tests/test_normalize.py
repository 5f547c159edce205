import pytest

from fuzzyfind.normalize import normalize_rune, normalize_runes


@pytest.mark.parametrize(
    "char, expected",
    [
        ("\u00e1", "a"),
        ("\u00c4", "A"),
        ("\u00e7", "c"),
        ("\u2184", "c"),
        ("\u00df", "s"),
        ("\u1d22", "Z"),
        ("ệ", "e"),
        ("Ợ", "O"),
        ("\u0251", "a"),
    ],
)
def test_normalize_rune_maps_table_entries(char, expected):
    assert normalize_rune(char) == expected


@pytest.mark.parametrize("char", ["x", "Z", "0", " ", "\u00bf", "\u2185", "椙"])
def test_normalize_rune_leaves_unmapped_characters(char):
    assert normalize_rune(char) == char


def test_normalize_rune_rejects_multiple_characters():
    with pytest.raises(TypeError):
        normalize_rune("ab")


def test_normalize_runes_matches_source_example():
    assert normalize_runes("Danço").lower() == "danco"


def test_normalize_runes_sentence():
    assert normalize_runes("Só Danço Samba") == "So Danco Samba"


def test_normalize_runes_preserves_length():
    text = "Minímal example Só Danço"
    assert len(normalize_runes(text)) == len(text)


def test_normalize_runes_agrees_with_normalize_rune():
    text = "".join(chr(cp) for cp in range(0x00A0, 0x2200))
    assert normalize_runes(text) == "".join(normalize_rune(c) for c in text)


def test_normalize_runes_is_idempotent():
    text = "".join(chr(cp) for cp in range(0x00A0, 0x2200))
    once = normalize_runes(text)
    assert normalize_runes(once) == once


def test_mapped_characters_become_ascii_letters():
    for cp in range(0x00C0, 0x2185):
        char = chr(cp)
        result = normalize_rune(char)
        if result != char:
            assert result.isascii() and result.isalpha()


def test_ascii_text_is_untouched():
    text = "hello World 123 !?"
    assert normalize_runes(text) == text


def test_empty_string():
    assert normalize_runes("") == ""