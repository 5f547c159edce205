"""Items: single lines of input as seen by the matcher."""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import AnsiOffset, extract_color

# Trimmed lengths are kept within 16 bits.
_MAX_TRIM_LENGTH = 0xFFFF


@dataclass(slots=True)
class Item:
    """One line of input.

    ``text`` is what is searched and shown, with escape sequences removed.
    ``orig_text`` is the line as it was read, kept when ``text`` was derived
    from it. ``colors`` holds the coloured spans of ``text``, if any.
    """

    text: str
    index: int = 0
    orig_text: str | None = None
    colors: list[AnsiOffset] | None = None

    @property
    def color_offsets(self) -> list[AnsiOffset]:
        """The coloured spans of the text; empty when there are none."""
        return list(self.colors) if self.colors is not None else []

    def trim_length(self) -> int:
        """Length of the text without surrounding whitespace, capped at 65535."""
        return min(len(self.text.strip()), _MAX_TRIM_LENGTH)

    def as_string(self, strip_ansi: bool) -> str:
        """Return the original line, with escape sequences removed if ``strip_ansi``."""
        if self.orig_text is not None:
            if strip_ansi:
                trimmed, _, _ = extract_color(self.orig_text, None, None)
                return trimmed
            return self.orig_text
        return self.text


MIN_ITEM = Item(text="", index=-(2**31))