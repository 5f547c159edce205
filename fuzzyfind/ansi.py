"""Parsing of ANSI escape sequences: SGR colours, attributes and hyperlinks."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import IntFlag

DEFAULT_COLOR = -1

_TRIGGER = re.compile("[\x0e\x0f\x1b\x08]")


class Attr(IntFlag):
    """Text attributes carried by an ANSI state."""

    BOLD = 1
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    REVERSE = 1 << 5
    STRIKE_THROUGH = 1 << 7
    BOLD_FORCE = 1 << 10


_SET_ATTRS = {
    1: Attr.BOLD,
    2: Attr.DIM,
    3: Attr.ITALIC,
    4: Attr.UNDERLINE,
    5: Attr.BLINK,
    7: Attr.REVERSE,
    9: Attr.STRIKE_THROUGH,
}

_CLEAR_ATTRS = {
    22: Attr.BOLD | Attr.DIM,
    23: Attr.ITALIC,
    24: Attr.UNDERLINE,
    25: Attr.BLINK,
    27: Attr.REVERSE,
    29: Attr.STRIKE_THROUGH,
}

_ATTR_CODES = (
    (Attr.BOLD | Attr.BOLD_FORCE, "1"),
    (Attr.DIM, "2"),
    (Attr.ITALIC, "3"),
    (Attr.UNDERLINE, "4"),
    (Attr.BLINK, "5"),
    (Attr.REVERSE, "7"),
    (Attr.STRIKE_THROUGH, "9"),
)

# States of the extended colour parser (38/48 sub-parameters)
_PLAIN = 0
_EXPECT_KIND = 1
_EXPECT_INDEX = 2
_EXPECT_RED = 10
_EXPECT_GREEN = 11
_EXPECT_BLUE = 12


@dataclass(eq=False)
class Url:
    """A hyperlink target; two links are the same only if they are the same object."""

    uri: str
    params: str


@dataclass(frozen=True)
class AnsiState:
    """Colours, attributes and hyperlink in effect at some point of a text."""

    fg: int = DEFAULT_COLOR
    bg: int = DEFAULT_COLOR
    attr: Attr = Attr(0)
    lbg: int = DEFAULT_COLOR
    url: Url | None = None

    def colored(self) -> bool:
        """Whether the state differs from plain text."""
        return (
            self.fg != -1
            or self.bg != -1
            or self.attr > 0
            or self.lbg >= 0
            or self.url is not None
        )

    def to_ansi_string(self) -> str:
        """Return the escape sequence that reproduces this state, or "" if plain."""
        if not self.colored():
            return ""
        parts = [code for flag, code in _ATTR_CODES if self.attr & flag]
        body = ";".join(parts) + (";" if parts else "")
        body += _color_code(self.fg, 30) + _color_code(self.bg, 40)
        if body.endswith(";"):
            body = body[:-1]
        result = f"\x1b[{body}m"
        if self.url is not None:
            result = f"\x1b]8;{self.url.params};{self.url.uri}\x1b\\{result}\x1b]8;;\x1b"
        return result


@dataclass
class AnsiOffset:
    """A span of characters ``[start, end)`` drawn with ``color``."""

    start: int
    end: int
    color: AnsiState = field(default_factory=AnsiState)


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        code = str(offset + 9)
    elif color < 8:
        code = str(offset + color)
    elif color < 16:
        code = str(offset - 30 + 90 + color - 8)
    elif color < 256:
        code = f"{offset + 8};5;{color}"
    elif color >= 1 << 24:
        red = (color >> 16) & 0xFF
        green = (color >> 8) & 0xFF
        blue = color & 0xFF
        code = f"{offset + 8};2;{red};{green};{blue}"
    else:
        code = ""
    return code + ";"


def _is_print(char: str) -> bool:
    return "\x20" <= char <= "\x7e"


def _match_operating_system_command(text: str, start: int, pos: int) -> int | None:
    end = len(text)
    i = pos
    while i < end and _is_print(text[i]):
        i += 1
    if i < end:
        if text[i] == "\x07":
            return i + 1
        if text[i] == "\x1b" and i < end - 1 and text[i + 1] == "\\":
            return i + 2
    if i < end and text[start : i + 1] == "\x1b]8;;\x1b":
        return i + 1
    return None


def _match_control_sequence(text: str, start: int) -> int | None:
    for i in range(start + 2, len(text)):
        char = text[i]
        if "0" <= char <= "9" or char in ";:?":
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return i + 1
        return None
    return None


def _find_escape(text: str, pos: int) -> tuple[int, int] | None:
    first = _TRIGGER.search(text, pos)
    if first is None:
        return None
    end = len(text)
    for i in range(first.start(), end):
        char = text[i]
        if char == "\x08":
            if i > pos and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < end and text[i + 1] in "\\[()":
                stop = _match_control_sequence(text, i)
                if stop is not None:
                    return i, stop
            if i + 5 < end and text[i + 1] == "]":
                j = i + 2
                while j < end and "0" <= text[j] <= "9":
                    j += 1
                if (
                    j > i + 2
                    and j + 1 < end
                    and text[j] in ";:"
                    and _is_print(text[j + 1])
                ):
                    stop = _match_operating_system_command(text, i, j + 2)
                    if stop is not None:
                        return i, stop
            if i + 1 < end and text[i + 1] != "\n":
                return i, i + 2
        elif char in "\x0e\x0f":
            return i, i + 1
    return None


def next_ansi_escape_sequence(text: str) -> tuple[int, int] | None:
    """Return the ``(start, end)`` span of the first escape sequence in ``text``, or None."""
    return _find_escape(text, 0)


def parse_ansi_code(text: str) -> tuple[int, str]:
    """Split off the first numeric parameter; return it (or -1) and the rest."""
    sep = text.find(";")
    if sep < 0:
        sep = text.find(":")
    remaining = ""
    if sep >= 0:
        remaining = text[sep + 1 :]
        text = text[:sep]
    if not text or not all("0" <= char <= "9" for char in text):
        return -1, remaining
    return int(text), remaining


def _interpret_other(ansi_code: str, state: AnsiState, prev_state: AnsiState | None) -> AnsiState:
    if prev_state is not None and ansi_code.endswith("0K"):
        return replace(state, lbg=prev_state.bg)
    if ansi_code.startswith("\x1b]8;") and (
        ansi_code.endswith("\x1b\\") or ansi_code.endswith("\a")
    ):
        terminator = 1 if ansi_code.endswith("\a") else 2
        if len(ansi_code) == 5 + terminator and ansi_code[4] == ";":
            return replace(state, url=None)
        params_end = ansi_code.find(";", 4)
        if params_end >= 0:
            params = ansi_code[4:params_end]
            uri = ansi_code[params_end + 1 : len(ansi_code) - terminator]
            return replace(state, url=Url(uri=uri, params=params))
    return state


def interpret_code(ansi_code: str, prev_state: AnsiState | None) -> AnsiState:
    """Apply one escape sequence to ``prev_state`` and return the resulting state."""
    state = AnsiState() if prev_state is None else prev_state
    if not ansi_code.startswith("\x1b[") or not ansi_code.endswith("m"):
        return _interpret_other(ansi_code, state, prev_state)

    if len(ansi_code) <= 3:
        return replace(state, fg=-1, bg=-1, attr=Attr(0))

    colors = [state.fg, state.bg]
    attr = int(state.attr)
    target = 0
    mode = _PLAIN
    count = 0
    rest = ansi_code[2:-1]
    while rest:
        num, rest = parse_ansi_code(rest)
        if num == -1:
            continue
        count += 1
        if mode == _PLAIN:
            if num == 38:
                target, mode = 0, _EXPECT_KIND
            elif num == 48:
                target, mode = 1, _EXPECT_KIND
            elif num == 39:
                colors[0] = -1
            elif num == 49:
                colors[1] = -1
            elif num in _SET_ATTRS:
                attr |= int(_SET_ATTRS[num])
            elif num in _CLEAR_ATTRS:
                attr &= ~int(_CLEAR_ATTRS[num])
            elif num == 0:
                colors = [-1, -1]
                attr = 0
            elif 30 <= num <= 37:
                colors[0] = num - 30
            elif 40 <= num <= 47:
                colors[1] = num - 40
            elif 90 <= num <= 97:
                colors[0] = num - 90 + 8
            elif 100 <= num <= 107:
                colors[1] = num - 100 + 8
        elif mode == _EXPECT_KIND:
            if num == 2:
                mode = _EXPECT_RED
            elif num == 5:
                mode = _EXPECT_INDEX
            else:
                mode = _PLAIN
        elif mode == _EXPECT_INDEX:
            colors[target] = num
            mode = _PLAIN
        elif mode == _EXPECT_RED:
            colors[target] = (1 << 24) | (num << 16)
            mode = _EXPECT_GREEN
        elif mode == _EXPECT_GREEN:
            colors[target] |= num << 8
            mode = _EXPECT_BLUE
        elif mode == _EXPECT_BLUE:
            colors[target] |= num
            mode = _PLAIN

    if count == 0:
        colors = [-1, -1]
        attr = 0
    if mode != _PLAIN:
        colors[target] = -1
    return replace(state, fg=colors[0], bg=colors[1], attr=Attr(attr))


def _same_state(new_state: AnsiState, state: AnsiState | None) -> bool:
    if state is None:
        return not new_state.colored()
    return new_state == state


def extract_color(
    text: str,
    state: AnsiState | None,
    proc: Callable[[str, AnsiState | None], bool] | None = None,
) -> tuple[str, list[AnsiOffset] | None, AnsiState | None]:
    """Strip escape sequences from ``text``.

    Returns the plain text, the coloured spans (or None when there are none)
    and the state in effect at the end. ``proc`` is called with each plain
    segment and the state it is drawn in; if it returns False the scan stops
    and ``("", None, None)`` is returned.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    output: list[str] = []
    prev_idx = 0
    rune_count = 0
    idx = 0
    while idx < len(text):
        found = _find_escape(text, idx)
        if found is None:
            break
        start, idx = found

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", None, None
        prev_idx = idx

        if prev:
            rune_count += len(prev)
            output.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not _same_state(new_state, state):
            if state is not None:
                offsets[-1].end = rune_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(rune_count, rune_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = text
        trimmed = text
    else:
        rest = text[prev_idx:]
        output.append(rest)
        trimmed = "".join(output)
    if proc is not None:
        proc(rest, state)
    if offsets:
        if rest and state is not None:
            rune_count += len(rest)
            offsets[-1].end = rune_count
        return trimmed, offsets, state
    return trimmed, None, state