"""Query history backed by a plain text file, one entry per line."""

from __future__ import annotations

import os


class HistoryError(Exception):
    """Raised when the history file cannot be read or created."""


def _write_text(path: str, data: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
        handle.write(data)


def _history_error(path: str, error: OSError) -> HistoryError:
    if isinstance(error, PermissionError):
        return HistoryError(f"permission denied: {path}")
    return HistoryError(f"invalid history file: {error}")


class History:
    """Entries of a history file with a cursor for browsing them.

    The last entry is always the line being edited. Entries may be changed
    while browsing; such changes are kept in memory and never written.
    """

    def __init__(self, path: str, max_size: int) -> None:
        self.path = path
        self.max_size = max_size
        try:
            with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
                data = handle.read()
        except FileNotFoundError:
            # Make sure a file can be created under that name
            try:
                _write_text(path, "")
            except OSError as error:
                raise _history_error(path, error) from error
            data = ""
        except OSError as error:
            raise _history_error(path, error) from error

        lines = data.strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self._lines = lines
        self._modified: dict[int, str] = {}
        self._cursor = len(lines) - 1

    @property
    def lines(self) -> list[str]:
        """The entries, ending with the line being edited."""
        return list(self._lines)

    def append(self, line: str) -> None:
        """Add ``line`` to the history and save the file; empty lines are ignored."""
        if not line:
            return
        lines = self._lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[-self.max_size:]
        self._lines = lines + [""]
        _write_text(self.path, "\n".join(self._lines))

    def override(self, text: str) -> None:
        """Replace the entry under the cursor in memory."""
        last = len(self._lines) - 1
        if self._cursor == last:
            self._lines[self._cursor] = text
        elif self._cursor < last:
            self._modified[self._cursor] = text

    def current(self) -> str:
        """Return the entry under the cursor."""
        return self._modified.get(self._cursor, self._lines[self._cursor])

    def previous(self) -> str:
        """Move the cursor to the older entry and return it."""
        if self._cursor > 0:
            self._cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move the cursor to the newer entry and return it."""
        if self._cursor < len(self._lines) - 1:
            self._cursor += 1
        return self.current()