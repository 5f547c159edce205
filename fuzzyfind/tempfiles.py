"""Creation and removal of temporary files."""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterable


def write_temporary_file(data: Iterable[str], print_sep: str) -> str:
    """Write ``data`` joined and terminated by ``print_sep`` to a new file; return its path.

    Raises OSError when the file cannot be created.
    """
    fd, path = tempfile.mkstemp(prefix="fuzzyfind-temp-")
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(print_sep.join(data))
        handle.write(print_sep)
    return path


def remove_files(files: Iterable[str]) -> None:
    """Remove each of ``files``, ignoring those that cannot be removed."""
    for filename in files:
        with contextlib.suppress(OSError):
            os.remove(filename)