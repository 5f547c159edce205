# fuzzyfind

A library of building blocks for a fuzzy finder:

- `fuzzyfind.fuzzy`: `fuzzy_match_v1` (greedy scan, then shrinks the match backwards), `fuzzy_match_v2` (highest scoring alignment, falling back to v1 on very large inputs), `ascii_fuzzy_index` and `calculate_score`.
- `fuzzyfind.exact`: `exact_match_naive`, `exact_match_boundary`, `prefix_match`, `suffix_match` and `equal_match`.
- `fuzzyfind.scheme`: scoring constants, `CharClass`, `MatchResult`, `Scheme` and `get_scheme(name)` for the `"default"`, `"path"` and `"history"` schemes. An unknown name raises `ValueError`.
- `fuzzyfind.normalize`: `normalize_rune` and `normalize_runes`, which fold accented Latin letters to their base letter (`"Danço"` becomes `"Danco"`).
- `fuzzyfind.ansi`: `extract_color`, `interpret_code`, `next_ansi_escape_sequence`, `parse_ansi_code`, `AnsiState`, `AnsiOffset`, `Attr` and `Url`. Together they strip escape sequences from a line and record which spans are coloured.
- `fuzzyfind.item`: `Item`, a single line of input.
- `fuzzyfind.chunklist`: `Chunk`, `ChunkList` and `count_items`, which store items in chunks of 100 and take snapshots, optionally cut to the last N items.
- `fuzzyfind.cache`: `ChunkCache`, which holds per-chunk search results keyed by query.
- `fuzzyfind.history`: `History`, a query history file with a cursor, and `HistoryError`.
- `fuzzyfind.tempfiles`: `write_temporary_file` and `remove_files`.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Matching

Every matcher takes the same arguments, `(case_sensitive, normalize, forward, text, pattern, with_pos, scheme)`, and returns a `MatchResult` with `start`, `end`, `score` and `positions`. A failed match has `start == end == -1`, and `result.matched` is then false. If `scheme` is `None`, the default scheme is used.

Prepare the pattern before you match. When matching is not case sensitive, the pattern must already be lower case. When `normalize` is set, the pattern must already be passed through `normalize_runes`.

```python
from fuzzyfind.scheme import get_scheme
from fuzzyfind.fuzzy import fuzzy_match_v2

scheme = get_scheme("default")
result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True, scheme)
print(result.start, result.end, result.score)
print(sorted(result.positions))   # [0, 4, 8]
```

Only the two fuzzy matchers fill in `positions`, and only when `with_pos` is true. The exact, prefix, suffix and equality matchers always leave it as `None`.

## ANSI colours

```python
from fuzzyfind.ansi import extract_color

text, offsets, state = extract_color("hello \x1b[34;1mworld", None, None)
# text == "hello world"
# offsets[0].start == 6, offsets[0].end == 11, offsets[0].color.fg == 4
```

`extract_color` returns `None` instead of an offset list when the text has no colour. The state it returns can be passed in for the next line, so colours carry over from one line to the next. `AnsiState.to_ansi_string()` rebuilds an escape sequence for a state.

## Items and chunk lists

```python
from fuzzyfind.cache import ChunkCache
from fuzzyfind.chunklist import ChunkList
from fuzzyfind.item import Item

chunks = ChunkList(ChunkCache(), lambda line: Item(text=line))
for n in range(250):
    chunks.push(f"item {n}")

snapshot, count, changed = chunks.snapshot(0)    # 3 chunks, 250 items
snapshot, count, changed = chunks.snapshot(120)  # keeps the last 120, changed is True
```

The builder may return `None` to reject a line, and `push` then returns `False`. `Item.as_string(strip_ansi)` returns the original line. When `strip_ansi` is true, escape sequences are removed from it.

## History

```python
import os
import tempfile

from fuzzyfind.history import History

path = os.path.join(tempfile.mkdtemp(), "queries")
history = History(path, 1000)
history.append("first query")
print(history.previous())   # "first query"
```

If the file does not exist, it is created. If it cannot be read or created, `HistoryError` is raised. `append` writes the file at once and ignores empty lines. `override` changes entries in memory only.

## What this package does not do

This is a library only. It installs no command and has no interactive screen. It does not read input from files, processes or directory walks. It does not run searches in parallel or merge and rank results across chunks. Those parts are left to the program that uses it.

## Running the tests

```
pip install .[test]
pytest
```