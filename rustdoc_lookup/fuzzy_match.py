"""Approximate subsequence matching of a query against a candidate name.

The query's characters are aligned, in order, to characters of the
candidate (case-insensitively). Among all alignments the best scoring one
is chosen:

- every matched character scores `CHAR_SCORE`,
- plus `WORD_START_BONUS` at the start of a word (`foo_bar`, `FooBar`),
- plus `CASE_BONUS` when the case matches too,
- plus `CONSECUTIVE_BONUS` when it directly follows the previous match,
- minus `GAP_PENALTY` when characters were skipped since the previous match,
- minus `LEADING_PENALTY` per candidate character before the first match,
  capped at `MAX_LEADING_PENALTY`.

Two adjacent query characters may also match in swapped order at a cost of
`TRANSPOSE_PENALTY`, so a typo like `Cofnig` still finds `Config`.
"""

from __future__ import annotations

from dataclasses import dataclass

EXACT_MATCH_SCORE = 10000

CHAR_SCORE = 16
WORD_START_BONUS = 24
CASE_BONUS = 4
CONSECUTIVE_BONUS = 12
GAP_PENALTY = 5
LEADING_PENALTY = 3
MAX_LEADING_PENALTY = 9
TRANSPOSE_PENALTY = 10

# (score, candidate position of the previous match)
_Step = tuple[int, int]


@dataclass(frozen=True)
class FuzzyMatch:
    """Result of aligning a query with a candidate."""

    score: int
    indices: tuple[int, ...]


def fuzzy_match(
    query: str, candidate: str, exact_score: int = EXACT_MATCH_SCORE
) -> FuzzyMatch | None:
    """Score `query` against `candidate`; None if no alignment exists."""
    if query == candidate:
        return FuzzyMatch(exact_score, tuple(range(len(candidate))))
    n, m = len(query), len(candidate)
    if n == 0 or n > m:
        return None

    q, c = query.lower(), candidate.lower()
    starts = word_starts(candidate)

    def char_score(i: int, k: int) -> int:
        score = CHAR_SCORE
        if starts[k]:
            score += WORD_START_BONUS
        if query[i] == candidate[k]:
            score += CASE_BONUS
        return score

    def leading(k: int) -> int:
        return -min(k * LEADING_PENALTY, MAX_LEADING_PENALTY)

    # rows[i][k]: best score with query[:i + 1] matched and the last used
    # candidate position k. back[i][k]: (previous k, 1 = match, 2 = swap).
    rows: list[list[int | None]] = []
    back: list[list[tuple[int, int] | None]] = []
    for i in range(n):
        row: list[int | None] = [None] * m
        brow: list[tuple[int, int] | None] = [None] * m
        prev = rows[i - 1] if i >= 1 else None
        prev_best = _prefix_best(prev) if prev is not None else None
        before = rows[i - 2] if i >= 2 else None
        before_best = _prefix_best(before) if before is not None else None

        for k in range(m):
            if c[k] == q[i]:
                step: _Step | None
                if prev is None:
                    step = (leading(k), -1)
                else:
                    step = _predecessor(prev, prev_best, k)
                if step is not None:
                    row[k] = char_score(i, k) + step[0]
                    brow[k] = (step[1], 1)

            if i >= 1 and k >= 1 and c[k] == q[i - 1] and c[k - 1] == q[i]:
                if before is None:
                    step = (leading(k - 1), -1) if i == 1 else None
                else:
                    step = _predecessor(before, before_best, k - 1)
                if step is not None:
                    pair = char_score(i - 1, k) + char_score(i, k - 1)
                    value = pair - TRANSPOSE_PENALTY + step[0]
                    current = row[k]
                    if current is None or value > current:
                        row[k] = value
                        brow[k] = (step[1], 2)
        rows.append(row)
        back.append(brow)

    last = rows[-1]
    end = None
    for k, score in enumerate(last):
        if score is not None and (end is None or score > last[end]):
            end = k
    if end is None:
        return None

    best = last[end]
    assert best is not None
    return FuzzyMatch(max(best, 1), _backtrack(back, n - 1, end))


def word_starts(text: str) -> list[bool]:
    """Mark positions that begin a word in snake_case or CamelCase text."""
    starts = []
    for k, ch in enumerate(text):
        if k == 0:
            starts.append(True)
            continue
        prev = text[k - 1]
        starts.append(
            (ch.isalnum() and not prev.isalnum()) or (ch.isupper() and prev.islower())
        )
    return starts


def _prefix_best(row: list[int | None]) -> list[_Step | None]:
    """Running maximum of a row as (score, position)."""
    out: list[_Step | None] = []
    best: _Step | None = None
    for k, score in enumerate(row):
        if score is not None and (best is None or score > best[0]):
            best = (score, k)
        out.append(best)
    return out


def _predecessor(
    row: list[int | None], prefix: list[_Step | None] | None, k: int
) -> _Step | None:
    """Best way to have matched the previous character strictly before k."""
    options: list[_Step] = []
    if k >= 1:
        adjacent = row[k - 1]
        if adjacent is not None:
            options.append((adjacent + CONSECUTIVE_BONUS, k - 1))
    if k >= 2 and prefix is not None:
        far = prefix[k - 2]
        if far is not None:
            options.append((far[0] - GAP_PENALTY, far[1]))
    if not options:
        return None
    return max(options, key=lambda o: o[0])


def _backtrack(back: list[list[tuple[int, int] | None]], i: int, k: int) -> tuple[int, ...]:
    indices: list[int] = []
    while i >= 0:
        entry = back[i][k]
        assert entry is not None
        prev_k, step = entry
        if step == 1:
            indices.append(k)
        else:
            indices.extend((k, k - 1))
        i -= step
        k = prev_k
    return tuple(sorted(indices))
