"""
Record boundary search

Records are located greedily. An outer walker visits the successive
occurrences of the grammar's start anchor; for each of them an inner grower
extends the record over the successive occurrences of the end anchor for as
long as the edit distance to the grammar does not increase. The walker stops
at the first start anchor that does not strictly improve on the previous one.

Anchors are matched against the pattern tokens of the stream, so the markers
of the annotated exemplar do not keep it from being found like any other
record.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from exemplar.alignment import distance
from exemplar.anchors import find_indices
from exemplar.tokens import Token, TokenStream, pattern_view

if TYPE_CHECKING:
    from exemplar.classifier import TokenClass
    from exemplar.grammar import Grammar

logger = logging.getLogger(__name__)


class RecordSpan:
    """The inclusive range ``[start, end]`` of stream positions matched
    against the grammar, with its edit distance ``score``."""

    __slots__ = ("end", "score", "start", "tokens")

    def __init__(self, start: int, end: int, score: int, tokens: Sequence[Token]):
        if end < start:
            raise ValueError(f"Record span cannot end ({end}) before it starts ({start})")
        self.start: int = start
        self.end: int = end
        self.score: int = score
        self.tokens: tuple[Token, ...] = tuple(tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RecordSpan):
            return NotImplemented
        return (
            self.start == other.start
            and self.end == other.end
            and self.score == other.score
            and self.tokens == other.tokens
        )

    def __hash__(self) -> int:
        return hash((self.start, self.end, self.score, self.tokens))

    def __repr__(self) -> str:
        return f"RecordSpan(start={self.start!r}, end={self.end!r}, score={self.score!r})"


def _grow(
    tokens: Sequence[Token],
    grammar: Grammar,
    start: int,
    end_anchor: tuple[TokenClass, ...],
) -> tuple[int, int] | None:
    """Return ``(end, score)`` of the best record starting at ``start``."""
    best: tuple[int, int] | None = None
    # a one-token grammar may end where it starts
    end = start if len(grammar.pattern) > 1 else start - 1
    while True:
        (found,) = find_indices(tokens, [end_anchor], end + 1)
        if found < 0:
            break
        candidate_end = found + len(end_anchor) - 1
        score = distance(grammar.pattern, tokens[start : candidate_end + 1])
        logger.debug(
            "Candidate record %(start)d-%(end)d at distance %(score)d",
            {"start": start, "end": candidate_end, "score": score},
        )
        if best is not None and score > best[1]:
            break
        best = (candidate_end, score)
        end = found
    return best


def find_next_item(
    stream: Sequence[Token],
    grammar: Grammar,
    cursor: int = 0,
    start_tags: int = 2,
    end_tags: int = 1,
) -> tuple[int | None, RecordSpan | None]:
    """Find the next record of ``stream`` at or after position ``cursor``.

    Return ``(score, span)``, or ``(None, None)`` when no further record can
    be found. Callers continue from ``span.end + 1``.
    """
    start_anchor = grammar.start_anchor(start_tags)
    end_anchor = grammar.end_anchor(end_tags)

    if isinstance(stream, TokenStream):
        positions, tokens = stream.pattern_view
    else:
        positions, tokens = pattern_view(stream)

    best: tuple[int, int, int] | None = None
    search_from = bisect_left(positions, cursor)
    while True:
        (start,) = find_indices(tokens, [start_anchor], search_from)
        if start < 0:
            break
        local = _grow(tokens, grammar, start, end_anchor)
        if local is None:
            break
        end, score = local
        if best is not None and score >= best[2]:
            break
        best = (start, end, score)
        search_from = start + 1

    if best is None:
        logger.debug("No further record after position %(cursor)d", {"cursor": cursor})
        return None, None
    start, end, score = positions[best[0]], positions[best[1]], best[2]
    span = RecordSpan(start, end, score, stream[start : end + 1])
    logger.debug("Best record %(span)r", {"span": span})
    return score, span
