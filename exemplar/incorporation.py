"""
Projection of the exemplar's field markers onto a newly found record
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, overload

from exemplar.alignment import EditDistanceMatrix
from exemplar.search import RecordSpan
from exemplar.tokens import strip_markers

if TYPE_CHECKING:
    from collections.abc import Iterator

    from exemplar.grammar import Grammar
    from exemplar.tokens import Token

logger = logging.getLogger(__name__)


class AnnotatedRecord(Sequence["Token"]):
    """Tokens of an extracted record with the grammar's markers put back in.

    ``span`` is the :class:`~exemplar.search.RecordSpan` the record was built
    from, if any.
    """

    __slots__ = ("span", "tokens")

    def __init__(self, tokens: Sequence[Token], span: RecordSpan | None = None):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.span: RecordSpan | None = span

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Token, ...]: ...

    def __getitem__(self, index: int | slice) -> Token | tuple[Token, ...]:
        return self.tokens[index]

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    @property
    def texts(self) -> list[str]:
        return [t.text for t in self.tokens]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.texts!r})"


def incorporate(grammar: Grammar, span: RecordSpan | Sequence[Token]) -> AnnotatedRecord:
    """Align ``span`` with the grammar and insert the grammar's markers at the
    matching positions.

    The record keeps every non-marker token of ``span``. The markers that
    precede grammar token ``k`` are placed right before whatever ``k`` was
    aligned with, or where ``k`` would have been if it was deleted.
    """
    record_span = span if isinstance(span, RecordSpan) else None
    items = strip_markers(span.tokens if isinstance(span, RecordSpan) else span)
    matrix = EditDistanceMatrix(grammar.pattern, items)

    # built back to front
    reversed_tokens: list[Token] = list(reversed(grammar.tags_before(len(grammar.pattern))))
    for move in matrix.backtrace():
        if move.j is not None:
            reversed_tokens.append(items[move.j])
        if move.i is not None:
            reversed_tokens.extend(reversed(grammar.tags_before(move.i)))

    logger.debug(
        "Incorporated %(count)d tokens at distance %(distance)d",
        {"count": len(items), "distance": matrix.distance},
    )
    return AnnotatedRecord(reversed_tokens[::-1], record_span)
