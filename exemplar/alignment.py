"""
Edit distance between token sequences

Two tokens are interchangeable when their classes are equal; inserting or
deleting a token, or substituting it with one of another class, costs 1.
Tag markers take no part in the arithmetic, callers strip them first (see
:func:`exemplar.tokens.strip_markers`).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from exemplar.exceptions import AlignmentInconsistencyError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from exemplar.tokens import Token

logger = logging.getLogger(__name__)


class EditOp(Enum):
    DELETE = "delete"
    INSERT = "insert"
    SUBSTITUTE = "substitute"
    MATCH = "match"


class Move(NamedTuple):
    """One step of a backtrace.

    ``i`` is the index of the ``seq1`` token stepped over and ``j`` the index
    of the ``seq2`` token, ``None`` for the side a move does not consume.
    """

    op: EditOp
    i: int | None
    j: int | None


def _class_codes(seq1: Sequence[Token], seq2: Sequence[Token]) -> tuple[np.ndarray, np.ndarray]:
    codes: dict = {}
    a = np.fromiter(
        (codes.setdefault(t.cls, len(codes)) for t in seq1), dtype=np.intp, count=len(seq1)
    )
    b = np.fromiter(
        (codes.setdefault(t.cls, len(codes)) for t in seq2), dtype=np.intp, count=len(seq2)
    )
    return a, b


class EditDistanceMatrix:
    """Edit distance table between ``seq1`` (rows) and ``seq2`` (columns).

    ``cells[i, j]`` is the distance between the first ``i`` tokens of
    ``seq1`` and the first ``j`` tokens of ``seq2``. Each row is computed
    from the previous one in a single vectorised pass: the substitution and
    deletion candidates are elementwise minima, and the chain of insertions
    along the row is resolved with a running minimum of ``candidate - j``.
    """

    def __init__(self, seq1: Sequence[Token], seq2: Sequence[Token]):
        self.seq1: tuple[Token, ...] = tuple(seq1)
        self.seq2: tuple[Token, ...] = tuple(seq2)
        logger.debug(
            "Edit distance matrix %(rows)d by %(columns)d",
            {"rows": len(self.seq1) + 1, "columns": len(self.seq2) + 1},
        )
        self.cells: np.ndarray = self._build()

    def _build(self) -> np.ndarray:
        a, b = _class_codes(self.seq1, self.seq2)
        rows, columns = len(a) + 1, len(b) + 1
        steps = np.arange(columns, dtype=np.int64)
        cells = np.empty((rows, columns), dtype=np.int64)
        cells[0] = steps
        best = np.empty(columns, dtype=np.int64)
        for i in range(1, rows):
            prev = cells[i - 1]
            best[0] = i
            np.minimum(prev[:-1] + (b != a[i - 1]), prev[1:] + 1, out=best[1:])
            cells[i] = np.minimum.accumulate(best - steps) + steps
        return cells

    @property
    def shape(self) -> tuple[int, int]:
        return self.cells.shape

    @property
    def distance(self) -> int:
        return int(self.cells[-1, -1])

    def __getitem__(self, index: tuple[int, int]) -> int:
        return int(self.cells[index])

    def backtrace(self) -> Iterator[Move]:
        """Walk from the last cell back to the origin, yielding the moves of
        one optimal edit script in reverse order.

        When several moves explain a cell, the first of deletion, insertion,
        substitution and match is taken.
        """
        cells = self.cells
        i, j = len(self.seq1), len(self.seq2)
        while i > 0 or j > 0:
            value = cells[i, j]
            if i > 0 and cells[i - 1, j] + 1 == value:
                i -= 1
                yield Move(EditOp.DELETE, i, None)
            elif j > 0 and cells[i, j - 1] + 1 == value:
                j -= 1
                yield Move(EditOp.INSERT, None, j)
            elif i > 0 and j > 0 and cells[i - 1, j - 1] + 1 == value:
                i -= 1
                j -= 1
                yield Move(EditOp.SUBSTITUTE, i, j)
            elif (
                i > 0
                and j > 0
                and cells[i - 1, j - 1] == value
                and self.seq1[i - 1].cls == self.seq2[j - 1].cls
            ):
                i -= 1
                j -= 1
                yield Move(EditOp.MATCH, i, j)
            else:
                raise AlignmentInconsistencyError(i, j, int(value))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.shape[0]}x{self.shape[1]} distance={self.distance}>"


def distance(seq1: Sequence[Token], seq2: Sequence[Token]) -> int:
    """Edit distance between two token sequences"""
    return EditDistanceMatrix(seq1, seq2).distance
