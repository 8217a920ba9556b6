"""
The grammar of an extraction session: the token sequence of the annotated
exemplar record, frozen for the whole run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING

from exemplar.anchors import find_indices
from exemplar.classifier import BEGIN, END, NODUMP, NODUMP_END
from exemplar.exceptions import MissingExemplarError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from typing_extensions import Self

    from exemplar.classifier import TokenClass
    from exemplar.tokens import Token

logger = logging.getLogger(__name__)


class Grammar:
    """Tokens of the exemplar record, markers included.

    ``pattern`` holds the tokens used for alignment (markers stripped) and
    ``tag_map`` maps a pattern index ``k`` to the markers found right before
    ``pattern[k]``; markers after the last pattern token are stored under
    ``len(pattern)``.
    """

    __slots__ = ("pattern", "tag_map", "tokens")

    def __init__(self, tokens: Iterable[Token]):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        pattern: list[Token] = []
        tag_map: dict[int, tuple[Token, ...]] = {}
        pending: list[Token] = []
        for token in self.tokens:
            if token.is_marker:
                pending.append(token)
                continue
            if pending:
                tag_map[len(pattern)] = tuple(pending)
                pending = []
            pattern.append(token)
        if pending:
            tag_map[len(pattern)] = tuple(pending)
        self.pattern: tuple[Token, ...] = tuple(pattern)
        self.tag_map: Mapping[int, tuple[Token, ...]] = MappingProxyType(tag_map)

    @classmethod
    def from_stream(cls, stream: Sequence[Token]) -> Self:
        """Extract the grammar found between the first ``(((BEGIN)))`` and the
        next ``(((END)))`` of ``stream``."""
        start, finish = find_indices(stream, [BEGIN, END])
        if start < 0:
            raise MissingExemplarError("No (((BEGIN))) marker found in document")
        if finish < 0:
            raise MissingExemplarError("No (((END))) marker found after (((BEGIN)))")
        grammar = cls(stream[start + 1 : finish])
        if not grammar.pattern:
            raise MissingExemplarError("The exemplar record has no content to match")
        logger.debug(
            "Exemplar found between tokens %(start)d and %(finish)d: %(grammar)r",
            {"start": start, "finish": finish, "grammar": grammar},
        )
        return grammar

    def tags_before(self, index: int) -> tuple[Token, ...]:
        return self.tag_map.get(index, ())

    def start_anchor(self, width: int) -> tuple[TokenClass, ...]:
        """Classes of the first ``width`` pattern tokens."""
        if width < 1:
            raise ValueError(f"Anchor width must be at least 1, got {width}")
        return tuple(t.cls for t in self.pattern[:width])

    def end_anchor(self, width: int) -> tuple[TokenClass, ...]:
        """Classes of the last ``width`` pattern tokens."""
        if width < 1:
            raise ValueError(f"Anchor width must be at least 1, got {width}")
        return tuple(t.cls for t in self.pattern[-width:])

    @property
    def fields(self) -> list[str]:
        """Names of the fields annotated in the exemplar, in order."""
        names = []
        for token in self.tokens:
            if token.is_marker and token.cls not in (NODUMP, NODUMP_END):
                name = token.cls.inner
                if name not in names:
                    names.append(name)
        return names

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({[t.text for t in self.tokens]!r})"
