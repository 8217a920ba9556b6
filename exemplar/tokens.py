"""
Token and token stream objects
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, NamedTuple, overload

from exemplar.classifier import Classifier, TokenClass
from exemplar.tokenizer import tokenize

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from typing_extensions import Self


class Token(NamedTuple):
    text: str
    cls: TokenClass

    @property
    def is_marker(self) -> bool:
        return self.cls.is_marker


class TokenStream(Sequence[Token]):
    """Immutable, index-addressable sequence of classified tokens.

    Slicing returns another :class:`TokenStream`. Positions in a stream are
    never renumbered, so indices found by anchor searches stay valid for the
    whole extraction session.
    """

    __slots__ = ("_pattern_view", "_tokens")

    def __init__(self, tokens: Iterable[Token] = ()):
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self._pattern_view: tuple[tuple[int, ...], tuple[Token, ...]] | None = None

    @classmethod
    def from_texts(
        cls, texts: Iterable[str], classifier: Callable[[str], TokenClass] | None = None
    ) -> Self:
        classify = classifier or Classifier()
        return cls(Token(text, classify(text)) for text in texts)

    @classmethod
    def from_document(
        cls, document: str, classifier: Callable[[str], TokenClass] | None = None
    ) -> Self:
        """Tokenize a marked-up document and classify every token."""
        return cls.from_texts(tokenize(document), classifier)

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> TokenStream: ...

    def __getitem__(self, index: int | slice) -> Token | TokenStream:
        if isinstance(index, slice):
            return self.__class__(self._tokens[index])
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenStream):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({[t.text for t in self._tokens]!r})"

    @property
    def texts(self) -> list[str]:
        return [t.text for t in self._tokens]

    @property
    def classes(self) -> list[TokenClass]:
        return [t.cls for t in self._tokens]

    @property
    def pattern_view(self) -> tuple[tuple[int, ...], tuple[Token, ...]]:
        """The pattern tokens of the stream and their positions in it,
        computed once per stream."""
        if self._pattern_view is None:
            self._pattern_view = pattern_view(self._tokens)
        return self._pattern_view


def strip_markers(tokens: Iterable[Token]) -> list[Token]:
    """Return the pattern tokens of a sequence: everything but tag markers."""
    return [t for t in tokens if not t.is_marker]


def pattern_view(tokens: Sequence[Token]) -> tuple[tuple[int, ...], tuple[Token, ...]]:
    """Return the stream positions of the pattern tokens of ``tokens``
    together with those tokens."""
    positions = tuple(i for i, token in enumerate(tokens) if not token.is_marker)
    return positions, tuple(tokens[i] for i in positions)
