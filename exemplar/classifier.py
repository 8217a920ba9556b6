"""
Token classification

Tokens are compared by class, not by text: two pieces of ordinary text are
equivalent no matter what they say, while extraction markup, literal spans,
table tags and HTML entities only match when their text is identical. Classes
are the alphabet the edit distance engine works on.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from typing_extensions import Self

    from exemplar.settings import BaseSettings


class TokenKind(Enum):
    BLANK = "B"
    CONTENT = "C"
    SYMBOL = "symbol"
    ELEMENT = "element"
    # exact kinds, compared by verbatim text
    TABLE = "table"
    LITERAL = "literal"
    MARKER = "marker"
    SUPPRESSED = "suppressed"
    ENTITY = "entity"


EXACT_KINDS = frozenset(
    {
        TokenKind.TABLE,
        TokenKind.LITERAL,
        TokenKind.MARKER,
        TokenKind.SUPPRESSED,
        TokenKind.ENTITY,
    }
)


class TokenClass(NamedTuple):
    """The equivalence class of a token.

    ``value`` is empty for ``BLANK`` and ``CONTENT``, holds the bucket key for
    ``SYMBOL`` (``"-"``, ``"("``...) and ``ELEMENT`` (``"<a>"``...), and the
    verbatim token text for the exact kinds.
    """

    kind: TokenKind
    value: str = ""

    @property
    def exact(self) -> bool:
        return self.kind in EXACT_KINDS

    @property
    def is_marker(self) -> bool:
        return self.kind is TokenKind.MARKER

    @property
    def inner(self) -> str:
        """Text between the triple brackets of a literal, suppressed literal
        or tag marker; the plain value for any other class."""
        if self.kind in (TokenKind.LITERAL, TokenKind.MARKER, TokenKind.SUPPRESSED):
            return self.value[3:-3]
        return self.value

    def __str__(self) -> str:
        return self.value or self.kind.value


BLANK = TokenClass(TokenKind.BLANK)
CONTENT = TokenClass(TokenKind.CONTENT)

BEGIN = TokenClass(TokenKind.MARKER, "(((BEGIN)))")
END = TokenClass(TokenKind.MARKER, "(((END)))")
NODUMP = TokenClass(TokenKind.MARKER, "(((nodump)))")
NODUMP_END = TokenClass(TokenKind.MARKER, "(((/nodump)))")


_BLANK_RE = re.compile(r"\s+")
_TABLE_TAG_RE = re.compile(r"<t.*>", re.DOTALL | re.IGNORECASE)
_LITERAL_RE = re.compile(r"\[\[\[.*?\]\]\]", re.DOTALL)
_MARKER_RE = re.compile(r"\(\(\(.*?\)\)\)", re.DOTALL)
_SUPPRESSED_RE = re.compile(r"\{\{\{.*?\}\}\}", re.DOTALL)
_ELEMENT_RE = re.compile(r"<([^>\s]+)\s*.*>", re.DOTALL | re.IGNORECASE)

_SYMBOLS = frozenset("-()|;")


@lru_cache(maxsize=4096)
def classify(text: str, exact_tables: bool = True) -> TokenClass:
    """Return the class of a token text. The first matching rule wins."""
    if _BLANK_RE.fullmatch(text):
        return BLANK
    text = text.rstrip()
    if exact_tables and _TABLE_TAG_RE.fullmatch(text):
        return TokenClass(TokenKind.TABLE, text.lower())
    if _LITERAL_RE.fullmatch(text):
        return TokenClass(TokenKind.LITERAL, text)
    if _MARKER_RE.fullmatch(text):
        return TokenClass(TokenKind.MARKER, text)
    if _SUPPRESSED_RE.fullmatch(text):
        return TokenClass(TokenKind.SUPPRESSED, text)
    m = _ELEMENT_RE.fullmatch(text)
    if m:
        return TokenClass(TokenKind.ELEMENT, f"<{m.group(1).lower()}>")
    if text[:1] == "&":
        return TokenClass(TokenKind.ENTITY, text)
    if text[:1] in _SYMBOLS:
        return TokenClass(TokenKind.SYMBOL, text[0])
    return CONTENT


class Classifier:
    """Token classifier bound to the ``EXACT_TABLES`` setting."""

    def __init__(self, exact_tables: bool = True):
        self.exact_tables: bool = exact_tables

    @classmethod
    def from_settings(cls, settings: BaseSettings) -> Self:
        return cls(exact_tables=settings.getbool("EXACT_TABLES"))

    def __call__(self, text: str) -> TokenClass:
        return classify(text, self.exact_tables)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(exact_tables={self.exact_tables!r})"
