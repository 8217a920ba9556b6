"""
Rendering of annotated records

:class:`TextRenderer` turns the tokens of an annotated record into text: one
line per field marker, labelled with the field name, followed by the text of
the record up to the next field marker.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from parsel import Selector
from w3lib.html import replace_entities

from exemplar.classifier import NODUMP, NODUMP_END, TokenKind
from exemplar.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from exemplar.settings import BaseSettings
    from exemplar.tokens import Token

logger = logging.getLogger(__name__)

_BLANK_LINES_RE = re.compile(r"\n(\s*\n)+")

# tag name -> attribute whose value stands for the tag in the output
_LINK_ATTRIBUTES = {"<a>": "href", "<img>": "src"}


def tag_attribute(tag: str, name: str) -> str | None:
    """Return the value of attribute ``name`` of the HTML start tag ``tag``."""
    return Selector(text=tag).xpath(f"//@{name}").get()


class TextRenderer:
    def __init__(self, settings: BaseSettings | None = None):
        settings = settings or Settings()
        self.field_indent: str = settings.get("RENDER_FIELD_INDENT", "")

    def _events(self, tokens: Iterable[Token]) -> Iterator[tuple[str | None, str]]:
        """Yield ``(field, "")`` for each field marker and ``(None, text)``
        for each piece of output text, skipping ``nodump`` regions."""
        dump = True
        for token in tokens:
            cls = token.cls
            if cls == NODUMP:
                dump = False
            elif cls == NODUMP_END:
                dump = True
            elif dump:
                yield from self._token_events(token)

    def _token_events(self, token: Token) -> Iterator[tuple[str | None, str]]:
        cls = token.cls
        kind = cls.kind
        if kind is TokenKind.MARKER:
            yield cls.inner, ""
        elif kind is TokenKind.LITERAL:
            yield None, cls.inner
        elif kind is TokenKind.ELEMENT and cls.value in _LINK_ATTRIBUTES:
            value = tag_attribute(token.text, _LINK_ATTRIBUTES[cls.value])
            if value is not None:
                yield None, f"   {value} "
        elif kind is TokenKind.CONTENT:
            yield None, token.text.replace("\n", "\n   ")
        elif kind in (TokenKind.ELEMENT, TokenKind.TABLE, TokenKind.BLANK):
            yield None, " "
        elif kind is not TokenKind.SUPPRESSED:
            yield None, token.text

    def render(self, tokens: Iterable[Token]) -> str:
        """Render a record as text, one labelled line per field."""
        output = ""
        for field, text in self._events(tokens):
            if field is not None:
                output = output.rstrip() + f"\n{field}{self.field_indent}"
            else:
                output += text
        return _BLANK_LINES_RE.sub("\n", output)

    def fields(self, tokens: Iterable[Token]) -> dict[str, str]:
        """Return the text of each field of a record, with HTML entities
        decoded and whitespace normalised. Text before the first field marker
        is dropped."""
        chunks: dict[str, list[str]] = {}
        current: list[str] | None = None
        for field, text in self._events(tokens):
            if field is not None:
                current = chunks.setdefault(field, [])
                current.append(" ")
            elif current is not None:
                current.append(text)
        return {
            field: " ".join(replace_entities("".join(parts)).split())
            for field, parts in chunks.items()
        }
