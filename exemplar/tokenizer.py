"""
Splitting of marked-up documents into tokens.

Besides splitting on HTML tags and a handful of separators, the tokenizer
turns every literal span marked in the document (``[[[text]]]`` or
``{{{text}}}``) into a document-wide pattern: each occurrence of the literal
text, wherever it appears, is wrapped with the same brackets and becomes a
single token.
"""

from __future__ import annotations

import logging
import re

from exemplar.exceptions import MalformedMarkupError

logger = logging.getLogger(__name__)

_MARKER = r"\(\(\([^\)]+?\)\)\)"
_LITERAL = r"\[\[\[[^\]]+?\]\]\]"
_SUPPRESSED = r"\{\{\{[^\}]+?\}\}\}"
_ELEMENT = r"<[^>]+>"

LITERAL_RE = re.compile(r"\[\[\[([^\]]+)\]\]\]", re.DOTALL)
SUPPRESSED_RE = re.compile(r"\{\{\{([^\}]+)\}\}\}", re.DOTALL)

# a well-formed span is consumed whole, any bracket run left over is unbalanced
_BRACKETS_RE = re.compile(
    rf"(?:{_MARKER}|{_LITERAL}|{_SUPPRESSED})|(\[\[\[|\{{\{{\{{|\(\(\()",
    re.DOTALL,
)

# spans that a re-wrapped literal must never reach into
_PROTECTED = rf"{_MARKER}|{_LITERAL}|{_SUPPRESSED}|{_ELEMENT}"

_SPLIT_RE = re.compile(
    r"\s*("
    rf"{_MARKER}|{_LITERAL}|{_SUPPRESSED}|{_ELEMENT}"
    r"|-\s+"
    r"|\n\s+"
    r"|&\#183"
    r"|;"
    r"|\|"
    r")\s*"
)


def check_markup(document: str) -> None:
    """Raise :exc:`~exemplar.exceptions.MalformedMarkupError` if ``document``
    has an opening ``[[[``, ``{{{`` or ``(((`` without its closing run.

    Lone ``]]]``, ``}}}`` and ``)))`` are accepted, inline scripts and JSON
    produce them.
    """
    for m in _BRACKETS_RE.finditer(document):
        if m.group(1):
            raise MalformedMarkupError(m.group(1), m.start(1))


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _wrap_everywhere(text: str, literal: str, opening: str, closing: str) -> str:
    pattern = re.compile(f"({re.escape(literal)})|(?:{_PROTECTED})", re.DOTALL)

    def wrap(m: re.Match[str]) -> str:
        if m.group(1) is None:
            return m.group(0)
        return f"{opening}{literal}{closing}"

    return pattern.sub(wrap, text)


def protect_literals(document: str) -> str:
    """Re-wrap every occurrence of each marked literal in ``document``.

    Dump literals (``[[[...]]]``) are handled before suppressed ones
    (``{{{...}}}``). Text already inside a marker, a literal span or an HTML
    tag is left alone.
    """
    dump_literals = _unique(LITERAL_RE.findall(document))
    suppressed_literals = _unique(SUPPRESSED_RE.findall(document))
    logger.debug(
        "Literal patterns: dump=%(dump)r suppressed=%(suppressed)r",
        {"dump": dump_literals, "suppressed": suppressed_literals},
    )

    text = LITERAL_RE.sub(r"\1", document)
    text = SUPPRESSED_RE.sub(r"\1", text)
    for literal in dump_literals:
        text = _wrap_everywhere(text, literal, "[[[", "]]]")
    for literal in suppressed_literals:
        text = _wrap_everywhere(text, literal, "{{{", "}}}")
    return text


def tokenize(document: str) -> list[str]:
    """Split a marked-up document into its token texts.

    Tag markers, literal spans, HTML tags, ``-`` followed by whitespace, line
    breaks followed by indentation, ``&#183``, ``;`` and ``|`` each become a
    token of their own, and the text between them becomes content tokens.
    Whitespace around delimiters is dropped, as are empty strings.
    """
    check_markup(document)
    text = protect_literals(document)
    tokens = [t for t in _SPLIT_RE.split(text) if t != ""]
    logger.debug("Tokenized document into %(count)d tokens", {"count": len(tokens)})
    return tokens
