"""
Extraction sessions

An :class:`Extractor` holds everything an extraction run carries from one
record to the next: the token stream of the document, the grammar of its
exemplar record and the cursor past the last record found.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from exemplar.classifier import Classifier
from exemplar.exceptions import AlignmentInconsistencyError, NotConfigured
from exemplar.grammar import Grammar
from exemplar.incorporation import AnnotatedRecord, incorporate
from exemplar.render import TextRenderer
from exemplar.search import find_next_item
from exemplar.settings import BaseSettings, Settings
from exemplar.tokens import TokenStream

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class Extractor:
    """Extract every record of ``document`` that matches its annotated
    exemplar.

    The document is tokenized and the grammar extracted on construction, so
    a document without a usable exemplar fails here with
    :exc:`~exemplar.exceptions.MissingExemplarError`. Records are then found
    lazily, in document order, by :meth:`records`.

    ``settings`` may be a :class:`~exemplar.settings.BaseSettings` or a plain
    mapping of overrides; the session works on a frozen copy of it.
    """

    def __init__(
        self,
        document: str,
        settings: BaseSettings | Mapping[str, Any] | None = None,
    ):
        if not isinstance(settings, BaseSettings):
            settings = Settings(settings)
        self.settings: BaseSettings = settings.frozencopy()
        self.start_tags: int = self._anchor_width("START_TAGS")
        self.end_tags: int = self._anchor_width("END_TAGS")
        self.best_effort: bool = self.settings.getbool("BEST_EFFORT")

        self.classifier = Classifier.from_settings(self.settings)
        self.stream: TokenStream = TokenStream.from_document(document, self.classifier)
        self.grammar: Grammar = Grammar.from_stream(self.stream)
        self.cursor: int = 0
        self.skipped: int = 0
        logger.info(
            "Exemplar record has %(tokens)d tokens, fields: %(fields)s",
            {"tokens": len(self.grammar.pattern), "fields": ", ".join(self.grammar.fields)},
        )

    def _anchor_width(self, name: str) -> int:
        width = self.settings.getint(name)
        if width < 1:
            raise NotConfigured(f"{name} must be at least 1, got {width}")
        return width

    def next_record(self) -> AnnotatedRecord | None:
        """Find the record after the cursor and move the cursor past it and
        any markers that follow it.

        Return ``None`` once no further record can be found.
        """
        while True:
            score, span = find_next_item(
                self.stream, self.grammar, self.cursor, self.start_tags, self.end_tags
            )
            if span is None:
                return None
            self.cursor = span.end + 1
            while self.cursor < len(self.stream) and self.stream[self.cursor].is_marker:
                self.cursor += 1
            try:
                record = incorporate(self.grammar, span)
            except AlignmentInconsistencyError:
                if not self.best_effort:
                    raise
                self.skipped += 1
                logger.error(
                    "Skipping record at tokens %(start)d-%(end)d",
                    {"start": span.start, "end": span.end},
                    exc_info=True,
                )
                continue
            logger.debug(
                "Extracted record at tokens %(start)d-%(end)d (distance %(score)d)",
                {"start": span.start, "end": span.end, "score": score},
            )
            return record

    def records(self) -> Iterator[AnnotatedRecord]:
        count = 0
        while (record := self.next_record()) is not None:
            count += 1
            yield record
        logger.info(
            "Extracted %(count)d records (%(skipped)d skipped)",
            {"count": count, "skipped": self.skipped},
        )

    __iter__ = records

    def process(self, renderer: TextRenderer | None = None) -> Iterator[str]:
        """Render every remaining record as text."""
        renderer = renderer or TextRenderer(self.settings)
        for record in self.records():
            yield renderer.render(record)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} tokens={len(self.stream)} "
            f"cursor={self.cursor}>"
        )
