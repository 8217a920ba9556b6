"""
Exemplar exceptions

Errors raised while tokenizing the marked-up document, extracting the
exemplar grammar and aligning records against it.
"""

from __future__ import annotations

from typing import Any

# Internal


class NotConfigured(Exception):
    """Indicates a missing or invalid configuration situation"""


# Extraction


class ExemplarError(Exception):
    """Base class for the errors that abort an extraction session"""


class MalformedMarkupError(ExemplarError, ValueError):
    """Raised when the extraction markup of a document is unbalanced, e.g. a
    ``[[[`` with no closing ``]]]``.

    *bracket* is the offending bracket run and *position* its character offset
    in the document.
    """

    def __init__(self, bracket: str, position: int):
        super().__init__(f"Unbalanced extraction markup {bracket!r} at offset {position}")
        self.bracket = bracket
        self.position = position


class MissingExemplarError(ExemplarError):
    """The document has no usable ``(((BEGIN)))`` ... ``(((END)))`` record"""


class AlignmentInconsistencyError(ExemplarError):
    """Raised when the backtrace of an edit distance matrix reaches a cell
    that none of the edit operations accounts for.

    This can only happen if the matrix was built incorrectly, so it is never
    recovered from silently.
    """

    def __init__(self, row: int, column: int, value: int):
        super().__init__(
            f"No edit operation explains matrix cell ({row}, {column}) = {value}"
        )
        self.row = row
        self.column = column
        self.value = value


# Commands


class UsageError(Exception):
    """To indicate a command-line usage error"""

    def __init__(self, *a: Any, **kw: Any):
        self.print_help = kw.pop("print_help", True)
        super().__init__(*a, **kw)
