"""
Exemplar - semi-automated extraction of repeated records from HTML pages,
driven by a single hand-annotated example record
"""

import pkgutil

# Declare top-level shortcuts
from exemplar.extractor import Extractor
from exemplar.grammar import Grammar
from exemplar.render import TextRenderer
from exemplar.settings import Settings

__all__ = [
    "Extractor",
    "Grammar",
    "Settings",
    "TextRenderer",
    "__version__",
    "version_info",
]


__version__ = (pkgutil.get_data(__package__, "VERSION") or b"").decode("ascii").strip()
version_info = tuple(int(v) if v.isdigit() else v for v in __version__.split("."))


del pkgutil
