"""This module contains the default values for all settings used by Exemplar.

When adding a setting here:

* add it in alphabetical order, with the exception that enabling flags and
  other high-level settings for a group should come first in their group
* group similar settings without leaving blank lines
"""

__all__ = [
    "BEST_EFFORT",
    "END_TAGS",
    "EXACT_TABLES",
    "LOG_DATEFORMAT",
    "LOG_ENABLED",
    "LOG_ENCODING",
    "LOG_FILE",
    "LOG_FILE_APPEND",
    "LOG_FORMAT",
    "LOG_LEVEL",
    "LOG_SHORT_NAMES",
    "RENDER_FIELD_INDENT",
    "START_TAGS",
]

# Skip records whose alignment backtrace is inconsistent instead of aborting
BEST_EFFORT = False

# Number of grammar pattern tokens used to anchor the end of a record
END_TAGS = 1

# Compare table tags (<table>, <tr>, <td>, ...) by their exact text
EXACT_TABLES = True

LOG_ENABLED = True
LOG_DATEFORMAT = "%Y-%m-%d %H:%M:%S"
LOG_ENCODING = "utf-8"
LOG_FILE = None
LOG_FILE_APPEND = True
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_LEVEL = "INFO"
LOG_SHORT_NAMES = False

RENDER_FIELD_INDENT = "  "

# Number of grammar pattern tokens used to anchor the start of a record
START_TAGS = 2
