"""
Built-in demo configuration, loaded in debug mode.
"""

from typing import List

from .line_function import LineFunction
from .plugin import Plugin
from .positions import Eol, Index, Insert, LineStart, Replace


def heading_function() -> LineFunction:
    """Turn a leading "#" into an <h1> element."""
    return LineFunction(
        "heading",
        r"^([#]).+",
        [
            (Replace(LineStart(), Index(0)), "<h1>"),
            (Insert(Eol()), "</h1>"),
        ],
    )


def default_plugins() -> List[Plugin]:
    return [Plugin(name="core", line_functions=[heading_function()])]
