"""
markline

A declarative line-transformation engine for markdown editors. Named plugins
hold ordered line functions that match lines with regular expressions and
apply insertions and replacements relative to the line or the match.
"""

__version__ = "0.1.0"

from .plugins.manager import PluginManager
from .plugins.plugin import Plugin
from .plugins.line_function import LineFunction
from .plugins.loader import create_manager, load_plugins_file, plugins_from_data

__all__ = [
    "PluginManager",
    "Plugin",
    "LineFunction",
    "create_manager",
    "load_plugins_file",
    "plugins_from_data",
]
