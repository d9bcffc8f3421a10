"""
Declarative line-transformation engine.

Plugins hold ordered line functions; each function optionally matches a line
against a regex and applies positional edits relative to the line boundaries
or the match start.
"""

from .data_models import LineError, TransformationResult
from .errors import (
    EffectIndexGivenWithoutRegex,
    EffectIndexOutOfBounds,
    FunctionExecutionError,
    IndexGivenWithoutPattern,
    InvalidRegex,
    InvalidRegexError,
    ManagerBusyError,
    PluginDefinitionError,
    PluginLoadError,
)
from .line_function import LineFunction
from .manager import PluginManager
from .plugin import Plugin
from .positions import (
    DebugLog,
    Eol,
    Index,
    Insert,
    LineStart,
    Log,
    Replace,
    apply_effect,
    resolve_position,
)

__all__ = [
    "PluginManager",
    "Plugin",
    "LineFunction",
    "LineError",
    "TransformationResult",
    "Index",
    "LineStart",
    "Eol",
    "Insert",
    "Replace",
    "Log",
    "DebugLog",
    "resolve_position",
    "apply_effect",
    "PluginLoadError",
    "IndexGivenWithoutPattern",
    "InvalidRegexError",
    "PluginDefinitionError",
    "FunctionExecutionError",
    "InvalidRegex",
    "EffectIndexOutOfBounds",
    "EffectIndexGivenWithoutRegex",
    "ManagerBusyError",
]
