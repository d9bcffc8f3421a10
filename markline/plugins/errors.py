"""
Error taxonomy for the plugin engine.

Two families, split by phase:
- PluginLoadError: raised while building a LineFunction or Plugin. Fatal for
  that definition.
- FunctionExecutionError: produced while applying functions to a line. These
  are collected into lists and returned to the caller, never raised past the
  LineFunction that produced them.
"""

from typing import Any, Dict, Optional


class PluginLoadError(Exception):
    """A plugin definition could not be loaded."""


class IndexGivenWithoutPattern(PluginLoadError):
    """An effect uses a match-relative index but the function has no pattern."""

    def __init__(self, function_name: Optional[str] = None):
        self.function_name = function_name
        where = f" in function '{function_name}'" if function_name else ""
        super().__init__(
            f"Effect index given without a regex pattern{where}"
        )


class InvalidRegexError(PluginLoadError):
    """The regex engine rejected a function's pattern at load time."""

    def __init__(self, detail: str, function_name: Optional[str] = None):
        self.detail = detail
        self.function_name = function_name
        super().__init__(f"Regex engine returned an error: {detail}")


class PluginDefinitionError(PluginLoadError):
    """A plugin definition does not have the expected shape."""


class FunctionExecutionError(Exception):
    """
    Base class for errors produced while applying a line function.

    Attributes:
        code: Stable identifier used in reports (e.g. "effect_index_out_of_bounds")
        detail: Human-readable detail
        function_name: Name of the LineFunction that produced the error
        plugin_name: Name of the Plugin that owns that function
    """

    code = "function_execution_error"
    default_detail = "Line function failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        self.function_name: Optional[str] = None
        self.plugin_name: Optional[str] = None
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "detail": self.detail,
            "function": self.function_name,
            "plugin": self.plugin_name,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.detail!r})"


class InvalidRegex(FunctionExecutionError):
    """Lazy compilation of a function's pattern failed."""

    code = "invalid_regex"
    default_detail = "Invalid regex pattern"


class EffectIndexOutOfBounds(FunctionExecutionError):
    """The effect index must lie within the line: 0 <= index <= len(line)."""

    code = "effect_index_out_of_bounds"
    default_detail = "Effect index out of bounds"


class EffectIndexGivenWithoutRegex(FunctionExecutionError):
    """A match-relative index was evaluated without a match offset."""

    code = "effect_index_given_without_regex"
    default_detail = "Effect index given without a regex match"


class ManagerBusyError(Exception):
    """The plugin manager could not be acquired before the lock timeout."""
