"""
Plugin: a named, ordered group of line functions.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import FunctionExecutionError, PluginDefinitionError, PluginLoadError
from .line_function import LineFunction
from .positions import LogSink

logger = logging.getLogger(__name__)


@dataclass
class Plugin:
    """
    A named collection of line functions, applied in order.

    Attributes:
        name: Plugin name (should be unique, not enforced)
        line_functions: Functions applied to each line, in order
    """
    name: str
    line_functions: List[LineFunction] = field(default_factory=list)

    def apply(self, line: str, sink: Optional[LogSink] = None) -> Tuple[str, List[FunctionExecutionError]]:
        """
        Apply every function to the line, collecting all errors.

        Returns:
            (edited line, errors from all functions)
        """
        errors: List[FunctionExecutionError] = []
        for function in self.line_functions:
            line, function_errors = function.apply(line, sink)
            for error in function_errors:
                error.plugin_name = self.name
            errors.extend(function_errors)
        return line, errors

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        skip_invalid: bool = False,
        validate: bool = True
    ) -> "Plugin":
        """
        Build a plugin from its external shape.

        Args:
            data: {"name": str, "line_functions": [...]}
            skip_invalid: Skip functions that fail to load instead of
                failing the whole plugin
            validate: Passed through to LineFunction.from_dict

        Raises:
            PluginLoadError: Malformed plugin, or an invalid function when
                skip_invalid is False
        """
        if not isinstance(data, dict):
            raise PluginDefinitionError(f"Plugin must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise PluginDefinitionError("Plugin requires a non-empty 'name'")

        raw_functions = data.get("line_functions", [])
        if not isinstance(raw_functions, list):
            raise PluginDefinitionError(f"'line_functions' of plugin '{name}' must be a list")

        functions = []
        for raw in raw_functions:
            try:
                functions.append(LineFunction.from_dict(raw, validate=validate))
            except PluginLoadError as e:
                if not skip_invalid:
                    raise
                logger.warning(f"Skipping invalid line function in plugin '{name}': {e}")

        return cls(name=name, line_functions=functions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "line_functions": [function.to_dict() for function in self.line_functions],
        }
