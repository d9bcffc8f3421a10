"""
LineFunction: an optional regex pattern paired with ordered positional edits.

The compiled regex is a cache derived from the pattern. It is never part of
the serialized form and is rebuilt on first use when a function arrives
without it.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import (
    FunctionExecutionError,
    IndexGivenWithoutPattern,
    InvalidRegex,
    InvalidRegexError,
    PluginDefinitionError,
)
from .positions import (
    LogSink,
    PositionArgument,
    apply_effect,
    argument_from_data,
    argument_to_data,
)

logger = logging.getLogger(__name__)

Effect = Tuple[PositionArgument, str]


class LineFunction:
    """
    A named unit that matches a line and edits it.

    Every line matching `pattern` gets each effect applied in order. When the
    pattern is None every line is passed, which can be slow on large inputs.

    Attributes:
        name: Expected to be unique within a plugin
        pattern: Regex source, or None to apply to every line
        effects: Ordered (position argument, effect string) pairs
    """

    def __init__(
        self,
        name: str,
        pattern: Optional[str] = None,
        effects: Iterable[Effect] = (),
        validate: bool = True
    ):
        """
        Create a line function.

        Args:
            name: Function name
            pattern: Regex source, or None
            effects: (position argument, effect string) pairs
            validate: Check index usage and compile the pattern now. Disabled
                only when restoring already-validated definitions.

        Raises:
            IndexGivenWithoutPattern: An effect uses Index but pattern is None
            InvalidRegexError: The pattern does not compile
        """
        self.name = name
        self.pattern = pattern
        self.effects: List[Effect] = list(effects)
        self._regex: Optional[re.Pattern] = None

        if not validate:
            return

        if pattern is None:
            for argument, _ in self.effects:
                if argument.has_index():
                    raise IndexGivenWithoutPattern(name)
        else:
            try:
                self._regex = re.compile(pattern)
            except re.error as e:
                raise InvalidRegexError(str(e), function_name=name) from e

    @property
    def is_compiled(self) -> bool:
        """Whether the matcher is cached."""
        return self._regex is not None

    def get_regex(self) -> Optional[re.Pattern]:
        """
        Return the compiled pattern, compiling and caching it on first use.

        Returns:
            Compiled pattern, or None when the function has no pattern

        Raises:
            InvalidRegex: Lazy compilation failed
        """
        if self._regex is not None:
            return self._regex
        if self.pattern is None:
            return None
        try:
            self._regex = re.compile(self.pattern)
        except re.error as e:
            raise InvalidRegex(str(e)) from e
        logger.debug(f"Compiled pattern for function '{self.name}': {self.pattern!r}")
        return self._regex

    def apply(self, line: str, sink: Optional[LogSink] = None) -> Tuple[str, List[FunctionExecutionError]]:
        """
        Apply every effect to the line.

        The line is matched once. All effects use that match's start offset,
        even after earlier effects have changed the line. A failing effect
        does not stop the ones after it.

        Args:
            line: Line to edit
            sink: Optional receiver for Log/DebugLog effects

        Returns:
            (edited line, errors); the line is unchanged when the pattern
            does not match
        """
        try:
            regex = self.get_regex()
        except InvalidRegex as e:
            e.function_name = self.name
            return line, [e]

        match_start = None
        if regex is not None:
            match = regex.search(line)
            if match is None:
                return line, []
            match_start = match.start()

        errors: List[FunctionExecutionError] = []
        for argument, effect in self.effects:
            try:
                line = apply_effect(argument, line, match_start, effect, sink)
            except FunctionExecutionError as e:
                e.function_name = self.name
                errors.append(e)

        return line, errors

    @classmethod
    def from_dict(cls, data: Dict[str, Any], validate: bool = True) -> "LineFunction":
        """
        Build a function from its external shape.

        Expected keys: "name", optional "pattern", and "effects" (or "effect")
        as a list of [position argument, effect string] pairs.

        Raises:
            PluginDefinitionError: The shape is malformed
            IndexGivenWithoutPattern, InvalidRegexError: See __init__
        """
        if not isinstance(data, dict):
            raise PluginDefinitionError(f"Line function must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise PluginDefinitionError("Line function requires a non-empty 'name'")

        pattern = data.get("pattern")
        if pattern is not None and not isinstance(pattern, str):
            raise PluginDefinitionError(f"Pattern of '{name}' must be a string or null")

        raw_effects = data.get("effects", data.get("effect", []))
        if not isinstance(raw_effects, list):
            raise PluginDefinitionError(f"Effects of '{name}' must be a list")

        effects = []
        for entry in raw_effects:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise PluginDefinitionError(
                    f"Effect of '{name}' must be a [position argument, string] pair, got {entry!r}"
                )
            argument, effect = entry
            if not isinstance(effect, str):
                raise PluginDefinitionError(f"Effect string of '{name}' must be a string, got {effect!r}")
            effects.append((argument_from_data(argument), effect))

        return cls(name, pattern, effects, validate=validate)

    def to_dict(self) -> Dict[str, Any]:
        """External shape. The compiled regex is not included."""
        return {
            "name": self.name,
            "pattern": self.pattern,
            "effects": [[argument_to_data(argument), effect] for argument, effect in self.effects],
        }

    def __repr__(self) -> str:
        return f"LineFunction(name={self.name!r}, pattern={self.pattern!r}, effects={len(self.effects)})"
