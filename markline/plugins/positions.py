"""
Position references and the effects applied at them.

A Position names a place in a line (start, end, or an offset relative to the
start of the regex match). A PositionArgument says what to do there: insert
the effect string, replace an inclusive span with it, or emit a log message.

Offsets are Python string indices, the same unit `re` reports match offsets
in, so a resolved offset always falls on a character boundary.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .errors import (
    EffectIndexGivenWithoutRegex,
    EffectIndexOutOfBounds,
    PluginDefinitionError,
)

effects_logger = logging.getLogger("markline.effects")

# Receives (logging level, message) for every Log/DebugLog effect
LogSink = Callable[[int, str], None]


@dataclass(frozen=True)
class Index:
    """Offset relative to the start of the regex match."""
    offset: int


@dataclass(frozen=True)
class LineStart:
    pass


@dataclass(frozen=True)
class Eol:
    """End of line."""


Position = Union[Index, LineStart, Eol]


def resolve_position(position: Position, line: str, match_start: Optional[int] = None) -> int:
    """
    Convert a symbolic position into a concrete offset within the line.

    Args:
        position: Position to resolve
        line: Current line content
        match_start: Start offset of the regex match, None without a match

    Returns:
        Offset in the range 0..len(line)

    Raises:
        EffectIndexGivenWithoutRegex: Index position without a match offset
        EffectIndexOutOfBounds: Index resolves outside the line
    """
    if isinstance(position, LineStart):
        return 0
    if isinstance(position, Eol):
        return len(line)
    if isinstance(position, Index):
        if match_start is None:
            raise EffectIndexGivenWithoutRegex()
        index = match_start + position.offset
        if index < 0 or index > len(line):
            raise EffectIndexOutOfBounds(
                f"Index {index} (match start {match_start} + offset {position.offset}) "
                f"outside line of length {len(line)}"
            )
        return index
    raise TypeError(f"Unknown position type: {type(position).__name__}")


@dataclass(frozen=True)
class Insert:
    """Insert the effect string at a position."""
    position: Position

    def has_index(self) -> bool:
        return isinstance(self.position, Index)

    def apply(self, line: str, match_start: Optional[int], effect: str,
              sink: Optional[LogSink] = None) -> str:
        i = resolve_position(self.position, line, match_start)
        return line[:i] + effect + line[i:]


@dataclass(frozen=True)
class Replace:
    """
    Replace the inclusive span [start, end] with the effect string.

    The character at `end` is removed too. An end equal to len(line) removes
    through the end of the line.
    """
    start: Position
    end: Position

    def has_index(self) -> bool:
        return isinstance(self.start, Index) or isinstance(self.end, Index)

    def apply(self, line: str, match_start: Optional[int], effect: str,
              sink: Optional[LogSink] = None) -> str:
        i = resolve_position(self.start, line, match_start)
        j = resolve_position(self.end, line, match_start)
        if j < i:
            raise EffectIndexOutOfBounds(f"Replace range end {j} is before start {i}")
        return line[:i] + effect + line[j + 1:]


@dataclass(frozen=True)
class Log:
    """
    Print a message to the log. The line that triggered it is logged as well.

    Using this without a pattern logs every line.
    """
    message: str

    level = logging.INFO

    def has_index(self) -> bool:
        return False

    def apply(self, line: str, match_start: Optional[int], effect: str,
              sink: Optional[LogSink] = None) -> str:
        text = f"{self.message}: {effect}" if effect else self.message
        text = f"{text} (line: {line!r})"
        effects_logger.log(self.level, text)
        if sink is not None:
            sink(self.level, text)
        return line


@dataclass(frozen=True)
class DebugLog(Log):
    """Like Log, but at debug level, so hidden by default."""

    level = logging.DEBUG


PositionArgument = Union[Insert, Replace, Log, DebugLog]


def position_from_data(data: Any) -> Position:
    """
    Build a Position from its external shape.

    Accepts "LineStart", "Eol" or {"Index": n}.
    """
    if data == "LineStart":
        return LineStart()
    if data == "Eol":
        return Eol()
    if isinstance(data, dict) and set(data) == {"Index"}:
        offset = data["Index"]
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise PluginDefinitionError(f"Index offset must be an integer, got {offset!r}")
        return Index(offset)
    raise PluginDefinitionError(f"Unknown position: {data!r}")


def position_to_data(position: Position) -> Any:
    if isinstance(position, Index):
        return {"Index": position.offset}
    return type(position).__name__


def argument_from_data(data: Any) -> PositionArgument:
    """
    Build a PositionArgument from its external shape.

    Accepts {"Insert": pos}, {"Replace": [pos, pos]}, {"Log": msg} or
    {"DebugLog": msg}.
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise PluginDefinitionError(f"Position argument must be a single-key object, got {data!r}")

    kind, value = next(iter(data.items()))
    if kind == "Insert":
        return Insert(position_from_data(value))
    if kind == "Replace":
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise PluginDefinitionError(f"Replace takes [start, end], got {value!r}")
        return Replace(position_from_data(value[0]), position_from_data(value[1]))
    if kind in ("Log", "DebugLog"):
        if not isinstance(value, str):
            raise PluginDefinitionError(f"{kind} message must be a string, got {value!r}")
        return Log(value) if kind == "Log" else DebugLog(value)
    raise PluginDefinitionError(f"Unknown position argument: {kind!r}")


def argument_to_data(argument: PositionArgument) -> Any:
    if isinstance(argument, Insert):
        return {"Insert": position_to_data(argument.position)}
    if isinstance(argument, Replace):
        return {"Replace": [position_to_data(argument.start), position_to_data(argument.end)]}
    # DebugLog before Log: it is a subclass
    if isinstance(argument, DebugLog):
        return {"DebugLog": argument.message}
    return {"Log": argument.message}


def apply_effect(
    argument: PositionArgument,
    line: str,
    match_start: Optional[int],
    effect: str,
    sink: Optional[LogSink] = None
) -> str:
    """
    Apply one (position argument, effect string) pair to a line.

    Returns:
        The edited line (unchanged for Log/DebugLog)

    Raises:
        FunctionExecutionError: The position could not be resolved
    """
    return argument.apply(line, match_start, effect, sink)
