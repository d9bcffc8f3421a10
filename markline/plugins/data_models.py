"""
Data models for transformation results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import FunctionExecutionError


@dataclass
class LineError:
    """
    An execution error tied to the input line it happened on.

    Attributes:
        line_number: Line number in the input text (1-indexed)
        error: The error produced by a line function
    """
    line_number: int
    error: FunctionExecutionError

    def __post_init__(self):
        """Validate line number."""
        if self.line_number < 1:
            raise ValueError(f"line_number must be >= 1, got {self.line_number}")

    def to_dict(self) -> Dict[str, Any]:
        data = {"line": self.line_number}
        data.update(self.error.to_dict())
        return data

    def __str__(self) -> str:
        source = "/".join(part for part in (self.error.plugin_name, self.error.function_name) if part)
        prefix = f"line {self.line_number}"
        if source:
            prefix += f" [{source}]"
        return f"{prefix}: {self.error.detail}"


@dataclass
class TransformationResult:
    """
    Result of running every plugin over a multi-line text.

    Attributes:
        output: Transformed text, same number of lines as the input
        errors: Every error, in line order then execution order
        line_count: Number of lines processed
        execution_time_seconds: Wall time of the pass
    """
    output: str
    errors: List[LineError] = field(default_factory=list)
    line_count: int = 0
    execution_time_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """True when no line function reported an error."""
        return not self.errors

    @property
    def failed_lines(self) -> List[int]:
        """Distinct line numbers that had at least one error."""
        return sorted({error.line_number for error in self.errors})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output": self.output,
            "errors": [error.to_dict() for error in self.errors],
            "line_count": self.line_count,
            "execution_time_seconds": round(self.execution_time_seconds, 6),
        }

    def __str__(self) -> str:
        """Human-readable summary."""
        return (
            f"Transformation Report:\n"
            f"  Lines processed: {self.line_count}\n"
            f"  Errors: {len(self.errors)} on {len(self.failed_lines)} line(s)\n"
            f"  Execution time: {self.execution_time_seconds:.3f}s"
        )
