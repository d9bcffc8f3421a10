#!/usr/bin/env python3
"""
PluginManager - runs every plugin over a text, one line at a time.

The manager is shared, mutable state: it owns the plugins and, through them,
each function's compiled-regex cache. Only one transformation may run against
a manager at a time; the lock is held for a whole multi-line pass.
"""

import logging
import time
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .data_models import LineError, TransformationResult
from .errors import FunctionExecutionError, ManagerBusyError
from .plugin import Plugin
from .positions import LogSink

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


class PluginManager:
    """
    Ordered collection of plugins and the single entry point for running them.

    Features:
    - Plugin order, then function order, then effect order
    - Errors are collected, never short-circuit sibling work
    - Mutual exclusion per manager for transformations and reloads
    """

    def __init__(self, plugins: Optional[Iterable[Plugin]] = None, lock_timeout: Optional[float] = None):
        """
        Initialize manager.

        Args:
            plugins: Initial plugins, in execution order
            lock_timeout: Seconds to wait for exclusive access before raising
                ManagerBusyError. None waits forever.
        """
        self.plugins: List[Plugin] = list(plugins or [])
        self.lock_timeout = lock_timeout
        self.lock = Lock()

    @contextmanager
    def acquire(self) -> Iterator["PluginManager"]:
        """
        Hold exclusive access to the manager.

        Raises:
            ManagerBusyError: Access not obtained within lock_timeout
        """
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not self.lock.acquire(timeout=timeout):
            raise ManagerBusyError(
                f"Plugin manager busy: not acquired within {self.lock_timeout}s"
            )
        try:
            yield self
        finally:
            self.lock.release()

    def load_plugins(self, plugins: Iterable[Plugin]) -> None:
        """Replace the loaded plugins."""
        plugins = list(plugins)
        with self.acquire():
            self.plugins = plugins
        logger.info(f"Loaded {len(plugins)} plugin(s): {', '.join(p.name for p in plugins)}")

    def add_plugin(self, plugin: Plugin) -> None:
        """Append a plugin after the existing ones."""
        with self.acquire():
            self.plugins.append(plugin)
        logger.info(f"Added plugin '{plugin.name}' ({len(plugin.line_functions)} function(s))")

    def plugin_names(self) -> List[str]:
        return [plugin.name for plugin in self.plugins]

    def execute_line_functions(
        self,
        line: str,
        sink: Optional[LogSink] = None
    ) -> Tuple[str, List[FunctionExecutionError]]:
        """
        Apply every function of every plugin to one line.

        Does not take the lock; use transform() or hold acquire().

        Args:
            line: Single line without its separator
            sink: Optional receiver for Log/DebugLog effects

        Returns:
            (edited line, all errors)
        """
        errors: List[FunctionExecutionError] = []
        for plugin in self.plugins:
            line, plugin_errors = plugin.apply(line, sink)
            errors.extend(plugin_errors)
        return line, errors

    def transform(self, text: str, sink: Optional[LogSink] = None) -> TransformationResult:
        """
        Transform a multi-line text.

        Lines are split on "\\n", processed independently and rejoined, so
        the output has the same number of lines in the same order. A line
        with errors keeps whatever edits succeeded.

        Args:
            text: Input text
            sink: Optional receiver for Log/DebugLog effects

        Returns:
            TransformationResult with output text and per-line errors

        Raises:
            ManagerBusyError: Access not obtained within lock_timeout
        """
        with self.acquire():
            start_time = time.time()
            lines = text.split(LINE_SEPARATOR)
            output_lines = []
            errors: List[LineError] = []

            for line_number, line in enumerate(lines, start=1):
                line, line_errors = self.execute_line_functions(line, sink)
                output_lines.append(line)
                errors.extend(LineError(line_number, error) for error in line_errors)

            result = TransformationResult(
                output=LINE_SEPARATOR.join(output_lines),
                errors=errors,
                line_count=len(lines),
                execution_time_seconds=time.time() - start_time
            )

        if errors:
            logger.warning(f"Transformed {len(lines)} line(s) with {len(errors)} error(s)")
        else:
            logger.debug(f"Transformed {len(lines)} line(s) in {result.execution_time_seconds:.4f}s")
        return result

    def summary(self) -> Dict[str, Any]:
        """Describe the loaded configuration."""
        return {
            "plugin_count": len(self.plugins),
            "function_count": sum(len(p.line_functions) for p in self.plugins),
            "plugins": [plugin.to_dict() for plugin in self.plugins],
        }
