#!/usr/bin/env python3
"""
RenderOutput: Structured output buffer for one transformation request.

Captures three types of output:
- Output: The transformed text
- Diagnostics: Messages emitted by Log/DebugLog effects
- Errors: Line function errors, one entry per failure

Its `log` method is the sink handed to the plugin manager.
"""

import logging
from typing import Any, Dict, List, Optional

from markline.plugins.data_models import TransformationResult


class RenderOutput:
    """
    Output buffer for a transformation request.

    Thread safety: Not required (per-request instance).
    """

    def __init__(self, include_debug: bool = False):
        """
        Initialize empty output buffer.

        Args:
            include_debug: Keep DebugLog messages as well as Log messages
        """
        self.include_debug = include_debug
        self.output: Optional[str] = None
        self.diagnostics: List[Dict[str, str]] = []
        self.errors: List[Dict[str, Any]] = []

    def log(self, level: int, message: str) -> None:
        """
        Receive a message from a Log/DebugLog effect.

        Args:
            level: logging level of the effect
            message: Message text
        """
        if level < logging.INFO and not self.include_debug:
            return
        self.diagnostics.append({
            'level': logging.getLevelName(level).lower(),
            'message': message
        })

    def set_result(self, result: TransformationResult) -> None:
        """
        Store the transformed text and its errors.

        Args:
            result: Result returned by PluginManager.transform
        """
        self.output = result.output
        self.errors = [error.to_dict() for error in result.errors]

    def error(self, msg: str) -> None:
        """Add an error that did not come from a line function."""
        self.errors.append({'code': 'error', 'detail': msg})

    def to_dict(self) -> dict:
        """
        Convert to JSON-serializable dict.

        Returns:
            Dict with keys: output, diagnostics, errors
        """
        return {
            'output': self.output,
            'diagnostics': self.diagnostics,
            'errors': self.errors
        }
