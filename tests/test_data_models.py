"""
Unit tests for data models and the request output buffer.
"""

import logging

import pytest

from markline.plugins.data_models import LineError, TransformationResult
from markline.plugins.errors import EffectIndexOutOfBounds, InvalidRegex
from markline.utils.render_output import RenderOutput


def make_error(function="f", plugin="p"):
    error = EffectIndexOutOfBounds()
    error.function_name = function
    error.plugin_name = plugin
    return error


class TestLineError:
    """Tests for LineError dataclass."""

    def test_invalid_line_number(self):
        with pytest.raises(ValueError, match="line_number must be >= 1"):
            LineError(0, make_error())

    def test_to_dict(self):
        data = LineError(3, make_error()).to_dict()
        assert data == {
            "line": 3,
            "code": "effect_index_out_of_bounds",
            "detail": "Effect index out of bounds",
            "function": "f",
            "plugin": "p",
        }

    def test_str(self):
        assert str(LineError(2, make_error())) == "line 2 [p/f]: Effect index out of bounds"

    def test_str_without_source(self):
        assert str(LineError(1, InvalidRegex("bad"))) == "line 1: bad"


class TestTransformationResult:
    """Tests for TransformationResult dataclass."""

    def test_success(self):
        result = TransformationResult(output="x", line_count=1)
        assert result.success is True
        assert result.failed_lines == []

    def test_failed_lines_are_distinct(self):
        result = TransformationResult(
            output="a\nb",
            errors=[LineError(2, make_error()), LineError(2, make_error()), LineError(1, make_error())],
            line_count=2,
        )
        assert result.success is False
        assert result.failed_lines == [1, 2]

    def test_str_summary(self):
        result = TransformationResult(output="", errors=[LineError(1, make_error())], line_count=4)
        text = str(result)
        assert "Lines processed: 4" in text
        assert "Errors: 1 on 1 line(s)" in text


class TestRenderOutput:
    """Tests for the per-request output buffer."""

    def test_empty(self):
        assert RenderOutput().to_dict() == {'output': None, 'diagnostics': [], 'errors': []}

    def test_info_messages_kept(self):
        output = RenderOutput()
        output.log(logging.INFO, "todo found")
        assert output.diagnostics == [{'level': 'info', 'message': 'todo found'}]

    def test_debug_messages_filtered(self):
        output = RenderOutput()
        output.log(logging.DEBUG, "hidden")
        assert output.diagnostics == []

    def test_debug_messages_included(self):
        output = RenderOutput(include_debug=True)
        output.log(logging.DEBUG, "shown")
        assert output.diagnostics == [{'level': 'debug', 'message': 'shown'}]

    def test_set_result(self):
        output = RenderOutput()
        output.set_result(TransformationResult(output="done", errors=[LineError(1, make_error())]))
        assert output.output == "done"
        assert output.errors[0]['code'] == "effect_index_out_of_bounds"

    def test_error(self):
        output = RenderOutput()
        output.error("something broke")
        assert output.errors == [{'code': 'error', 'detail': 'something broke'}]
