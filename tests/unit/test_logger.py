"""Unit tests for the rendering context log helpers."""

import pytest
from loguru import logger

from texrender.contexts.rendering.compiler import RenderResult
from texrender.contexts.rendering.logger import log_render_result


@pytest.fixture
def messages():
    """Capture loguru messages at every level."""
    captured = []
    handler_id = logger.add(lambda m: captured.append(m.record["message"]), level="DEBUG")
    yield captured
    logger.remove(handler_id)


@pytest.mark.unit
def test_render_result_lists_warnings(messages):
    """Test that each warning of a successful render is logged."""
    log_render_result(RenderResult(passes=2, warnings=["first", "second"], elapsed_s=0.5))

    assert messages[0] == "[render] Render succeeded after 2 pass(es): 2 warnings (0.50s)"
    assert "[render]   Warning 1: first" in messages
    assert "[render]   Warning 2: second" in messages


@pytest.mark.unit
def test_render_result_truncates_long_warning_lists(messages):
    """Test that only the first ten warnings are listed, followed by a count of the rest."""
    warnings = [f"warning {i}" for i in range(1, 13)]

    log_render_result(RenderResult(passes=1, warnings=warnings))

    listed = [m for m in messages if "  Warning " in m]
    assert len(listed) == 10
    assert listed[-1] == "[render]   Warning 10: warning 10"
    assert messages[-1] == "[render]   ... and 2 more warnings"
