# tests/test_exceptions.py
import pytest

from core.exceptions import (
    ConfigurationError,
    GraphEngineError,
    ProcessingSessionClosedError,
    create_error_context,
)


def test_str_includes_details():
    err = GraphEngineError("boom", details={"key": "a"})

    assert str(err) == "boom (Details: {'key': 'a'})"
    assert str(GraphEngineError("plain")) == "plain"


def test_hierarchy():
    assert issubclass(ProcessingSessionClosedError, GraphEngineError)
    with pytest.raises(GraphEngineError):
        raise ConfigurationError("bad config")


def test_error_context_drops_none_values():
    assert create_error_context(key="a", session=None, count=0) == {"key": "a", "count": 0}
