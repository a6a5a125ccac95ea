"""
Tests for exception hierarchy.

Tests custom exceptions and error handling.
"""

import pytest

from kg_engine.core.exceptions import (
    ConfigurationError,
    EndpointNotFoundError,
    EntityNotFoundError,
    GraphError,
    GraphFileError,
    InvalidFieldError,
    KGEngineError,
    MalformedLineError,
    NoPathError,
    StorageError,
    is_not_found,
)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    def test_base_exception(self):
        """KGEngineError should be the base for all custom exceptions."""
        exc = KGEngineError("Test error")

        assert isinstance(exc, Exception)
        assert str(exc) == "Test error"

    def test_configuration_error(self):
        """ConfigurationError should inherit from KGEngineError."""
        exc = ConfigurationError("Invalid config")

        assert isinstance(exc, KGEngineError)

    def test_invalid_field_error(self):
        """InvalidFieldError should inherit from GraphError."""
        exc = InvalidFieldError("Empty source", field="source")

        assert isinstance(exc, GraphError)
        assert isinstance(exc, KGEngineError)

    def test_endpoint_not_found_error(self):
        """EndpointNotFoundError should inherit from EntityNotFoundError."""
        exc = EndpointNotFoundError("Source not found", role="source", query="x")

        assert isinstance(exc, EntityNotFoundError)
        assert isinstance(exc, GraphError)

    def test_no_path_error(self):
        """NoPathError should inherit from GraphError."""
        exc = NoPathError("No path", source="A", target="B")

        assert isinstance(exc, GraphError)

    def test_storage_errors(self):
        """File format errors should inherit from StorageError."""
        assert isinstance(MalformedLineError("Bad line"), StorageError)
        assert isinstance(GraphFileError("Cannot open"), StorageError)


class TestExceptionAttributes:
    """Tests for exception attributes and metadata."""

    def test_invalid_field_context(self):
        """InvalidFieldError keeps the field and value."""
        exc = InvalidFieldError("Contains separator", field="label", value="a|b")

        assert exc.field == "label"
        assert exc.details == {"field": "label", "value": "a|b"}
        assert "field='label'" in str(exc)

    def test_endpoint_role(self):
        """EndpointNotFoundError records which endpoint failed."""
        exc = EndpointNotFoundError("Target not found", role="target", query="Bob")

        assert exc.role == "target"
        assert exc.query == "Bob"
        assert exc.details["role"] == "target"

    def test_no_path_endpoints(self):
        exc = NoPathError("No path", source="A", target="B")

        assert (exc.source, exc.target) == ("A", "B")

    def test_malformed_line_truncates_long_lines(self):
        """Very long lines are shortened in details only."""
        line = "x" * 300
        exc = MalformedLineError("Bad line", line=line, line_number=7)

        assert exc.line == line
        assert exc.line_number == 7
        assert exc.details["line"].endswith("...")
        assert len(exc.details["line"]) == 103

    def test_graph_file_path(self):
        exc = GraphFileError("Cannot open 'x.txt'", path="x.txt")

        assert exc.path == "x.txt"
        assert "x.txt" in str(exc)


class TestExceptionCatching:
    """Tests for exception catching patterns."""

    def test_catch_parent_error(self):
        """Parent exceptions catch child exceptions."""
        with pytest.raises(EntityNotFoundError):
            raise EndpointNotFoundError("Source not found", role="source")

    def test_catch_base_error(self):
        """Base exception catches all custom exceptions."""
        with pytest.raises(KGEngineError):
            raise MalformedLineError("Empty field")

    def test_exception_chaining(self):
        """Exceptions should support chaining."""
        try:
            try:
                raise OSError("disk gone")
            except OSError as e:
                raise GraphFileError("Cannot write", path="out.txt") from e
        except GraphFileError as e:
            assert isinstance(e.__cause__, OSError)

    def test_repr_formatting(self):
        """Exception repr should include class name."""
        assert repr(GraphError("oops")).startswith("GraphError(")


class TestIsNotFound:
    """Tests for the not-found helper."""

    @pytest.mark.parametrize(
        "error",
        [
            EntityNotFoundError("missing"),
            EndpointNotFoundError("missing", role="source"),
            NoPathError("none", source="A", target="B"),
        ],
    )
    def test_not_found_errors(self, error):
        assert is_not_found(error)

    @pytest.mark.parametrize(
        "error",
        [InvalidFieldError("bad"), GraphFileError("io"), ValueError("x")],
    )
    def test_other_errors(self, error):
        assert not is_not_found(error)
