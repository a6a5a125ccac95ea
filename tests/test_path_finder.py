"""
Tests for breadth-first path finding.
"""

import pytest

from kg_engine.core.exceptions import EndpointNotFoundError, NoPathError
from kg_engine.graph_store import GraphStore, PathFinder, PathStatus


@pytest.fixture
def triangle() -> GraphStore:
    """A->B, B->C and the shortcut A->C."""
    store = GraphStore()
    store.add_relation("A", "to", "B")
    store.add_relation("B", "to", "C")
    store.add_relation("A", "shortcut", "C")
    return store


class TestShortestPath:
    """Tests for path search between resolved entities."""

    def test_prefers_fewest_hops(self, triangle: GraphStore):
        """A->C is found as one hop, not via B."""
        result = PathFinder(triangle).find_path("A", "C")

        assert result.found
        assert result.names == ["A", "C"]
        assert result.hops == 1
        assert result.relations[0].label == "shortcut"

    def test_fewest_hops_regardless_of_order(self):
        """The direct edge wins even when added first."""
        store = GraphStore(relation_order="insertion")
        store.add_relation("A", "shortcut", "C")
        store.add_relation("A", "to", "B")
        store.add_relation("B", "to", "C")

        result = PathFinder(store).find_path("A", "C")

        assert result.names == ["A", "C"]

    def test_multi_hop(self, finder: PathFinder):
        """Paths over several hops are reconstructed in order."""
        result = finder.find_path("Bob", "Berlin")

        assert result.names == ["Bob", "Acme Corp", "Berlin"]
        assert [r.label for r in result.relations] == ["works at", "located in"]

    def test_self_path(self, triangle: GraphStore):
        """A path from an entity to itself has zero hops."""
        result = PathFinder(triangle).find_path("A", "A")

        assert result.found
        assert result.names == ["A"]
        assert result.hops == 0

    def test_edges_are_directed(self, triangle: GraphStore):
        """Relations are not traversed backwards."""
        result = PathFinder(triangle).find_path("C", "A")

        assert result.status == PathStatus.NO_PATH
        assert result.entities == []

    def test_unreachable(self, finder: PathFinder):
        """An isolated target gives NO_PATH."""
        result = finder.find_path("Alice", "Carol")

        assert result.status == PathStatus.NO_PATH
        assert not result.found

    def test_cycles_terminate(self):
        """Cycles do not trap the search."""
        store = GraphStore()
        store.add_relation("A", "r", "B")
        store.add_relation("B", "r", "A")
        store.add_entity("Z")

        result = PathFinder(store).find_path("A", "Z")

        assert result.status == PathStatus.NO_PATH

    def test_repeated_queries_are_independent(self, triangle: GraphStore):
        """Traversal state does not leak between calls."""
        finder = PathFinder(triangle)

        first = finder.find_path("A", "C")
        finder.find_path("C", "A")
        second = finder.find_path("A", "C")

        assert first.names == second.names == ["A", "C"]
        assert not hasattr(triangle.find_exact("A"), "visited")


class TestEndpoints:
    """Tests for endpoint resolution."""

    def test_source_not_found(self, finder: PathFinder):
        """A missing source is reported as such."""
        result = finder.find_path("Nobody", "Bob")

        assert result.status == PathStatus.SOURCE_NOT_FOUND

    def test_target_not_found(self, finder: PathFinder):
        """A missing target is reported as such."""
        result = finder.find_path("Alice", "Nobody")

        assert result.status == PathStatus.TARGET_NOT_FOUND
        assert result.source == "Alice"

    def test_exact_mode_is_case_sensitive(self, finder: PathFinder):
        """Exact lookup does not fold case."""
        result = finder.find_path("alice", "Bob")

        assert result.status == PathStatus.SOURCE_NOT_FOUND

    def test_fuzzy_mode(self, finder: PathFinder):
        """Fuzzy mode resolves partial, case-insensitive names."""
        result = finder.find_path("ali", "berl", fuzzy=True)

        assert result.names == ["Alice", "Berlin"]

    def test_fuzzy_target_not_prompted_when_source_fails(self, finder: PathFinder):
        """The chooser is not asked about the target if the source is missing."""
        calls = []

        def chooser(candidates):
            calls.append(candidates)
            return 1

        result = finder.find_path("zzz", "a", fuzzy=True, chooser=chooser)

        assert result.status == PathStatus.SOURCE_NOT_FOUND
        assert calls == []

    def test_fuzzy_cancelled_selection(self, finder: PathFinder):
        """A cancelled disambiguation counts as not found."""
        # "a" is a prefix of Alice and Acme Corp
        result = finder.find_path("a", "Bob", fuzzy=True, chooser=lambda c: 0)

        assert result.status == PathStatus.SOURCE_NOT_FOUND


class TestPathResult:
    """Tests for result helpers."""

    def test_describe_found(self, finder: PathFinder):
        result = finder.find_path("Alice", "Bob")

        assert result.describe() == "Alice -[knows]-> Bob"

    def test_describe_no_path(self, finder: PathFinder):
        result = finder.find_path("Berlin", "Alice")

        assert "No path found" in result.describe()

    def test_raise_for_status_found(self, finder: PathFinder):
        """A found path is returned unchanged."""
        result = finder.find_path("Alice", "Bob")

        assert result.raise_for_status() is result

    def test_raise_for_status_endpoint(self, finder: PathFinder):
        """Missing endpoints raise with the role set."""
        with pytest.raises(EndpointNotFoundError) as exc_info:
            finder.find_path("Alice", "Nobody").raise_for_status()

        assert exc_info.value.role == "target"

    def test_raise_for_status_no_path(self, finder: PathFinder):
        """NO_PATH raises NoPathError."""
        with pytest.raises(NoPathError):
            finder.find_path("Berlin", "Alice").raise_for_status()
