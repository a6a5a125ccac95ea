"""
Shared pytest fixtures for Knowledge Graph Engine tests.

Provides reusable fixtures for:
- Configuration and settings
- Graph stores with sample data
- Triple files
- Temporary resources
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from kg_engine.config import Settings, reset_settings
from kg_engine.graph_store import FuzzyResolver, GraphStore, PathFinder
from kg_engine.utils.logging import reset_logging


@pytest.fixture(autouse=True)
def reset_global_state():
    """
    Reset cached settings and logging before and after each test.

    This ensures tests are isolated and don't share global state.
    """
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no user config.yaml is found."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Provide settings with file locations inside the temporary directory."""
    return Settings(
        files={
            "data_file": str(temp_dir / "relations.txt"),
            "dot_file": str(temp_dir / "kg_graph.dot"),
        },
    )


@pytest.fixture
def store() -> GraphStore:
    """Provide an empty graph store with default settings."""
    return GraphStore()


@pytest.fixture
def sample_store() -> GraphStore:
    """
    Provide a small graph:

        Alice -knows-> Bob -works at-> Acme Corp -located in-> Berlin
        Alice -lives in-> Berlin
        Carol (no relations)
    """
    graph = GraphStore()
    graph.add_relation("Alice", "knows", "Bob")
    graph.add_relation("Bob", "works at", "Acme Corp")
    graph.add_relation("Acme Corp", "located in", "Berlin")
    graph.add_relation("Alice", "lives in", "Berlin")
    graph.add_entity("Carol")
    return graph


@pytest.fixture
def resolver(sample_store: GraphStore) -> FuzzyResolver:
    """Provide a resolver over the sample graph."""
    return FuzzyResolver(sample_store)


@pytest.fixture
def finder(sample_store: GraphStore) -> PathFinder:
    """Provide a path finder over the sample graph."""
    return PathFinder(sample_store)


@pytest.fixture
def sample_triples_text() -> str:
    """Provide triple file content mixing valid, comment, blank and bad lines."""
    return """# Programming languages
Python|influenced by|ABC
Python  |  has library |   NumPy

NumPy|used by|SciPy
   # indented comment
this line has no separator
only|one separator
SciPy|built on|NumPy
empty||field
"""


@pytest.fixture
def triples_file(temp_dir: Path, sample_triples_text: str) -> Path:
    """Write the sample triple text to a file."""
    path = temp_dir / "sample.txt"
    path.write_text(sample_triples_text, encoding="utf-8")
    return path
