"""
Tests for the pipe-delimited triple file format.

Tests parsing, tolerant loading and saving.
"""

import logging
from collections import Counter
from pathlib import Path

import pytest

from kg_engine.core.exceptions import GraphFileError, MalformedLineError
from kg_engine.graph_store import GraphStore, Triple
from kg_engine.storage import (
    dump_lines,
    format_triple,
    is_skippable,
    load_file,
    load_lines,
    parse_triple,
    save_file,
)


class TestParseTriple:
    """Tests for single-line parsing."""

    def test_basic(self):
        """A plain line yields its three fields."""
        assert parse_triple("Alice|knows|Bob") == Triple("Alice", "knows", "Bob")

    def test_fields_normalized(self):
        """Whitespace around and inside fields is normalized."""
        triple = parse_triple("  Acme   Corp |  located\tin|Berlin  ")

        assert triple == Triple("Acme Corp", "located in", "Berlin")

    @pytest.mark.parametrize(
        "line",
        ["no separator here", "only|one", "a|b|c|d"],
    )
    def test_wrong_separator_count(self, line):
        """Anything but exactly two separators is malformed."""
        with pytest.raises(MalformedLineError) as exc_info:
            parse_triple(line)

        assert exc_info.value.line == line

    @pytest.mark.parametrize("line", ["|knows|Bob", "Alice||Bob", "Alice|knows|   "])
    def test_empty_field(self, line):
        """Empty fields make the line malformed."""
        with pytest.raises(MalformedLineError):
            parse_triple(line)

    def test_truncation(self):
        """Fields are cut to the maximum length."""
        triple = parse_triple(f"{'x' * 200}|r|y", max_length=127)

        assert len(triple.source) == 127


class TestIsSkippable:
    """Tests for blank and comment detection."""

    @pytest.mark.parametrize("line", ["", "   ", "# comment", "   # indented"])
    def test_skippable(self, line):
        assert is_skippable(line)

    def test_data_line(self):
        assert not is_skippable("a|b|c")


class TestLoad:
    """Tests for loading lines and files into a store."""

    def test_malformed_lines_tolerated(self, store: GraphStore, sample_triples_text: str):
        """Valid lines load; malformed lines are counted and skipped."""
        report = load_lines(store, sample_triples_text.splitlines(), source="sample")

        assert report.loaded == 4
        assert report.skipped == 3
        assert [n for n, _ in report.malformed] == [7, 8, 10]
        assert store.get_stats()["relation_count"] == 4

    def test_comments_not_reported(self, store: GraphStore, sample_triples_text: str):
        """Comment and blank lines are not reported as malformed."""
        report = load_lines(store, sample_triples_text.splitlines())

        texts = [text for _, text in report.malformed]
        assert not any(t.startswith("#") for t in texts)

    def test_crlf_line_endings(self, store: GraphStore):
        """Windows line endings are accepted."""
        report = load_lines(store, ["A|r|B\r\n", "B|r|C\r\n"])

        assert report.loaded == 2
        assert store.find_exact("B") is not None

    def test_entities_shared_across_lines(self, store: GraphStore):
        """Names seen on several lines map to one entity."""
        load_lines(store, ["NumPy|used by|SciPy", "SciPy|built on|NumPy"])

        assert len(store) == 2

    def test_warning_logged(self, store: GraphStore, caplog):
        """Each skipped line is logged as a warning."""
        with caplog.at_level(logging.WARNING, logger="kg_engine"):
            load_lines(store, ["bad line"], source="input.txt")

        assert "line 1 of input.txt" in caplog.text

    def test_load_file(self, store: GraphStore, triples_file: Path):
        """Files are read as UTF-8 and reported by path."""
        report = load_file(store, triples_file)

        assert report.loaded == 4
        assert report.source == str(triples_file)
        assert "skipped 3" in report.summary()

    def test_invalid_utf8(self, store: GraphStore, temp_dir: Path):
        """Undecodable bytes raise GraphFileError before anything is loaded."""
        path = temp_dir / "latin.txt"
        path.write_bytes(b"A|r|B\nC|r|\xff\xfe\n")

        with pytest.raises(GraphFileError) as exc_info:
            load_file(store, path)

        assert "UTF-8" in exc_info.value.message
        assert len(store) == 0

    def test_missing_file(self, store: GraphStore, temp_dir: Path):
        """A missing file raises GraphFileError and leaves the store intact."""
        store.add_relation("A", "r", "B")

        with pytest.raises(GraphFileError) as exc_info:
            load_file(store, temp_dir / "missing.txt")

        assert "missing.txt" in exc_info.value.path
        assert len(store) == 2


class TestSave:
    """Tests for writing triple files."""

    def test_format_triple(self):
        assert format_triple(Triple("A", "r", "B")) == "A|r|B"

    def test_save_count(self, sample_store: GraphStore, temp_dir: Path):
        """One line is written per edge."""
        path = temp_dir / "out" / "relations.txt"

        count = save_file(sample_store, path)

        assert count == 4
        assert len(path.read_text(encoding="utf-8").splitlines()) == 4

    def test_save_then_load_preserves_edges(self, sample_store: GraphStore, temp_dir: Path):
        """Reloading a saved file reproduces the same multiset of triples."""
        sample_store.add_relation("Alice", "knows", "Bob")
        path = temp_dir / "relations.txt"
        save_file(sample_store, path)

        reloaded = GraphStore()
        load_file(reloaded, path)

        assert Counter(reloaded.iter_triples()) == Counter(sample_store.iter_triples())

    def test_hash_names_survive_round_trip(self, store: GraphStore, temp_dir: Path):
        """Names and labels starting with '#' are not read back as comments."""
        store.add_relation("Post", "#tags", "#hashtag")
        store.add_relation("Post", "mentions", "# channel")
        path = temp_dir / "relations.txt"
        save_file(store, path)

        reloaded = GraphStore()
        report = load_file(reloaded, path)

        assert report.loaded == 2
        assert Counter(reloaded.iter_triples()) == Counter(store.iter_triples())

    def test_isolated_entities_not_saved(self, sample_store: GraphStore):
        """Entities with no edges have no line in the output."""
        lines = dump_lines(sample_store)

        assert not any("Carol" in line for line in lines)

    def test_unwritable_path(self, sample_store: GraphStore, temp_dir: Path):
        """Writing into a path blocked by a file raises GraphFileError."""
        blocker = temp_dir / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(GraphFileError):
            save_file(sample_store, blocker / "relations.txt")
