"""
Pipe-delimited triple files.

One relation per line in the form ``Source|Relationship|Target``.
Blank lines and lines starting with ``#`` are ignored; lines that do
not split into three non-empty fields are skipped and reported.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from kg_engine.core.exceptions import GraphFileError, MalformedLineError
from kg_engine.graph_store.store import GraphStore, Triple
from kg_engine.utils.logging import get_logger
from kg_engine.utils.text import COMMENT_MARKER, FIELD_SEPARATOR, normalize_field

logger = get_logger(__name__)


@dataclass
class LoadReport:
    """Outcome of loading triples into a graph."""

    source: str
    loaded: int = 0
    malformed: list[tuple[int, str]] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.malformed)

    def summary(self) -> str:
        return f"Loaded {self.loaded} relations from '{self.source}' (skipped {self.skipped})"


def is_skippable(line: str) -> bool:
    """Check whether a line is blank or a comment."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_MARKER)


def parse_triple(line: str, max_length: int | None = 127) -> Triple:
    """
    Parse one data line into a triple.

    Args:
        line: Text of the line, without the newline
        max_length: Truncation length for each field

    Returns:
        Normalized triple

    Raises:
        MalformedLineError: If the line lacks exactly two separators or
            a field is empty after normalization
    """
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != 3:
        raise MalformedLineError(
            f"Expected exactly two '{FIELD_SEPARATOR}' separators, found {len(parts) - 1}",
            line=line,
        )

    source, label, target = (normalize_field(p, max_length) for p in parts)
    if not (source and label and target):
        raise MalformedLineError("Empty field", line=line)

    return Triple(source, label, target)


def load_lines(
    store: GraphStore,
    lines: Iterable[str],
    source: str = "<input>",
) -> LoadReport:
    """
    Add every valid triple from lines to the store.

    Args:
        store: Graph to populate
        lines: Lines of text; trailing newlines are ignored
        source: Name used in the report and log messages

    Returns:
        LoadReport with counts and the malformed lines
    """
    report = LoadReport(source=source)

    for line_number, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        if is_skippable(line):
            continue

        try:
            triple = parse_triple(line, store.max_name_length)
        except MalformedLineError as e:
            report.malformed.append((line_number, line.strip()))
            logger.warning(f"Skipping invalid line {line_number} of {source}: {e.message}")
            continue

        store.add_relation(*triple)
        report.loaded += 1

    logger.info(report.summary())
    return report


def load_file(store: GraphStore, path: Path | str) -> LoadReport:
    """
    Load a triple file into the store.

    Args:
        store: Graph to populate
        path: File to read (UTF-8)

    Returns:
        LoadReport for the file

    Raises:
        GraphFileError: If the file cannot be read or is not valid UTF-8;
            the store is left unchanged
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as e:
        raise GraphFileError(f"Cannot open '{path}'", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise GraphFileError(
            f"Cannot decode '{path}' as UTF-8",
            path=str(path),
            details={"position": e.start},
        ) from e

    return load_lines(store, lines, source=str(path))


def format_triple(triple: Triple) -> str:
    """Render a triple as one line of the file format."""
    return FIELD_SEPARATOR.join(triple)


def dump_lines(store: GraphStore) -> list[str]:
    """Render every stored edge as a line of the file format."""
    return [format_triple(t) for t in store.iter_triples()]


def save_file(store: GraphStore, path: Path | str) -> int:
    """
    Write every stored edge to a triple file.

    Entities without outgoing or incoming edges have no line of
    their own and are not written.

    Args:
        store: Graph to save
        path: Destination file

    Returns:
        Number of lines written

    Raises:
        GraphFileError: If the file cannot be written
    """
    path = Path(path)
    lines = dump_lines(store)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        raise GraphFileError(f"Cannot write '{path}'", path=str(path)) from e

    logger.info(f"Saved {len(lines)} relations to '{path}'")
    return len(lines)
