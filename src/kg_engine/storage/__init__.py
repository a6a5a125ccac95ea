"""
Storage module for Knowledge Graph Engine.

Reads and writes graphs as pipe-delimited triple files and
exports them to Graphviz DOT.
"""

from kg_engine.storage.triples import (
    LoadReport,
    is_skippable,
    parse_triple,
    load_lines,
    load_file,
    format_triple,
    dump_lines,
    save_file,
)
from kg_engine.storage.dot import render_dot, export_dot

__all__ = [
    # Triple files
    "LoadReport",
    "is_skippable",
    "parse_triple",
    "load_lines",
    "load_file",
    "format_triple",
    "dump_lines",
    "save_file",
    # DOT
    "render_dot",
    "export_dot",
]
