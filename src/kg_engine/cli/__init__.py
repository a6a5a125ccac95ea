"""
CLI module for Knowledge Graph Engine.

Provides command-line interface using Typer:
- add-relation / import: Grow the triple file
- show / path: Query connections and paths
- export / stats: DOT export and graph statistics
- shell: Interactive menu session
- config: Configuration management
"""

from kg_engine.cli.main import app

__all__ = ["app"]
