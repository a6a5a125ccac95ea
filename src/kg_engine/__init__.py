"""
Knowledge Graph Engine - An in-memory directed labeled graph store.

This package ingests Source|Relationship|Target triples, resolves entity
names with staged fuzzy matching, and finds shortest connection paths.
"""

from kg_engine.config import Settings, load_config
from kg_engine.utils.logging import setup_logging, get_logger
from kg_engine.core.exceptions import KGEngineError
from kg_engine.graph_store import GraphStore, FuzzyResolver, PathFinder

__version__ = "0.1.0"
__author__ = "KG Engine Team"

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "KGEngineError",
    "GraphStore",
    "FuzzyResolver",
    "PathFinder",
]
