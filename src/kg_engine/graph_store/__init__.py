"""
Graph store module for Knowledge Graph Engine.

Provides the in-memory knowledge graph:
- Entity index and outgoing relation lists
- Fuzzy entity resolution with disambiguation
- Shortest path finding
"""

from kg_engine.graph_store.store import (
    GraphStore,
    EntityIndex,
    Entity,
    Relation,
    Triple,
)
from kg_engine.graph_store.resolver import (
    FuzzyResolver,
    Chooser,
    CandidateSet,
    MatchStage,
    Resolution,
    ResolutionStatus,
    parse_selection,
)
from kg_engine.graph_store.queries import (
    PathFinder,
    PathResult,
    PathStatus,
)

__all__ = [
    "GraphStore",
    "EntityIndex",
    "Entity",
    "Relation",
    "Triple",
    "FuzzyResolver",
    "Chooser",
    "CandidateSet",
    "MatchStage",
    "Resolution",
    "ResolutionStatus",
    "parse_selection",
    "PathFinder",
    "PathResult",
    "PathStatus",
]
