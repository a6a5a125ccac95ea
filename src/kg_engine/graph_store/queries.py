"""
Graph path queries.

Breadth-first search over outgoing relations, returning the path with
the fewest hops between two entities.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from kg_engine.core.exceptions import EndpointNotFoundError, NoPathError
from kg_engine.graph_store.resolver import Chooser, FuzzyResolver
from kg_engine.graph_store.store import Entity, GraphStore, Relation
from kg_engine.utils.logging import get_logger

logger = get_logger(__name__)


class PathStatus(str, Enum):
    """Outcome of a path query."""

    FOUND = "found"
    SOURCE_NOT_FOUND = "source_not_found"
    TARGET_NOT_FOUND = "target_not_found"
    NO_PATH = "no_path"


@dataclass
class PathResult:
    """
    Result of a path query between entities.

    entities holds the path from source to target, both included;
    relations holds the edge taken between each consecutive pair.
    """

    source: str
    target: str
    status: PathStatus
    entities: list[Entity] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == PathStatus.FOUND

    @property
    def hops(self) -> int:
        return len(self.relations)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.entities]

    def describe(self) -> str:
        """Human-readable path description."""
        if self.status == PathStatus.SOURCE_NOT_FOUND:
            return f"Source '{self.source}' not found"
        if self.status == PathStatus.TARGET_NOT_FOUND:
            return f"Target '{self.target}' not found"
        if self.status == PathStatus.NO_PATH:
            return f"No path found from '{self.source}' to '{self.target}'"

        parts = [self.entities[0].name]
        for relation in self.relations:
            parts.append(f"-[{relation.label}]->")
            parts.append(relation.target.name)
        return " ".join(parts)

    def raise_for_status(self) -> "PathResult":
        """
        Raise the matching exception unless a path was found.

        Returns:
            self, for chaining

        Raises:
            EndpointNotFoundError: If the source or target did not resolve
            NoPathError: If the search found no path
        """
        if self.status == PathStatus.SOURCE_NOT_FOUND:
            raise EndpointNotFoundError("Source not found", role="source", query=self.source)
        if self.status == PathStatus.TARGET_NOT_FOUND:
            raise EndpointNotFoundError("Target not found", role="target", query=self.target)
        if self.status == PathStatus.NO_PATH:
            raise NoPathError("No path found", source=self.source, target=self.target)
        return self


class PathFinder:
    """
    Shortest-path search over directed relations.

    Traversal bookkeeping lives in a per-call mapping; entity records
    are never marked, so repeated queries cannot see stale state.

    Example:
        >>> finder = PathFinder(store)
        >>> result = finder.find_path("Alice", "Bob")
        >>> if result.found:
        ...     print(result.describe())
        >>>
        >>> # Fuzzy endpoints with a deterministic chooser
        >>> result = finder.find_path("ali", "bo", fuzzy=True, chooser=lambda c: 1)
    """

    def __init__(self, store: GraphStore, resolver: FuzzyResolver | None = None) -> None:
        """
        Initialize path finder.

        Args:
            store: Graph store to traverse
            resolver: Resolver used for fuzzy endpoints
        """
        self.store = store
        self.resolver = resolver or FuzzyResolver(store)

    def _resolve(self, ref: str, fuzzy: bool, chooser: Chooser | None) -> Entity | None:
        if not fuzzy:
            return self.store.find_exact(ref)
        return self.resolver.resolve(ref, chooser=chooser).entity

    def find_path(
        self,
        source_ref: str,
        target_ref: str,
        fuzzy: bool = False,
        chooser: Chooser | None = None,
    ) -> PathResult:
        """
        Find the fewest-hop path between two entity references.

        Args:
            source_ref: Source entity name or query
            target_ref: Target entity name or query
            fuzzy: Resolve references with the fuzzy resolver instead
                of exact lookup
            chooser: Disambiguation callback for fuzzy resolution

        Returns:
            PathResult; the target is not resolved when the source fails
        """
        source = self._resolve(source_ref, fuzzy, chooser)
        if source is None:
            return PathResult(source=source_ref, target=target_ref, status=PathStatus.SOURCE_NOT_FOUND)

        target = self._resolve(target_ref, fuzzy, chooser)
        if target is None:
            return PathResult(source=source.name, target=target_ref, status=PathStatus.TARGET_NOT_FOUND)

        return self.shortest_path(source, target)

    def shortest_path(self, source: Entity, target: Entity) -> PathResult:
        """
        Breadth-first search from source to target.

        Args:
            source: Start entity
            target: Goal entity

        Returns:
            PathResult with FOUND or NO_PATH status
        """
        # entity id -> (predecessor, relation followed); keys double as the visited set
        came_from: dict[int, tuple[Entity, Relation] | None] = {id(source): None}
        frontier: deque[Entity] = deque([source])
        reached = False

        while frontier:
            current = frontier.popleft()
            if current is target:
                reached = True
                break

            for relation in current.relations:
                neighbor = relation.target
                if id(neighbor) not in came_from:
                    came_from[id(neighbor)] = (current, relation)
                    frontier.append(neighbor)

        if not reached:
            logger.debug(f"No path from {source.name!r} to {target.name!r}")
            return PathResult(source=source.name, target=target.name, status=PathStatus.NO_PATH)

        entities = [target]
        relations: list[Relation] = []
        step = came_from[id(target)]
        while step is not None:
            predecessor, relation = step
            entities.append(predecessor)
            relations.append(relation)
            step = came_from[id(predecessor)]
        entities.reverse()
        relations.reverse()

        logger.debug(
            f"Path from {source.name!r} to {target.name!r}: {len(relations)} hop(s), "
            f"{len(came_from)} entities visited"
        )
        return PathResult(
            source=source.name,
            target=target.name,
            status=PathStatus.FOUND,
            entities=entities,
            relations=relations,
        )
