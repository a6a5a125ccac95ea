"""
Fuzzy entity resolution.

Maps free-text input to a stored entity in widening stages:
case-insensitive exact match, then prefix matches, then substring
matches. When several candidates remain, a caller-supplied chooser
picks one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from kg_engine.config import Settings
from kg_engine.graph_store.store import Entity, GraphStore
from kg_engine.utils.logging import get_logger
from kg_engine.utils.text import ascii_lower, normalize_field

logger = get_logger(__name__)

# Receives the candidates, returns a 1-based selection or None to cancel
Chooser = Callable[[Sequence[Entity]], int | str | None]


class MatchStage(str, Enum):
    """Stage of the fuzzy search that produced the candidates."""

    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    NONE = "none"


class ResolutionStatus(str, Enum):
    """Outcome of resolving a query."""

    MATCHED = "matched"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"  # Several candidates and no chooser
    CANCELLED = "cancelled"  # Chooser declined or picked out of range


@dataclass
class CandidateSet:
    """Candidates collected by one stage of the search."""

    query: str
    stage: MatchStage
    candidates: list[Entity] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.candidates)

    @property
    def names(self) -> list[str]:
        return [e.name for e in self.candidates]


@dataclass
class Resolution:
    """
    Result of resolving a free-text query to an entity.

    CANCELLED and AMBIGUOUS are treated like NOT_FOUND by callers
    that need a single entity.
    """

    query: str
    status: ResolutionStatus
    entity: Entity | None = None
    stage: MatchStage = MatchStage.NONE
    candidates: list[Entity] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.MATCHED and self.entity is not None


def parse_selection(selection: int | str | None, count: int) -> int | None:
    """
    Convert a 1-based selection into a 0-based index.

    Args:
        selection: Chooser answer (number, numeric text, or None)
        count: Number of candidates offered

    Returns:
        Index into the candidate list, or None if the selection is
        missing, non-numeric or out of range
    """
    if selection is None or isinstance(selection, bool):
        return None
    if isinstance(selection, str):
        text = selection.strip()
        if not text.isdecimal():
            return None
        selection = int(text)
    if 1 <= selection <= count:
        return selection - 1
    return None


class FuzzyResolver:
    """
    Staged, case-insensitive entity lookup.

    Example:
        >>> resolver = FuzzyResolver(store)
        >>> result = resolver.resolve("num")
        >>> if result.found:
        ...     print(result.entity.name)
        >>>
        >>> # Deterministic disambiguation
        >>> result = resolver.resolve("learn", chooser=lambda c: 1)
    """

    def __init__(self, store: GraphStore, max_candidates: int = 16) -> None:
        """
        Initialize resolver.

        Args:
            store: Graph store to search
            max_candidates: Cap on prefix/substring candidates
        """
        if max_candidates < 1:
            raise ValueError("max_candidates must be at least 1")

        self.store = store
        self.max_candidates = max_candidates

    @classmethod
    def from_settings(cls, store: GraphStore, settings: Settings) -> "FuzzyResolver":
        """Create a resolver using the graph settings."""
        return cls(store, max_candidates=settings.graph.max_candidates)

    def find_candidates(self, query: str) -> CandidateSet:
        """
        Run the staged search without disambiguation.

        The query is normalized and truncated like a stored name.
        The first non-empty stage wins. Candidate order follows
        entity enumeration order.

        Args:
            query: Free-text entity reference

        Returns:
            CandidateSet describing the winning stage
        """
        key = normalize_field(query, self.store.max_name_length)
        if not key:
            return CandidateSet(query=key, stage=MatchStage.NONE)

        lowered = ascii_lower(key)
        entities = self.store.entities()

        # Exact, case-insensitive: first hit wins outright
        for entity in entities:
            if ascii_lower(entity.name) == lowered:
                return CandidateSet(query=key, stage=MatchStage.EXACT, candidates=[entity])

        prefix = self._collect(entities, lambda name: name.startswith(lowered))
        if prefix:
            return CandidateSet(query=key, stage=MatchStage.PREFIX, candidates=prefix)

        substring = self._collect(entities, lambda name: lowered in name)
        if substring:
            return CandidateSet(query=key, stage=MatchStage.SUBSTRING, candidates=substring)

        return CandidateSet(query=key, stage=MatchStage.NONE)

    def _collect(
        self,
        entities: list[Entity],
        matches: Callable[[str], bool],
    ) -> list[Entity]:
        """Collect matching entities up to the candidate cap."""
        found: list[Entity] = []
        for entity in entities:
            if matches(ascii_lower(entity.name)):
                found.append(entity)
                if len(found) >= self.max_candidates:
                    break
        return found

    def resolve(self, query: str, chooser: Chooser | None = None) -> Resolution:
        """
        Resolve a query to at most one entity.

        Args:
            query: Free-text entity reference
            chooser: Callback picking among several candidates; it
                receives the candidate list and returns a 1-based
                selection, or None to cancel

        Returns:
            Resolution with the matched entity or the reason for none
        """
        result = self.find_candidates(query)

        if not result.candidates:
            logger.debug(f"No entity matches {result.query!r}")
            return Resolution(query=result.query, status=ResolutionStatus.NOT_FOUND)

        if len(result.candidates) == 1:
            return Resolution(
                query=result.query,
                status=ResolutionStatus.MATCHED,
                entity=result.candidates[0],
                stage=result.stage,
                candidates=result.candidates,
            )

        if chooser is None:
            return Resolution(
                query=result.query,
                status=ResolutionStatus.AMBIGUOUS,
                stage=result.stage,
                candidates=result.candidates,
            )

        index = parse_selection(chooser(result.candidates), len(result.candidates))
        if index is None:
            logger.debug(f"Selection cancelled for {result.query!r}")
            return Resolution(
                query=result.query,
                status=ResolutionStatus.CANCELLED,
                stage=result.stage,
                candidates=result.candidates,
            )

        return Resolution(
            query=result.query,
            status=ResolutionStatus.MATCHED,
            entity=result.candidates[index],
            stage=result.stage,
            candidates=result.candidates,
        )
