"""
In-memory knowledge graph store.

Holds entities in an index keyed by exact name and keeps, for every
entity, an ordered list of outgoing labeled relations.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Literal, NamedTuple

from kg_engine.config import Settings
from kg_engine.core.exceptions import InvalidFieldError
from kg_engine.utils.logging import get_logger
from kg_engine.utils.text import COMMENT_MARKER, contains_separator, normalize_field

logger = get_logger(__name__)

RelationOrder = Literal["newest_first", "insertion"]


@dataclass(eq=False)
class Relation:
    """
    Directed labeled edge to a target entity.

    The source is the entity whose relation list holds this record.
    """

    label: str
    target: "Entity"

    def __repr__(self) -> str:
        return f"Relation({self.label!r} -> {self.target.name!r})"


@dataclass(eq=False)
class Entity:
    """
    Named node in the knowledge graph.

    Entities compare by identity: two records are the same entity
    only if they are the same object held by the index.
    """

    name: str
    relations: deque[Relation] = field(default_factory=deque, repr=False)

    @property
    def out_degree(self) -> int:
        return len(self.relations)

    def __repr__(self) -> str:
        return f"Entity({self.name!r}, relations={len(self.relations)})"


class Triple(NamedTuple):
    """Source, label and target names of one stored edge."""

    source: str
    label: str
    target: str


class EntityIndex:
    """
    Registry owning every entity, keyed by exact name.

    Enumeration follows creation order.
    """

    def __init__(self) -> None:
        self._entities: dict[str, Entity] = {}

    def find_exact(self, name: str) -> Entity | None:
        """Return the entity stored under exactly this name."""
        return self._entities.get(name)

    def get_or_create(self, name: str) -> Entity:
        """
        Return the entity with this exact name, creating it if needed.

        Args:
            name: Exact entity name

        Returns:
            Existing or newly registered entity
        """
        entity = self._entities.get(name)
        if entity is None:
            entity = Entity(name=name)
            self._entities[name] = entity
            logger.debug(f"Created entity: {name!r}")
        return entity

    def enumerate(self) -> list[Entity]:
        """Return all entities in creation order."""
        return list(self._entities.values())

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, name: object) -> bool:
        return name in self._entities


class GraphStore:
    """
    Knowledge graph storage for entities and outgoing relations.

    Entity names and relation labels are whitespace-normalized and
    truncated to max_name_length before use. Names are case-preserving:
    "Python" and "python" are two entities.

    Example:
        >>> store = GraphStore()
        >>> store.add_relation("Alice", "works at", "Acme Corp")
        >>> alice = store.find_exact("Alice")
        >>> for rel in store.relations_of(alice):
        ...     print(f"{alice.name} -[{rel.label}]-> {rel.target.name}")
    """

    def __init__(
        self,
        max_name_length: int = 127,
        relation_order: RelationOrder = "newest_first",
    ) -> None:
        """
        Initialize an empty graph store.

        Args:
            max_name_length: Maximum length of names and labels
            relation_order: "newest_first" prepends new relations,
                "insertion" appends them
        """
        if relation_order not in ("newest_first", "insertion"):
            raise ValueError(f"Unknown relation order: {relation_order!r}")

        self.max_name_length = max_name_length
        self.relation_order = relation_order
        self.index = EntityIndex()
        self._relation_count = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphStore":
        """
        Create GraphStore from settings.

        Args:
            settings: Application settings

        Returns:
            Configured, empty GraphStore
        """
        return cls(
            max_name_length=settings.graph.max_name_length,
            relation_order=settings.graph.relation_order,
        )

    def _normalize(self, value: str, field_name: str) -> str:
        """Normalize a field and reject values the triple format cannot hold."""
        normalized = normalize_field(value, self.max_name_length)
        if not normalized:
            raise InvalidFieldError(
                f"{field_name.capitalize()} must not be empty",
                field=field_name,
                value=value,
            )
        if contains_separator(normalized):
            raise InvalidFieldError(
                f"{field_name.capitalize()} must not contain '|'",
                field=field_name,
                value=normalized,
            )
        # Sources begin a saved line, which the marker would turn into a comment
        if field_name == "source" and normalized.startswith(COMMENT_MARKER):
            raise InvalidFieldError(
                f"{field_name.capitalize()} must not start with '{COMMENT_MARKER}'",
                field=field_name,
                value=normalized,
            )
        return normalized

    def find_exact(self, name: str) -> Entity | None:
        """
        Find an entity by its exact (normalized) name.

        Args:
            name: Entity name; whitespace is normalized before lookup

        Returns:
            The entity, or None
        """
        return self.index.find_exact(normalize_field(name, self.max_name_length))

    def get_or_create(self, name: str) -> Entity:
        """Return the entity with this name, creating it on first reference."""
        return self.index.get_or_create(self._normalize(name, "name"))

    def add_entity(self, name: str) -> tuple[Entity, bool]:
        """
        Add an entity without relations.

        Args:
            name: Entity name

        Returns:
            Tuple of (entity, created) where created is False if the
            exact name was already present
        """
        normalized = self._normalize(name, "name")
        existing = self.index.find_exact(normalized)
        if existing is not None:
            return existing, False
        return self.index.get_or_create(normalized), True

    def add_relation(
        self,
        source_name: str,
        label: str,
        target_name: str,
    ) -> tuple[Entity, Relation]:
        """
        Add a labeled edge, creating either endpoint if needed.

        Args:
            source_name: Source entity name
            label: Relationship label
            target_name: Target entity name

        Returns:
            Tuple of (source entity, created relation)

        Raises:
            InvalidFieldError: If a field is empty or contains '|', or the
                source starts with '#'
        """
        source_key = self._normalize(source_name, "source")
        label_value = self._normalize(label, "label")
        target_key = self._normalize(target_name, "target")

        source = self.index.get_or_create(source_key)
        target = self.index.get_or_create(target_key)
        relation = Relation(label=label_value, target=target)

        if self.relation_order == "newest_first":
            source.relations.appendleft(relation)
        else:
            source.relations.append(relation)
        self._relation_count += 1

        logger.debug(
            f"Added relationship: {source.name} -[{relation.label}]-> {target.name}"
        )
        return source, relation

    def relations_of(self, entity: Entity) -> list[Relation]:
        """Return the outgoing relations of an entity in storage order."""
        return list(entity.relations)

    def entities(self) -> list[Entity]:
        """Return every entity in creation order."""
        return self.index.enumerate()

    def iter_triples(self) -> Iterator[Triple]:
        """
        Iterate over every stored edge.

        Edges are grouped by source in entity order; each group
        follows relation storage order.
        """
        for entity in self.index:
            for relation in entity.relations:
                yield Triple(entity.name, relation.label, relation.target.name)

    def get_stats(self) -> dict:
        """Get graph statistics."""
        isolated = sum(1 for e in self.index if e.out_degree == 0)
        return {
            "entity_count": len(self.index),
            "relation_count": self._relation_count,
            "isolated_count": isolated,
        }

    def __len__(self) -> int:
        return len(self.index)

    def __repr__(self) -> str:
        return (
            f"GraphStore(entities={len(self.index)}, "
            f"relationships={self._relation_count})"
        )
