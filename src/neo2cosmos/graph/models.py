"""
Source graph entities as read from Neo4j.

Vertices and edges are frozen after construction. Properties are held in
a read-only mapping, so neither the fields nor the property bag can change
while workers share an entity. Because the bag is a mapping they are not
hashable; key collections by id instead.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

__all__ = ["Vertex", "Edge"]


def _freeze(instance, properties: Mapping[str, Any]):
    object.__setattr__(instance, "properties", MappingProxyType(dict(properties)))


@dataclass(frozen=True)
class Vertex:
    """A source node. labels[0] is the primary label."""
    labels: Tuple[str, ...]
    id: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = None

    def __post_init__(self):
        if not self.labels:
            raise ValueError(f"Vertex {self.id!r} has no labels")
        object.__setattr__(self, "labels", tuple(self.labels))
        _freeze(self, self.properties)


@dataclass(frozen=True)
class Edge:
    """A directed source relationship between two vertex ids."""
    type: str
    start_node_id: str
    end_node_id: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    __hash__ = None

    def __post_init__(self):
        if not self.type:
            raise ValueError(
                f"Edge {self.start_node_id!r}->{self.end_node_id!r} has an empty type"
            )
        _freeze(self, self.properties)
