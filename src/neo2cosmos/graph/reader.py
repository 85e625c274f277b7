"""
Read the full node and relationship set from the Neo4j source.

Every read opens its own driver and session, materializes all rows, and
closes both before returning, including when the query fails. Rows are
mapped to Vertex/Edge at this boundary; nothing downstream touches driver
types.
"""

from typing import Any, Callable, List, Mapping

from neo4j.exceptions import DriverError, Neo4jError

from neo2cosmos.errors import SourceReadError
from neo2cosmos.graph.models import Edge, Vertex
from neo2cosmos.utils.config import MigrationConfig
from neo2cosmos.utils.neo4j import get_driver, get_session

__all__ = [
    "SourceReader",
    "vertex_from_node",
    "edge_from_relationship",
    "VERTEX_QUERY",
    "EDGE_QUERY",
]

VERTEX_QUERY = "MATCH (n) RETURN n"
EDGE_QUERY = "MATCH (a)-[r]->(b) RETURN r"

NODE_COUNT_QUERY = "MATCH (n) RETURN count(n) AS count"
RELATIONSHIP_COUNT_QUERY = "MATCH ()-[r]->() RETURN count(r) AS count"


def vertex_from_node(node: Any) -> Vertex:
    """
    Map a driver Node (or an equivalent mapping) to a Vertex.

    Accepts either a neo4j.graph.Node or a mapping with "labels", "id" and
    "properties" keys. Driver nodes expose labels as an unordered set, so
    labels are sorted to keep the primary label stable across runs.

    Raises:
        SourceReadError: If the node has no labels or no identifier
    """
    if hasattr(node, "element_id"):
        labels = sorted(node.labels)
        node_id = node.element_id
        properties = dict(node.items())
    elif isinstance(node, Mapping):
        labels = list(node.get("labels") or [])
        node_id = node.get("id")
        properties = dict(node.get("properties") or {})
    else:
        raise SourceReadError(f"Unsupported node row: {type(node).__name__}")

    if node_id is None or node_id == "":
        raise SourceReadError("Node row has no identifier")
    if not labels:
        raise SourceReadError(f"Node {node_id} has no labels")

    return Vertex(labels=tuple(labels), id=str(node_id), properties=properties)


def edge_from_relationship(rel: Any) -> Edge:
    """
    Map a driver Relationship (or an equivalent mapping) to an Edge.

    Mappings use the keys "type", "start_node_id", "end_node_id" and
    "properties".

    Raises:
        SourceReadError: If the type or either endpoint is missing
    """
    if hasattr(rel, "element_id"):
        rel_type = rel.type
        start = rel.start_node.element_id if rel.start_node is not None else None
        end = rel.end_node.element_id if rel.end_node is not None else None
        properties = dict(rel.items())
    elif isinstance(rel, Mapping):
        rel_type = rel.get("type")
        start = rel.get("start_node_id")
        end = rel.get("end_node_id")
        properties = dict(rel.get("properties") or {})
    else:
        raise SourceReadError(f"Unsupported relationship row: {type(rel).__name__}")

    if not rel_type:
        raise SourceReadError(f"Relationship {start}->{end} has no type")
    if start is None or end is None:
        raise SourceReadError(f"Relationship of type {rel_type} is missing an endpoint")

    return Edge(
        type=rel_type,
        start_node_id=str(start),
        end_node_id=str(end),
        properties=properties,
    )


class SourceReader:
    """Reads all vertices and edges from Neo4j, one driver per call."""

    def __init__(self, config: MigrationConfig, driver_factory: Callable = get_driver):
        self.config = config
        self.driver_factory = driver_factory

    def _run(self, query: str, consume: Callable[[Any], Any]):
        try:
            driver = self.driver_factory(self.config)
        except (DriverError, Neo4jError) as exc:
            raise SourceReadError(f"Cannot connect to {self.config.neo4j_uri}: {exc}") from exc

        try:
            with get_session(driver, self.config) as session:
                return consume(session.run(query))
        except (DriverError, Neo4jError) as exc:
            raise SourceReadError(f"Query failed ({query}): {exc}") from exc
        finally:
            driver.close()

    def read_vertices(self) -> List[Vertex]:
        """Return every node in the source as a Vertex."""
        return self._run(VERTEX_QUERY, lambda result: [vertex_from_node(r["n"]) for r in result])

    def read_edges(self) -> List[Edge]:
        """Return every relationship in the source as an Edge."""
        return self._run(EDGE_QUERY, lambda result: [edge_from_relationship(r["r"]) for r in result])

    def count_nodes(self) -> int:
        return self._run(NODE_COUNT_QUERY, lambda result: result.single()["count"])

    def count_relationships(self) -> int:
        return self._run(RELATIONSHIP_COUNT_QUERY, lambda result: result.single()["count"])
