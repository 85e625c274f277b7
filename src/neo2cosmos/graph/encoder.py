"""
Gremlin statement encoding for source entities.

Vertex: g.addV('<label>').property('id','<id>')[.property('<k>','<v>')]*
Edge:   g.V('<start>').addE('<type>')[.property('<k>','<v>')]*.to(g.V('<end>'))

Only the first label of a vertex is written. Property values are rendered
with str() and every single quote is deleted, not escaped, so O'Brien is
stored as OBrien. No other escaping is applied.
"""

from typing import Any, Dict

from neo2cosmos.graph.models import Edge, Vertex

__all__ = ["encode_vertex", "encode_edge", "sanitize_value"]


def sanitize_value(value: Any) -> str:
    """Render a property value as a Gremlin string literal body."""
    return str(value).replace("'", "")


def _property_clauses(properties: Dict[str, Any]) -> str:
    return "".join(
        f".property('{key}','{sanitize_value(value)}')"
        for key, value in properties.items()
    )


def encode_vertex(vertex: Vertex) -> str:
    """Encode a vertex as a single addV statement."""
    statement = f"g.addV('{vertex.labels[0]}')"
    statement += f".property('id','{vertex.id}')"
    statement += _property_clauses(vertex.properties)
    return statement


def encode_edge(edge: Edge) -> str:
    """Encode an edge as a single addE statement anchored on its start vertex."""
    statement = f"g.V('{edge.start_node_id}')"
    statement += f".addE('{edge.type}')"
    statement += _property_clauses(edge.properties)
    statement += f".to(g.V('{edge.end_node_id}'))"
    return statement
