"""
Graph - source side of the migration.

This module provides:
- models: Vertex and Edge entities
- encoder: Gremlin statement encoding
- reader: Neo4j reads mapped to entities
"""

from neo2cosmos.graph.models import Vertex, Edge
from neo2cosmos.graph.encoder import encode_vertex, encode_edge, sanitize_value
from neo2cosmos.graph.reader import SourceReader

__all__ = [
    "Vertex",
    "Edge",
    "encode_vertex",
    "encode_edge",
    "sanitize_value",
    "SourceReader",
]
