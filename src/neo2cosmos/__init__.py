"""
neo2cosmos - Bulk migration of a Neo4j property graph into Azure Cosmos DB (Gremlin API).

This package provides:
- Source reads from Neo4j mapped to Vertex/Edge entities
- Deterministic Gremlin statement encoding
- Cosmos database/graph provisioning and paged statement execution
- A phase-ordered, bounded-concurrency migration runner
"""

__version__ = "0.1.0"
__author__ = "neo2cosmos Project"

from .errors import MigrationError
from .graph.encoder import encode_edge, encode_vertex
from .graph.models import Edge, Vertex
from .utils.config import MigrationConfig, get_config

__all__ = [
    "__version__",
    "Edge",
    "MigrationConfig",
    "MigrationError",
    "Vertex",
    "encode_edge",
    "encode_vertex",
    "get_config",
]
