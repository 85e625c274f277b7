"""
Cosmos - destination side of the migration.

This module provides:
- provision: Database and graph container setup/reset
- executor: Gremlin statement execution with full page draining
"""

from neo2cosmos.cosmos.executor import GremlinExecutor, open_gremlin_client
from neo2cosmos.cosmos.provision import GraphProvisioner

__all__ = [
    "GremlinExecutor",
    "GraphProvisioner",
    "open_gremlin_client",
]
