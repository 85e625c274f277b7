"""
Migration configuration.

Settings are loaded once from environment variables and frozen for the
lifetime of the process. CLI overrides produce a new instance via
dataclasses.replace().
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from neo2cosmos.errors import ConfigError

__all__ = ["MigrationConfig", "get_config", "derive_gremlin_endpoint", "RESET_STRATEGIES"]

RESET_STRATEGIES = ("recreate", "drop")

_DOCUMENTS_HOST = re.compile(r"^https://([^.]+)\.documents\.azure\.com(?::\d+)?/?$")


@dataclass(frozen=True)
class MigrationConfig:
    """Immutable connection and tuning settings for one migration run."""
    cosmos_endpoint: str
    cosmos_auth_key: str
    gremlin_endpoint: str
    cosmos_database: str = "graphdb"
    cosmos_graph: str = "Northwind"
    throughput: int = 400
    partition_key_path: str = "/id"
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"
    neo4j_database: str = "neo4j"
    workers: int = 4
    reset_strategy: str = "recreate"

    def __post_init__(self):
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.throughput < 1:
            raise ConfigError(f"throughput must be positive, got {self.throughput}")
        if not self.partition_key_path.startswith("/") or len(self.partition_key_path) < 2:
            raise ConfigError(
                f"partition_key_path must look like /property, got {self.partition_key_path!r}"
            )
        if self.reset_strategy not in RESET_STRATEGIES:
            raise ConfigError(
                f"reset_strategy must be one of {', '.join(RESET_STRATEGIES)}, "
                f"got {self.reset_strategy!r}"
            )

    @property
    def gremlin_username(self) -> str:
        """Resource path Cosmos expects as the Gremlin username."""
        return f"/dbs/{self.cosmos_database}/colls/{self.cosmos_graph}"

    def describe(self) -> Dict[str, str]:
        """Settings safe to print (no secrets)."""
        return {
            "cosmos_endpoint": self.cosmos_endpoint,
            "gremlin_endpoint": self.gremlin_endpoint,
            "database": self.cosmos_database,
            "graph": self.cosmos_graph,
            "throughput": str(self.throughput),
            "partition_key": self.partition_key_path,
            "neo4j_uri": self.neo4j_uri,
            "neo4j_database": self.neo4j_database,
            "workers": str(self.workers),
            "reset_strategy": self.reset_strategy,
        }


def derive_gremlin_endpoint(cosmos_endpoint: str) -> str:
    """
    Map a Cosmos account's SQL endpoint to its Gremlin websocket endpoint.

    https://acct.documents.azure.com:443/ -> wss://acct.gremlin.cosmos.azure.com:443/

    Raises:
        ConfigError: If the endpoint is not a recognizable Cosmos account URL
    """
    match = _DOCUMENTS_HOST.match(cosmos_endpoint.strip())
    if not match:
        raise ConfigError(
            f"Cannot derive Gremlin endpoint from {cosmos_endpoint!r}; "
            "set COSMOS_GREMLIN_ENDPOINT explicitly"
        )
    return f"wss://{match.group(1)}.gremlin.cosmos.azure.com:443/"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def get_config(environ: Optional[Mapping[str, str]] = None) -> MigrationConfig:
    """
    Load migration configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Frozen MigrationConfig

    Raises:
        ConfigError: If COSMOS_ENDPOINT or COSMOS_AUTH_KEY is missing, or a
            numeric setting is malformed
    """
    env = os.environ if environ is None else environ

    endpoint = env.get("COSMOS_ENDPOINT", "")
    auth_key = env.get("COSMOS_AUTH_KEY", "")
    missing = [name for name, value in
               (("COSMOS_ENDPOINT", endpoint), ("COSMOS_AUTH_KEY", auth_key)) if not value]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    gremlin_endpoint = env.get("COSMOS_GREMLIN_ENDPOINT") or derive_gremlin_endpoint(endpoint)

    return MigrationConfig(
        cosmos_endpoint=endpoint,
        cosmos_auth_key=auth_key,
        gremlin_endpoint=gremlin_endpoint,
        cosmos_database=env.get("COSMOS_DATABASE", "graphdb"),
        cosmos_graph=env.get("COSMOS_GRAPH", "Northwind"),
        throughput=_int_env(env, "COSMOS_THROUGHPUT", 400),
        partition_key_path=env.get("COSMOS_PARTITION_KEY") or "/id",
        neo4j_uri=env.get("NEO4J_URI", "bolt://localhost:7687"),
        neo4j_user=env.get("NEO4J_USER", "neo4j"),
        neo4j_password=env.get("NEO4J_PASSWORD", "password"),
        neo4j_database=env.get("NEO4J_DATABASE", "neo4j"),
        workers=_int_env(env, "MIGRATION_WORKERS", 4),
        reset_strategy=env.get("RESET_STRATEGY", "recreate"),
    )
