"""
Gremlin statement execution against a Cosmos DB graph.

A submitted statement can come back as several response pages. execute()
keeps fetching until the result set is exhausted; stopping after the first
page would silently drop side effects on multi-page responses.
"""

from typing import Any, List

from gremlin_python.driver import client as gremlin_client
from gremlin_python.driver import serializer

from neo2cosmos.errors import DestinationConnectionError, StatementExecutionError
from neo2cosmos.utils.config import MigrationConfig

__all__ = ["GremlinExecutor", "open_gremlin_client", "DROP_ALL_STATEMENT"]

DROP_ALL_STATEMENT = "g.V().drop()"
VERTEX_COUNT_STATEMENT = "g.V().count()"
EDGE_COUNT_STATEMENT = "g.E().count()"


def open_gremlin_client(config: MigrationConfig):
    """
    Create a Gremlin client bound to the configured graph container.

    Cosmos only speaks GraphSON v2 and authenticates with the container's
    resource path as the username and the account key as the password.
    The connection pool is sized to the worker count so every worker can
    have a statement in flight.

    Raises:
        DestinationConnectionError: If the client cannot be constructed
    """
    try:
        return gremlin_client.Client(
            config.gremlin_endpoint,
            "g",
            username=config.gremlin_username,
            password=config.cosmos_auth_key,
            message_serializer=serializer.GraphSONSerializersV2d0(),
            pool_size=config.workers,
        )
    except Exception as exc:
        raise DestinationConnectionError(
            f"Cannot open Gremlin client for {config.gremlin_endpoint}: {exc}"
        ) from exc


class GremlinExecutor:
    """Submits Gremlin statements and drains every response page."""

    def __init__(self, client):
        self.client = client

    def execute(self, statement: str) -> int:
        """
        Submit one statement and fetch all of its response pages.

        Returns:
            Number of pages fetched

        Raises:
            StatementExecutionError: If submission or any page fetch fails
        """
        try:
            result_set = self.client.submit(statement)
            pages = 0
            for _page in result_set:
                pages += 1
        except Exception as exc:
            raise StatementExecutionError(statement, str(exc)) from exc
        return pages

    def fetch_all(self, statement: str) -> List[Any]:
        """Submit a statement and return every result item across all pages."""
        try:
            result_set = self.client.submit(statement)
            items = []
            for page in result_set:
                items.extend(page)
        except Exception as exc:
            raise StatementExecutionError(statement, str(exc)) from exc
        return items

    def count(self, statement: str) -> int:
        items = self.fetch_all(statement)
        return int(items[0]) if items else 0

    def count_vertices(self) -> int:
        return self.count(VERTEX_COUNT_STATEMENT)

    def count_edges(self) -> int:
        return self.count(EDGE_COUNT_STATEMENT)

    def drop_all(self) -> int:
        """Remove every vertex (and with it every edge) from the graph."""
        return self.execute(DROP_ALL_STATEMENT)

    def close(self):
        self.client.close()
