"""
Cosmos DB database and graph container provisioning.

Runs before any data moves:
1. Create the database if it does not exist
2. Reset the graph container (delete + recreate, or create-if-absent
   when the graph is cleared with g.V().drop() instead)

Both HTTP errors and transport failures (DNS, refused connections,
timeouts) surface as ProvisioningError.
"""

from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, PartitionKey, exceptions

from neo2cosmos.errors import ProvisioningError
from neo2cosmos.utils.config import MigrationConfig

__all__ = ["GraphProvisioner"]


def _reason(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class GraphProvisioner:
    """Creates the Cosmos database and (re)creates the graph container."""

    def __init__(self, config: MigrationConfig, cosmos_client=None):
        self.config = config
        if cosmos_client is None:
            try:
                cosmos_client = CosmosClient(
                    config.cosmos_endpoint, credential=config.cosmos_auth_key
                )
            except (AzureError, ValueError) as exc:
                raise ProvisioningError(
                    f"Cannot connect to {config.cosmos_endpoint}: {_reason(exc)}"
                ) from exc
        self.client = cosmos_client
        self._database = None

    @property
    def database(self):
        if self._database is None:
            self._database = self.ensure_database()
        return self._database

    @property
    def partition_key(self) -> PartitionKey:
        return PartitionKey(path=self.config.partition_key_path)

    def ensure_database(self):
        """Create the database if absent and return its proxy."""
        try:
            self._database = self.client.create_database_if_not_exists(
                id=self.config.cosmos_database
            )
        except AzureError as exc:
            raise ProvisioningError(
                f"Cannot create database {self.config.cosmos_database}: {_reason(exc)}"
            ) from exc
        return self._database

    def delete_graph(self) -> bool:
        """
        Delete the graph container.

        Returns:
            True if a container was deleted, False if it was already absent

        Raises:
            ProvisioningError: On any failure other than not-found
        """
        try:
            self.database.delete_container(self.config.cosmos_graph)
        except exceptions.CosmosResourceNotFoundError:
            return False
        except AzureError as exc:
            raise ProvisioningError(
                f"Cannot delete graph {self.config.cosmos_graph}: {_reason(exc)}"
            ) from exc
        return True

    def create_graph(self):
        """Create the graph container with the configured throughput."""
        try:
            return self.database.create_container(
                id=self.config.cosmos_graph,
                partition_key=self.partition_key,
                offer_throughput=self.config.throughput,
            )
        except AzureError as exc:
            raise ProvisioningError(
                f"Cannot create graph {self.config.cosmos_graph}: {_reason(exc)}"
            ) from exc

    def ensure_graph(self):
        """Create the graph container only if it does not exist."""
        try:
            return self.database.create_container_if_not_exists(
                id=self.config.cosmos_graph,
                partition_key=self.partition_key,
                offer_throughput=self.config.throughput,
            )
        except AzureError as exc:
            raise ProvisioningError(
                f"Cannot create graph {self.config.cosmos_graph}: {_reason(exc)}"
            ) from exc

    def reset_graph(self) -> bool:
        """
        Drop and recreate the graph container.

        Returns:
            True if a previous container was deleted
        """
        deleted = self.delete_graph()
        self.create_graph()
        return deleted
