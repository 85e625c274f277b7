"""
Neo4j connection utilities.

Provides driver and session creation for reading the source graph.
"""

from neo4j import GraphDatabase

from neo2cosmos.utils.config import MigrationConfig

__all__ = ["get_driver", "get_session"]


def get_driver(config: MigrationConfig):
    """
    Create a Neo4j driver instance.

    Args:
        config: Migration configuration holding the source URI and credentials

    Returns:
        Neo4j driver instance
    """
    return GraphDatabase.driver(
        config.neo4j_uri,
        auth=(config.neo4j_user, config.neo4j_password),
    )


def get_session(driver, config: MigrationConfig):
    """Open a session on the configured source database."""
    return driver.session(database=config.neo4j_database)
