"""Pytest configuration and shared fixtures."""

import os
import threading

import pytest

from neo2cosmos.errors import StatementExecutionError
from neo2cosmos.utils.config import MigrationConfig


# =============================================================================
# Neo4j fakes
# =============================================================================

class FakeNode:
    """Stands in for neo4j.graph.Node."""

    def __init__(self, element_id, labels, properties=None):
        self.element_id = element_id
        self.labels = frozenset(labels)
        self._properties = dict(properties or {})

    def items(self):
        return self._properties.items()


class FakeRelationship:
    """Stands in for neo4j.graph.Relationship."""

    def __init__(self, element_id, rel_type, start_node, end_node, properties=None):
        self.element_id = element_id
        self.type = rel_type
        self.start_node = start_node
        self.end_node = end_node
        self._properties = dict(properties or {})

    def items(self):
        return self._properties.items()


class FakeResult:
    def __init__(self, records):
        self.records = list(records)

    def __iter__(self):
        return iter(self.records)

    def single(self):
        return self.records[0] if self.records else None


class FakeSession:
    def __init__(self, driver, database):
        self.driver = driver
        self.database = database

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.driver.sessions_closed += 1
        return False

    def run(self, query):
        self.driver.queries.append(query)
        if self.driver.error is not None:
            raise self.driver.error
        return FakeResult(self.driver.rows.get(query, []))


class FakeDriver:
    """Neo4j driver returning canned rows per query."""

    def __init__(self, rows=None, error=None):
        self.rows = rows or {}
        self.error = error
        self.queries = []
        self.databases = []
        self.sessions_closed = 0
        self.closed = False

    def session(self, database=None):
        self.databases.append(database)
        return FakeSession(self, database)

    def close(self):
        self.closed = True


# =============================================================================
# Gremlin fakes
# =============================================================================

class FakeResultSet:
    """Paged result set; counts how many pages were fetched."""

    def __init__(self, pages, error=None):
        self.pages = list(pages)
        self.error = error
        self.fetches = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.error is not None and self.fetches == len(self.pages):
            raise self.error
        if self.fetches >= len(self.pages):
            raise StopIteration
        page = self.pages[self.fetches]
        self.fetches += 1
        return page


class FakeGremlinClient:
    def __init__(self, pages=None, error=None):
        self.pages = pages if pages is not None else [[{"id": "v"}]]
        self.error = error
        self.submitted = []
        self.result_sets = []
        self.closed = False

    def submit(self, statement):
        self.submitted.append(statement)
        result_set = FakeResultSet(self.pages, self.error)
        self.result_sets.append(result_set)
        return result_set

    def close(self):
        self.closed = True


class InMemoryGraph:
    """
    Destination store shared across runs.

    Applies encoded statements well enough to check migration outcomes:
    addV records a vertex, addE requires both endpoints to exist.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.vertices = {}
        self.edges = []
        self.statements = []
        self.exists = False

    def clear(self):
        with self.lock:
            self.vertices.clear()
            self.edges.clear()


class RecordingExecutor:
    """Executor writing into an InMemoryGraph; fails on chosen statements."""

    def __init__(self, graph, fail_on=()):
        self.graph = graph
        self.fail_on = set(fail_on)
        self.closed = False

    def execute(self, statement):
        with self.graph.lock:
            self.graph.statements.append(statement)
        if statement in self.fail_on:
            raise StatementExecutionError(statement, "Request rate is large")
        if statement.startswith("g.addV("):
            vertex_id = statement.split(".property('id','", 1)[1].split("'", 1)[0]
            with self.graph.lock:
                self.graph.vertices[vertex_id] = statement
        elif statement.startswith("g.V("):
            start = statement[len("g.V('"):].split("'", 1)[0]
            end = statement.rsplit(".to(g.V('", 1)[1].split("'", 1)[0]
            with self.graph.lock:
                if start not in self.graph.vertices or end not in self.graph.vertices:
                    raise StatementExecutionError(statement, "vertex not found")
                self.graph.edges.append((start, end, statement))
        return 1

    def drop_all(self):
        self.graph.clear()
        return 1

    def count_vertices(self):
        return len(self.graph.vertices)

    def count_edges(self):
        return len(self.graph.edges)

    def close(self):
        self.closed = True


class FakeProvisioner:
    def __init__(self, graph):
        self.graph = graph
        self.calls = []

    def ensure_database(self):
        self.calls.append("ensure_database")

    def reset_graph(self):
        self.calls.append("reset_graph")
        existed = self.graph.exists
        self.graph.clear()
        self.graph.exists = True
        return existed

    def ensure_graph(self):
        self.calls.append("ensure_graph")
        self.graph.exists = True


class StaticReader:
    def __init__(self, vertices, edges):
        self.vertices = list(vertices)
        self.edges = list(edges)
        self.calls = []

    def read_vertices(self):
        self.calls.append("read_vertices")
        return list(self.vertices)

    def read_edges(self):
        self.calls.append("read_edges")
        return list(self.edges)

    def count_nodes(self):
        return len(self.vertices)

    def count_relationships(self):
        return len(self.edges)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def migration_config():
    """Configuration pointing at a fake Cosmos account."""
    return MigrationConfig(
        cosmos_endpoint="https://example.documents.azure.com:443/",
        cosmos_auth_key="c2VjcmV0",
        gremlin_endpoint="wss://example.gremlin.cosmos.azure.com:443/",
        workers=4,
    )


@pytest.fixture
def memory_graph():
    return InMemoryGraph()


@pytest.fixture
def neo4j_config():
    """Neo4j configuration for testing."""
    return {
        "uri": os.environ.get("NEO4J_URI", "bolt://localhost:7687"),
        "user": os.environ.get("NEO4J_USER", "neo4j"),
        "password": os.environ.get("NEO4J_PASSWORD", "password"),
        "database": os.environ.get("NEO4J_DATABASE", "neo4j"),
    }


@pytest.fixture
def skip_without_neo4j(neo4j_config):
    """Skip test if Neo4j is not available."""
    try:
        from neo4j import GraphDatabase
        driver = GraphDatabase.driver(
            neo4j_config["uri"],
            auth=(neo4j_config["user"], neo4j_config["password"])
        )
        driver.verify_connectivity()
        driver.close()
    except Exception:
        pytest.skip("Neo4j not available")
