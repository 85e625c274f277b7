"""Tests for reading the Neo4j source."""

import pytest
from neo4j.exceptions import ServiceUnavailable

from conftest import FakeDriver, FakeNode, FakeRelationship
from neo2cosmos.errors import SourceReadError
from neo2cosmos.graph.models import Edge, Vertex
from neo2cosmos.graph.reader import (
    EDGE_QUERY,
    VERTEX_QUERY,
    SourceReader,
    edge_from_relationship,
    vertex_from_node,
)


def make_reader(config, driver):
    drivers = []

    def factory(_config):
        drivers.append(driver)
        return driver

    reader = SourceReader(config, driver_factory=factory)
    reader.drivers = drivers
    return reader


class TestVertexFromNode:
    """Tests for vertex_from_node mapping."""

    def test_driver_node(self):
        node = FakeNode("4:db:1", ["Person"], {"name": "Alice", "age": 30})
        vertex = vertex_from_node(node)
        assert vertex == Vertex(labels=("Person",), id="4:db:1",
                                properties={"name": "Alice", "age": 30})

    def test_driver_labels_sorted(self):
        """Driver labels are unordered; sorting keeps the primary label stable."""
        node = FakeNode("1", ["Person", "Employee"])
        assert vertex_from_node(node).labels == ("Employee", "Person")

    def test_mapping_row(self):
        row = {"labels": ["Person", "Admin"], "id": 1, "properties": {"name": "Bob"}}
        vertex = vertex_from_node(row)
        assert vertex.labels == ("Person", "Admin")
        assert vertex.id == "1"

    def test_no_labels_rejected(self):
        with pytest.raises(SourceReadError, match="no labels"):
            vertex_from_node(FakeNode("1", []))

    def test_missing_id_rejected(self):
        with pytest.raises(SourceReadError):
            vertex_from_node({"labels": ["Person"]})

    def test_unsupported_row(self):
        with pytest.raises(SourceReadError):
            vertex_from_node(42)


class TestEdgeFromRelationship:
    """Tests for edge_from_relationship mapping."""

    def test_driver_relationship(self):
        alice = FakeNode("1", ["Person"])
        bob = FakeNode("2", ["Person"])
        rel = FakeRelationship("5:db:9", "KNOWS", alice, bob, {"since": 2020})
        assert edge_from_relationship(rel) == Edge(
            type="KNOWS", start_node_id="1", end_node_id="2", properties={"since": 2020}
        )

    def test_mapping_row(self):
        row = {"type": "OWNS", "start_node_id": 3, "end_node_id": 4}
        edge = edge_from_relationship(row)
        assert (edge.start_node_id, edge.end_node_id) == ("3", "4")
        assert edge.properties == {}

    def test_missing_endpoint_rejected(self):
        with pytest.raises(SourceReadError, match="endpoint"):
            edge_from_relationship({"type": "OWNS", "start_node_id": "1"})

    def test_empty_type_rejected(self):
        with pytest.raises(SourceReadError, match="no type"):
            edge_from_relationship({"type": "", "start_node_id": "1", "end_node_id": "2"})


class TestSourceReader:
    """Tests for SourceReader."""

    def test_read_vertices(self, migration_config):
        driver = FakeDriver(rows={VERTEX_QUERY: [
            {"n": FakeNode("1", ["Person"], {"name": "Alice"})},
            {"n": FakeNode("2", ["Person"], {"name": "Bob"})},
        ]})
        vertices = make_reader(migration_config, driver).read_vertices()
        assert [v.id for v in vertices] == ["1", "2"]
        assert driver.queries == ["MATCH (n) RETURN n"]
        assert driver.databases == ["neo4j"]

    def test_read_edges(self, migration_config):
        a, b = FakeNode("1", ["P"]), FakeNode("2", ["P"])
        driver = FakeDriver(rows={EDGE_QUERY: [{"r": FakeRelationship("r1", "KNOWS", a, b)}]})
        edges = make_reader(migration_config, driver).read_edges()
        assert edges == [Edge(type="KNOWS", start_node_id="1", end_node_id="2")]
        assert driver.queries == ["MATCH (a)-[r]->(b) RETURN r"]

    def test_connection_closed_after_read(self, migration_config):
        driver = FakeDriver()
        make_reader(migration_config, driver).read_vertices()
        assert driver.sessions_closed == 1
        assert driver.closed

    def test_fresh_driver_per_read(self, migration_config):
        driver = FakeDriver()
        reader = make_reader(migration_config, driver)
        reader.read_vertices()
        reader.read_edges()
        assert len(reader.drivers) == 2

    def test_query_failure_wrapped_and_connection_closed(self, migration_config):
        driver = FakeDriver(error=ServiceUnavailable("connection refused"))
        with pytest.raises(SourceReadError, match="connection refused"):
            make_reader(migration_config, driver).read_vertices()
        assert driver.sessions_closed == 1
        assert driver.closed

    def test_connect_failure_wrapped(self, migration_config):
        def factory(_config):
            raise ServiceUnavailable("no route")

        with pytest.raises(SourceReadError, match="no route"):
            SourceReader(migration_config, driver_factory=factory).read_edges()

    def test_bad_row_closes_connection(self, migration_config):
        driver = FakeDriver(rows={VERTEX_QUERY: [{"n": FakeNode("1", [])}]})
        with pytest.raises(SourceReadError):
            make_reader(migration_config, driver).read_vertices()
        assert driver.closed

    def test_counts(self, migration_config):
        driver = FakeDriver(rows={
            "MATCH (n) RETURN count(n) AS count": [{"count": 3}],
            "MATCH ()-[r]->() RETURN count(r) AS count": [{"count": 2}],
        })
        reader = make_reader(migration_config, driver)
        assert reader.count_nodes() == 3
        assert reader.count_relationships() == 2


class TestLiveNeo4j:
    """Smoke test against a running Neo4j (skipped when unavailable)."""

    def test_read_vertices_live(self, skip_without_neo4j, neo4j_config, migration_config):
        import dataclasses
        config = dataclasses.replace(
            migration_config,
            neo4j_uri=neo4j_config["uri"],
            neo4j_user=neo4j_config["user"],
            neo4j_password=neo4j_config["password"],
            neo4j_database=neo4j_config["database"],
        )
        vertices = SourceReader(config).read_vertices()
        assert isinstance(vertices, list)
        assert all(v.labels for v in vertices)
