#!/usr/bin/env python3
"""
Migrate a Neo4j property graph into an Azure Cosmos DB Gremlin graph.

Phases (strictly ordered):
  1. Ensure the Cosmos database exists
  2. Reset the graph container (drop previous migration state)
  3. Load vertices  - read all nodes, encode + execute with a worker pool
  4. Load edges     - same, only after every vertex has been written

Edges reference vertices by id, so the vertex phase is a barrier: no edge
statement is submitted until the vertex pool has fully drained. Within a
phase there is no ordering. A failed statement does not stop its siblings;
failures are collected and the phase raises once every worker is done.

Usage:
  neo2cosmos migrate [--workers 4] [--graph Northwind] [--dry-run] [--json]
  python -m neo2cosmos.migrate [options]

Environment Variables:
  COSMOS_ENDPOINT, COSMOS_AUTH_KEY (required), COSMOS_GREMLIN_ENDPOINT
  COSMOS_DATABASE (default: graphdb), COSMOS_GRAPH (default: Northwind)
  COSMOS_THROUGHPUT (default: 400), COSMOS_PARTITION_KEY (default: /id)
  NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD, NEO4J_DATABASE
  MIGRATION_WORKERS (default: 4), RESET_STRATEGY (recreate | drop)
"""

import argparse
import json
import sys
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence

from neo2cosmos.cosmos.executor import GremlinExecutor, open_gremlin_client
from neo2cosmos.cosmos.provision import GraphProvisioner
from neo2cosmos.errors import ConfigError, MigrationError, PhaseFailedError
from neo2cosmos.graph.encoder import encode_edge, encode_vertex
from neo2cosmos.graph.reader import SourceReader
from neo2cosmos.utils.config import RESET_STRATEGIES, MigrationConfig, get_config

__all__ = ["Migrator", "PhaseReport", "MigrationReport", "run_migration", "main"]


@dataclass
class PhaseReport:
    """Outcome of one load phase."""
    name: str
    total: int = 0
    succeeded: int = 0
    failures: list = field(default_factory=list)  # (statement, error message)
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": len(self.failures),
            "failures": [{"statement": s, "error": e} for s, e in self.failures],
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


@dataclass
class MigrationReport:
    """Outcome of a full run."""
    dry_run: bool = False
    reset: str = ""
    phases: List[PhaseReport] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error and all(phase.ok for phase in self.phases)

    def to_dict(self) -> dict:
        return {
            "status": "ok" if self.ok else "failed",
            "dry_run": self.dry_run,
            "reset": self.reset,
            "phases": [phase.to_dict() for phase in self.phases],
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "error": self.error or None,
        }


def _default_executor_factory(config: MigrationConfig) -> GremlinExecutor:
    return GremlinExecutor(open_gremlin_client(config))


class Migrator:
    """
    Runs one full migration: reset, vertices, edges.

    Collaborators default to the real Neo4j/Cosmos implementations and can
    be replaced for tests or alternate stores:
        reader: read_vertices() / read_edges()
        provisioner: ensure_database() / reset_graph() / ensure_graph()
        executor_factory: config -> object with execute(), drop_all(), close()
    """

    def __init__(
        self,
        config: MigrationConfig,
        reader=None,
        provisioner=None,
        executor_factory: Optional[Callable] = None,
        dry_run: bool = False,
        verbose: bool = True,
    ):
        self.config = config
        self.reader = reader or SourceReader(config)
        self.dry_run = dry_run
        self.verbose = verbose
        self._provisioner = provisioner
        self.executor_factory = executor_factory or _default_executor_factory
        self.report = MigrationReport(dry_run=dry_run)

    @property
    def provisioner(self):
        if self._provisioner is None:
            self._provisioner = GraphProvisioner(self.config)
        return self._provisioner

    def _log(self, message: str = ""):
        if self.verbose:
            print(message)

    def prepare_destination(self):
        """Ensure the database, clear previous state and return an executor."""
        self._log(f"\nPreparing {self.config.cosmos_database}/{self.config.cosmos_graph}...")
        self.provisioner.ensure_database()

        if self.config.reset_strategy == "recreate":
            deleted = self.provisioner.reset_graph()
            self.report.reset = "recreated" if deleted else "created"
            self._log(f"  Graph {'recreated' if deleted else 'created'} "
                      f"({self.config.throughput} RU/s)")
            return self.executor_factory(self.config)

        self.provisioner.ensure_graph()
        executor = self.executor_factory(self.config)
        try:
            executor.drop_all()
        except MigrationError:
            executor.close()
            raise
        self.report.reset = "dropped"
        self._log("  Existing vertices and edges dropped")
        return executor

    def _migrate_one(self, entity, encode: Callable, executor) -> str:
        started = time.monotonic()
        statement = encode(entity)
        if executor is not None:
            executor.execute(statement)
        elapsed_ms = (time.monotonic() - started) * 1000
        self._log(f"  {statement}  [{elapsed_ms:.1f} ms]")
        return statement

    def run_phase(self, name: str, entities: Sequence, encode: Callable, executor) -> PhaseReport:
        """
        Encode and execute every entity with a bounded worker pool.

        Blocks until all workers finish. Failures don't cancel siblings;
        once the pool drains, PhaseFailedError is raised chained to the
        first failure (in submission order).

        Raises:
            PhaseFailedError: If any entity failed
        """
        report = PhaseReport(name=name, total=len(entities))
        self.report.phases.append(report)
        self._log(f"\nMigrating {name} ({len(entities):,})...")

        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            futures = [pool.submit(self._migrate_one, entity, encode, executor)
                       for entity in entities]
            wait(futures)
        report.elapsed_seconds = time.monotonic() - started

        first_error = None
        for future in futures:
            exc = future.exception()
            if exc is None:
                report.succeeded += 1
                continue
            statement = getattr(exc, "statement", None)
            report.failures.append((statement, str(exc)))
            print(f"  FAILED: {exc}", file=sys.stderr)
            if first_error is None:
                first_error = exc

        self._log(f"  {report.succeeded:,}/{report.total:,} {name} in {report.elapsed_seconds:.2f}s")

        if first_error is not None:
            raise PhaseFailedError(report) from first_error
        return report

    def run(self) -> MigrationReport:
        """
        Run every phase in order.

        Returns:
            MigrationReport with one PhaseReport per phase

        Raises:
            SourceReadError, ProvisioningError, DestinationConnectionError:
                Fatal setup/read failures
            PhaseFailedError: If any vertex or edge failed to migrate
        """
        self.report = MigrationReport(dry_run=self.dry_run)
        started = time.monotonic()

        executor = None
        if self.dry_run:
            self.report.reset = "skipped"
            self._log("\nDry run: statements are encoded but not executed")
        else:
            executor = self.prepare_destination()

        try:
            vertices = self.reader.read_vertices()
            self.run_phase("vertices", vertices, encode_vertex, executor)

            edges = self.reader.read_edges()
            self.run_phase("edges", edges, encode_edge, executor)
        finally:
            self.report.elapsed_seconds = time.monotonic() - started
            if executor is not None:
                executor.close()

        self._log(f"\nMigration finished in {self.report.elapsed_seconds:.2f}s")
        return self.report


def run_migration(config: Optional[MigrationConfig] = None, dry_run: bool = False,
                  verbose: bool = True) -> MigrationReport:
    """Run a migration with the real Neo4j source and Cosmos destination."""
    return Migrator(config or get_config(), dry_run=dry_run, verbose=verbose).run()


def build_config(args) -> MigrationConfig:
    """Load config from the environment and apply CLI overrides."""
    config = get_config()
    overrides = {
        "workers": args.workers,
        "cosmos_database": args.database,
        "cosmos_graph": args.graph,
        "throughput": args.throughput,
        "partition_key_path": args.partition_key,
        "reset_strategy": args.reset_strategy,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **overrides) if overrides else config


def print_summary(report: MigrationReport):
    print("\n" + "=" * 60)
    print("MIGRATION SUMMARY")
    print("=" * 60)
    print(f"Reset: {report.reset}")
    for phase in report.phases:
        print(f"  {phase.name:<10} {phase.succeeded:>8,} ok  {len(phase.failures):>6,} failed  "
              f"{phase.elapsed_seconds:8.2f}s")
    print(f"Total elapsed: {report.elapsed_seconds:.2f}s")
    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Migrate a Neo4j graph into a Cosmos DB Gremlin graph")
    parser.add_argument("--workers", type=int, help="Concurrent statements per phase (default: 4)")
    parser.add_argument("--database", help="Cosmos database id (default: graphdb)")
    parser.add_argument("--graph", help="Cosmos graph container id (default: Northwind)")
    parser.add_argument("--throughput", type=int, help="Container throughput in RU/s (default: 400)")
    parser.add_argument("--partition-key", help="Partition key path for a new graph container (default: /id)")
    parser.add_argument("--reset-strategy", choices=RESET_STRATEGIES,
                        help="recreate: delete and recreate the container; drop: g.V().drop()")
    parser.add_argument("--dry-run", action="store_true", help="Encode statements without executing them")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the summary")
    parser.add_argument("--json", action="store_true", help="Print the run report as JSON")
    args = parser.parse_args()

    try:
        config = build_config(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)

    verbose = not args.quiet and not args.json
    if verbose:
        print("=" * 60)
        print("NEO4J -> COSMOS GRAPH MIGRATION")
        print("=" * 60)
        for key, value in config.describe().items():
            print(f"{key}: {value}")

    migrator = Migrator(config, dry_run=args.dry_run, verbose=verbose)
    exit_code = 0
    try:
        report = migrator.run()
    except MigrationError as exc:
        print(f"\nError: {exc}", file=sys.stderr)
        report = migrator.report
        report.error = str(exc)
        exit_code = 1

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print_summary(report)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
