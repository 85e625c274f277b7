#!/usr/bin/env python3
"""
Verify a migration by comparing source and destination counts.

Compares Neo4j node/relationship counts with Cosmos vertex/edge counts.
Counts matching is necessary but not sufficient: it does not compare
property content.

Usage:
  neo2cosmos verify [--json]
"""

import argparse
import json
import sys

from neo2cosmos.cosmos.executor import GremlinExecutor, open_gremlin_client
from neo2cosmos.errors import ConfigError, MigrationError
from neo2cosmos.graph.reader import SourceReader
from neo2cosmos.utils.config import MigrationConfig, get_config

__all__ = ["run_verification", "main"]


def run_verification(config: MigrationConfig, reader=None, executor=None,
                     verbose: bool = True) -> dict:
    """
    Count entities on both sides.

    Returns:
        Dict with source/destination counts and a "status" of match/mismatch
    """
    reader = reader or SourceReader(config)
    owns_executor = executor is None
    if owns_executor:
        executor = GremlinExecutor(open_gremlin_client(config))

    try:
        source_nodes = reader.count_nodes()
        source_relationships = reader.count_relationships()
        target_vertices = executor.count_vertices()
        target_edges = executor.count_edges()
    finally:
        if owns_executor:
            executor.close()

    matched = source_nodes == target_vertices and source_relationships == target_edges
    results = {
        "status": "match" if matched else "mismatch",
        "source_nodes": source_nodes,
        "source_relationships": source_relationships,
        "target_vertices": target_vertices,
        "target_edges": target_edges,
    }

    if verbose:
        print("\n" + "=" * 60)
        print("VERIFICATION")
        print("=" * 60)
        print(f"Nodes:         {source_nodes:,} -> {target_vertices:,} vertices")
        print(f"Relationships: {source_relationships:,} -> {target_edges:,} edges")
        print(f"Status: {results['status']}")
        print("=" * 60)

    return results


def main():
    parser = argparse.ArgumentParser(description="Compare Neo4j and Cosmos graph counts")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args()

    try:
        config = get_config()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        results = run_verification(config, verbose=not args.json)
    except MigrationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(results, indent=2))

    sys.exit(0 if results["status"] == "match" else 1)


if __name__ == "__main__":
    main()
