#!/usr/bin/env python3
"""
neo2cosmos CLI - command-line interface for Neo4j to Cosmos DB graph migration.

Usage:
    neo2cosmos migrate               Reset the Cosmos graph and copy every node and relationship
    neo2cosmos migrate --dry-run     Print the Gremlin statements without executing them
    neo2cosmos verify                Compare source and destination counts
"""

import argparse
import sys

from neo2cosmos import __version__


def cmd_migrate(args):
    """Handle migration commands."""
    from neo2cosmos import migrate
    sys.argv = ["migrate"] + args
    migrate.main()


def cmd_verify(args):
    """Handle verification commands."""
    from neo2cosmos import verify
    sys.argv = ["verify"] + args
    verify.main()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="neo2cosmos",
        description="neo2cosmos - Migrate a Neo4j graph into Azure Cosmos DB (Gremlin API)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  migrate    Full migration (reset destination, vertices, then edges)
  verify     Compare node/relationship counts with the destination graph

Examples:
  neo2cosmos migrate --workers 8     Migrate with 8 concurrent statements
  neo2cosmos migrate --dry-run -q    Encode only, print the summary
  neo2cosmos verify --json           Machine-readable count comparison

Configuration comes from COSMOS_ENDPOINT, COSMOS_AUTH_KEY, NEO4J_URI,
NEO4J_USER and NEO4J_PASSWORD (see `neo2cosmos migrate --help`).
""",
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "migrate",
        help="Full migration",
        add_help=False,
    )

    subparsers.add_parser(
        "verify",
        help="Compare source and destination counts",
        add_help=False,
    )

    # Parse only the first argument to get the command
    args, remaining = parser.parse_known_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    handlers = {
        "migrate": cmd_migrate,
        "verify": cmd_verify,
    }

    handler = handlers.get(args.command)
    if handler:
        handler(remaining)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
