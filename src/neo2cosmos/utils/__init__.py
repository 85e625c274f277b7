"""
Shared utilities for the neo2cosmos package.

This module provides common functionality used across the package:
- config: Immutable migration settings loaded from the environment
- neo4j: Source driver and session management
"""

from neo2cosmos.utils.config import MigrationConfig, get_config
from neo2cosmos.utils.neo4j import get_driver, get_session

__all__ = [
    "MigrationConfig",
    "get_config",
    "get_driver",
    "get_session",
]
