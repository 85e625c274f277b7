"""
Error taxonomy for a migration run.

Every failure the engine raises derives from MigrationError so the CLI
can map it to an exit code:
- ConfigError: missing or invalid settings (fatal at startup)
- SourceReadError: Neo4j connectivity or query failure (fatal)
- ProvisioningError: database/container setup failure (fatal)
- DestinationConnectionError: the Gremlin client cannot be opened (fatal)
- StatementExecutionError: a single Gremlin statement failed
- PhaseFailedError: one or more entities failed inside a phase
"""

__all__ = [
    "MigrationError",
    "ConfigError",
    "SourceReadError",
    "ProvisioningError",
    "DestinationConnectionError",
    "StatementExecutionError",
    "PhaseFailedError",
]


class MigrationError(Exception):
    """Base class for all migration failures."""


class ConfigError(MigrationError):
    """Raised when required configuration is missing or invalid."""


class SourceReadError(MigrationError):
    """Raised when reading from the Neo4j source fails."""


class ProvisioningError(MigrationError):
    """Raised when the Cosmos database or graph container cannot be set up."""


class DestinationConnectionError(MigrationError):
    """Raised when a Gremlin client for the destination graph cannot be opened."""


class StatementExecutionError(MigrationError):
    """Raised when a Gremlin statement fails on the destination."""

    def __init__(self, statement: str, message: str):
        super().__init__(f"{message} (statement: {statement})")
        self.statement = statement


class PhaseFailedError(MigrationError):
    """Raised after a phase barrier when at least one entity failed."""

    def __init__(self, report):
        failed = len(report.failures)
        super().__init__(
            f"{report.name} phase failed: {failed} of {report.total} entities did not migrate"
        )
        self.report = report
