"""SQLite database engine and schema via SQLAlchemy Core."""

from archmap.infrastructure.database.engine import create_db_engine, init_database
from archmap.infrastructure.database.schema import (
    api_keys,
    edges,
    features,
    metadata,
    node_versions,
    nodes,
)

__all__ = [
    "api_keys",
    "create_db_engine",
    "edges",
    "features",
    "init_database",
    "metadata",
    "node_versions",
    "nodes",
]
