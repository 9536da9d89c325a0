"""SQLAlchemy Core table definitions for the archmap database.

Child tables reference ``nodes.id`` with ``ON DELETE CASCADE``; the
services still delete owned rows explicitly so in-memory repositories
behave the same way.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

nodes = Table(
    "nodes",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("type", Text, nullable=False),
    Column("layer", Text),
    Column("color", Text),
    Column("icon", Text),
    Column("description", Text),
    Column("tags", Text),  # JSON array
    Column("sort_order", Integer, default=0, server_default="0"),
    Column("current_version", Text),
)

edges = Table(
    "edges",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source_id", Text, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
    Column("target_id", Text, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
    Column("type", Text, nullable=False),
    Column("label", Text),
    Column("metadata", Text),
    UniqueConstraint("source_id", "target_id", "type", name="edges_source_target_type"),
)

node_versions = Table(
    "node_versions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("node_id", Text, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
    Column("version", Text, nullable=False),
    Column("content", Text),
    Column("progress", Integer, default=0, server_default="0"),
    Column("status", Text, default="planned", server_default="planned"),
    Column("updated_at", Text),
    UniqueConstraint("node_id", "version", name="node_versions_node_version"),
)

features = Table(
    "features",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("node_id", Text, ForeignKey("nodes.id", ondelete="CASCADE"), nullable=False),
    Column("version", Text, nullable=False),
    Column("filename", Text, nullable=False),
    Column("title", Text, nullable=False),
    Column("content", Text),
    Column("step_count", Integer, default=0, server_default="0"),
    Column("updated_at", Text),
    UniqueConstraint("node_id", "version", "filename", name="features_node_version_filename"),
)

api_keys = Table(
    "api_keys",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("key_hash", Text, nullable=False),
    Column("salt", Text, nullable=False),
    Column("scopes", Text, nullable=False),  # JSON array
    Column("created_at", Text, nullable=False),
    Column("expires_at", Text),
    Column("last_used_at", Text),
    Column("is_active", Integer, nullable=False, default=1, server_default="1"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_nodes_type", nodes.c.type)
Index("ix_nodes_layer", nodes.c.layer)
Index("ix_edges_source", edges.c.source_id)
Index("ix_edges_target", edges.c.target_id)
Index("ix_edges_type", edges.c.type)
Index("ix_features_node_version", features.c.node_id, features.c.version)
