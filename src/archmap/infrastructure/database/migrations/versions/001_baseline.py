"""Baseline schema: nodes, edges, versions, features, and API keys.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-18

Databases created by ``archmap init`` are stamped at this revision
without running it; older databases get it applied during
``archmap upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    # nodes
    op.create_table(
        "nodes",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("type", sa.Text, nullable=False),
        sa.Column("layer", sa.Text),
        sa.Column("color", sa.Text),
        sa.Column("icon", sa.Text),
        sa.Column("description", sa.Text),
        sa.Column("tags", sa.Text),
        sa.Column("sort_order", sa.Integer, server_default="0"),
        sa.Column("current_version", sa.Text),
    )
    op.create_index("ix_nodes_type", "nodes", ["type"])
    op.create_index("ix_nodes_layer", "nodes", ["layer"])

    # edges
    op.create_table(
        "edges",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "source_id",
            sa.Text,
            sa.ForeignKey("nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "target_id",
            sa.Text,
            sa.ForeignKey("nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.Text, nullable=False),
        sa.Column("label", sa.Text),
        sa.Column("metadata", sa.Text),
        sa.UniqueConstraint("source_id", "target_id", "type", name="edges_source_target_type"),
    )
    op.create_index("ix_edges_source", "edges", ["source_id"])
    op.create_index("ix_edges_target", "edges", ["target_id"])
    op.create_index("ix_edges_type", "edges", ["type"])

    # node_versions
    op.create_table(
        "node_versions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "node_id",
            sa.Text,
            sa.ForeignKey("nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Text, nullable=False),
        sa.Column("content", sa.Text),
        sa.Column("progress", sa.Integer, server_default="0"),
        sa.Column("status", sa.Text, server_default="planned"),
        sa.Column("updated_at", sa.Text),
        sa.UniqueConstraint("node_id", "version", name="node_versions_node_version"),
    )

    # features
    op.create_table(
        "features",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "node_id",
            sa.Text,
            sa.ForeignKey("nodes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Text, nullable=False),
        sa.Column("filename", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("content", sa.Text),
        sa.Column("step_count", sa.Integer, server_default="0"),
        sa.Column("updated_at", sa.Text),
        sa.UniqueConstraint(
            "node_id", "version", "filename", name="features_node_version_filename"
        ),
    )
    op.create_index("ix_features_node_version", "features", ["node_id", "version"])

    # api_keys
    op.create_table(
        "api_keys",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("key_hash", sa.Text, nullable=False),
        sa.Column("salt", sa.Text, nullable=False),
        sa.Column("scopes", sa.Text, nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.Column("expires_at", sa.Text),
        sa.Column("last_used_at", sa.Text),
        sa.Column("is_active", sa.Integer, nullable=False, server_default="1"),
    )


def downgrade() -> None:
    op.drop_table("api_keys")
    op.drop_table("features")
    op.drop_table("node_versions")
    op.drop_table("edges")
    op.drop_table("nodes")
