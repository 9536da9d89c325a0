"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``archmap.toml`` only holds
overrides. An empty file is a valid project marker.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from archmap.domain.api_keys import KEY_PREFIX


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = "db/architecture.db"


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    architecture_path: str = "web/data.json"
    features_dir: str = "web"


class ApiKeysConfig(BaseModel):
    """[api_keys] section."""

    model_config = {"frozen": True}

    prefix: str = KEY_PREFIX
    default_scopes: list[str] = Field(default_factory=lambda: ["read"])


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    tree_depth: int = 1
    neighbourhood_hops: int = 1
