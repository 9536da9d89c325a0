"""InitService: create a new archmap project.

Writes ``archmap.toml`` at the project root, creates the SQLite
database, stamps it at the current migration head, and optionally seeds
the initial layers.
"""

from __future__ import annotations

import logging
from pathlib import Path

from archmap.config.discovery import CONFIG_FILENAME
from archmap.config.models import DatabaseConfig, ExportConfig
from archmap.config.settings import ArchSettings
from archmap.infrastructure.store import ArchitectureStore
from archmap.services._helpers import fail
from archmap.services.components import ComponentService
from archmap.services.result import ServiceResult
from archmap.services.upgrade import UpgradeService

logger = logging.getLogger(__name__)

_CONFIG_TEMPLATE = """\
# archmap project configuration

[database]
path = "{db_path}"

[export]
architecture_path = "{architecture_path}"
features_dir = "{features_dir}"

[graph]
tree_depth = 1
neighbourhood_hops = 1
"""


class InitService:
    """Project scaffolding; runs before any store exists."""

    @staticmethod
    def init_project(
        root: Path,
        *,
        db_path: str | None = None,
        layers: list[tuple[str, str]] | None = None,
    ) -> ServiceResult:
        """Create config, database, and optional ``(id, name)`` layers under *root*.

        An existing ``archmap.toml`` is left untouched and reported as a
        warning; the database is created only if it is missing.
        """
        op = "init_project"
        warnings: list[str] = []
        config_path = root / CONFIG_FILENAME
        try:
            root.mkdir(parents=True, exist_ok=True)
            if config_path.exists():
                warnings.append(f"{CONFIG_FILENAME} already exists; leaving it unchanged")
            else:
                export = ExportConfig()
                config_path.write_text(
                    _CONFIG_TEMPLATE.format(
                        db_path=db_path or DatabaseConfig().path,
                        architecture_path=export.architecture_path,
                        features_dir=export.features_dir,
                    ),
                    encoding="utf-8",
                )
        except OSError as exc:
            return fail(op, "INIT_FAILED", f"Cannot write {config_path}: {exc}")

        settings = ArchSettings.from_cli(config_path=str(config_path), project_root=root)
        store = ArchitectureStore(settings)
        try:
            stamped = UpgradeService(store).stamp_current()
            if not stamped.ok:
                return stamped

            created: list[str] = []
            components = ComponentService(store.repos)
            for sort_order, (layer_id, name) in enumerate(layers or []):
                result = components.create_layer(layer_id, name, sort_order=sort_order)
                if result.ok:
                    created.append(layer_id)
                else:
                    warnings.append(f"Layer {layer_id}: {result.error.message}")  # type: ignore[union-attr]
        finally:
            store.dispose()

        logger.info("Initialized archmap project at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "project_root": str(root),
                "config_path": str(config_path),
                "db_path": str(settings.db_path),
                "revision": stamped.data.get("current"),
                "layers": created,
            },
            warnings=warnings,
        )
