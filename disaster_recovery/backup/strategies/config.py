"""Configuration component: a redacted JSON snapshot."""

import json
from pathlib import Path

from ..._utils import logger
from ...config import RecoveryConfig
from ..models import BackupComponent, ComponentType, RestoreOptions
from .base import ComponentStrategy

CONFIG_FILENAME = "config.json"


class ConfigStrategy(ComponentStrategy):
    """Snapshot non-secret configuration; never compressed or encrypted."""

    component_type = ComponentType.CONFIG

    def __init__(self, config: RecoveryConfig):
        super().__init__()
        self.config = config

    async def backup(self, backup_id: str, dest_dir: Path) -> BackupComponent:
        config_path = dest_dir / CONFIG_FILENAME
        with open(config_path, "w") as f:
            json.dump(self.config.to_snapshot(), f, indent=2, sort_keys=True)

        logger.info(f"Configuration snapshot stored for {backup_id}: {config_path}")
        return self.describe(config_path)

    async def restore(self, component: BackupComponent, options: RestoreOptions) -> None:
        """Parse the snapshot without applying it.

        Configuration comes from the deployment environment, so restoring it is
        advisory: the snapshot is validated and reported, nothing is changed.
        """
        logger.info(f"Restoring configuration from backup: {component.path}")

        async with self.plaintext(component) as config_path:
            with open(config_path, "r") as f:
                snapshot = json.load(f)

        logger.warning(
            f"Configuration restore is advisory only; {len(snapshot)} top-level settings "
            f"from {component.path} were not applied"
        )
