"""Restore backups component by component."""

from typing import Dict

from .._utils import epoch_millis, logger
from .errors import RestoreError, VerificationFailure
from .manager import BackupManager
from .models import BackupTrigger, ComponentType, RestoreOptions
from .store import ManifestStore
from .strategies import ComponentStrategy
from .verify import BackupVerifier


class RestoreManager:
    """Apply a stored backup to the live system.

    Components are restored in the order the caller lists them. A restore never
    runs against a backup that failed a requested pre-verification.
    """

    def __init__(
        self,
        store: ManifestStore,
        strategies: Dict[ComponentType, ComponentStrategy],
        verifier: BackupVerifier,
        backups: BackupManager,
    ):
        self.store = store
        self.strategies = strategies
        self.verifier = verifier
        self.backups = backups

    async def restore_backup(self, backup_id: str, options: RestoreOptions) -> bool:
        """Restore selected components of a backup.

        Args:
            backup_id: Backup to restore
            options: Components, order, mode and safety switches

        Returns:
            True once every requested component present in the backup is restored

        Raises:
            NotFoundError: No manifest for ``backup_id``
            VerificationFailure: Pre-verification was requested and failed
            RestoreError: A component restore failed; later components were skipped
        """
        manifest = await self.store.load(backup_id)
        components = [c.value for c in options.components]
        logger.info(
            f"Starting backup restore: {backup_id}",
            extra={
                "backup_id": backup_id,
                "target_environment": options.target_environment,
                "components": components,
                "operation_type": "restore_start",
            },
        )

        if options.verify_before_restore:
            if not await self.verifier.verify_backup(backup_id):
                manifest = await self.store.load(backup_id)
                logger.error(
                    f"Backup restore aborted, verification failed: {backup_id}",
                    extra={"backup_id": backup_id, "operation_type": "restore_failed"},
                )
                raise VerificationFailure(backup_id, manifest.verification.issues)
            manifest = await self.store.load(backup_id)

        if options.create_backup_before_restore:
            safety_id = await self.backups.create_full_backup(
                f"pre_restore_{epoch_millis()}",
                {"trigger": BackupTrigger.MANUAL, "created_by": "restore_system"},
            )
            logger.info(f"Safety backup {safety_id} created before restoring {backup_id}")

        for component_type in options.components:
            component = manifest.get_component(component_type)
            if component is None:
                logger.warning(
                    f"Component {component_type.value} not found in backup",
                    extra={"backup_id": backup_id, "component": component_type.value},
                )
                continue

            try:
                await self.strategies[component_type].restore(component, options)
            except Exception as e:
                logger.error(
                    f"Backup restore failed: {backup_id} ({component_type.value}): {e}",
                    exc_info=True,
                    extra={
                        "backup_id": backup_id,
                        "component": component_type.value,
                        "operation_type": "restore_failed",
                    },
                )
                raise RestoreError(backup_id, component_type.value, str(e)) from e

        logger.info(
            f"Backup restore completed: {backup_id}",
            extra={
                "backup_id": backup_id,
                "target_environment": options.target_environment,
                "components": components,
                "operation_type": "restore_complete",
            },
        )
        return True
