"""Backup orchestration across database, files, configuration and logs."""

import platform
import shutil
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .._utils import epoch_millis, logger, utcnow
from ..config import RecoveryConfig
from .errors import BackupError, ComponentBackupError
from .models import (
    BACKUP_ORDER,
    BackupComponent,
    BackupManifest,
    BackupMetadata,
    BackupStatus,
    BackupTrigger,
    BackupType,
    ComponentType,
    RetentionPolicy,
)
from .store import ManifestStore
from .strategies import ComponentStrategy, DatabaseStrategy, FilesStrategy
from .utils import generate_backup_id
from .verify import BackupVerifier

MANIFEST_FORMAT_VERSION = "1.0.0"

Step = Tuple[str, Callable[[], Awaitable[Optional[BackupComponent]]]]


class BackupManager:
    """Create full, incremental and emergency backups.

    The manifest is persisted when the backup starts and again after every
    component, so a crash leaves a partial or failed record instead of nothing.
    """

    def __init__(
        self,
        store: ManifestStore,
        strategies: Dict[ComponentType, ComponentStrategy],
        verifier: BackupVerifier,
        config: RecoveryConfig,
    ):
        """Initialize backup manager.

        Args:
            store: Manifest persistence
            strategies: One strategy per component type
            verifier: Verification run after each backup
            config: Paths, retention defaults and deployment provenance
        """
        missing = [t.value for t in BACKUP_ORDER if t not in strategies]
        if missing:
            raise ValueError(f"Missing component strategies: {missing}")

        self.store = store
        self.strategies = strategies
        self.verifier = verifier
        self.config = config
        self.backup_dir = Path(config.paths.backup_dir)
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    async def create_full_backup(
        self,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Back up every component in fixed order.

        Args:
            name: Optional label, defaults to full_backup_<date>
            metadata: Overrides for the recorded metadata (created_by, trigger, ...)

        Returns:
            Backup id; check the manifest's verification for the verify outcome

        Raises:
            ComponentBackupError: A component failed; the manifest is marked failed
            ValidationError: ``metadata`` names a field BackupMetadata does not have
        """
        return await self._create_full(BackupType.FULL, name, metadata or {})

    async def create_incremental_backup(self, last_backup_id: str, name: Optional[str] = None) -> str:
        """Back up files changed since a previous backup, plus a database dump.

        The database part is always a full dump; only files are incremental.
        When no files changed the manifest has no files component at all.

        Args:
            last_backup_id: Backup the increment is based on
            name: Optional label, defaults to incremental_backup_<date>

        Returns:
            Backup id

        Raises:
            NotFoundError: ``last_backup_id`` has no manifest
            ComponentBackupError: A component failed
        """
        last_manifest = await self.store.load(last_backup_id)

        metadata = last_manifest.metadata.model_copy(
            update={"created_by": "system", "trigger": BackupTrigger.SCHEDULED}
        )
        manifest = self._new_manifest(BackupType.INCREMENTAL, name, metadata)
        logger.info(
            f"Starting incremental backup: {manifest.name}",
            extra={
                "backup_id": manifest.id,
                "last_backup_id": last_backup_id,
                "operation_type": "backup_incremental_start",
            },
        )

        files: FilesStrategy = self.strategies[ComponentType.FILES]
        database: DatabaseStrategy = self.strategies[ComponentType.DATABASE]
        since = last_manifest.timestamp

        await self._run(
            manifest,
            lambda path: [
                ("files", lambda: files.backup_changed_since(manifest.id, path, since)),
                ("database", lambda: database.backup(manifest.id, path)),
            ],
            operation="backup_incremental",
        )
        return manifest.id

    async def create_emergency_backup(self, reason: str) -> str:
        """Full backup taken outside the normal schedule.

        Args:
            reason: Why the backup is needed, logged before it starts

        Returns:
            Backup id
        """
        logger.warning(
            f"Creating emergency backup: {reason}",
            extra={"reason": reason, "operation_type": "backup_emergency_start"},
        )
        return await self._create_full(
            BackupType.EMERGENCY,
            f"emergency_backup_{epoch_millis()}",
            {"trigger": BackupTrigger.DISASTER, "created_by": "emergency_system"},
        )

    async def list_backups(self) -> List[BackupManifest]:
        """List all backups, newest first."""
        return await self.store.list()

    async def get_backup(self, backup_id: str) -> BackupManifest:
        return await self.store.load(backup_id)

    async def delete_backup(self, backup_id: str) -> bool:
        """Delete a backup's artifacts and its manifest.

        Args:
            backup_id: Backup ID to delete

        Returns:
            True if deleted, False if not found
        """
        manifest = await self.store.get(backup_id)
        if manifest is None:
            return False

        artifact_dir = self.backup_dir / backup_id
        if artifact_dir.exists():
            shutil.rmtree(artifact_dir)
        await self.store.delete(backup_id)

        logger.info(f"Deleted backup: {backup_id}", extra={"backup_id": backup_id, "operation_type": "backup_delete"})
        return True

    # Private helper methods

    async def _create_full(self, backup_type: BackupType, name: Optional[str], overrides: Dict[str, Any]) -> str:
        metadata = await self._build_metadata(overrides)
        manifest = self._new_manifest(backup_type, name, metadata)
        logger.info(
            f"Starting {backup_type.value} backup: {manifest.name}",
            extra={"backup_id": manifest.id, "operation_type": "backup_start"},
        )

        await self._run(
            manifest,
            lambda path: [
                (t.value, lambda strategy=self.strategies[t]: strategy.backup(manifest.id, path))
                for t in BACKUP_ORDER
            ],
            operation="backup",
        )
        return manifest.id

    async def _run(
        self,
        manifest: BackupManifest,
        plan: Callable[[Path], List[Step]],
        operation: str,
    ) -> None:
        await self.store.save(manifest)

        phase = "prepare"
        try:
            backup_path = self.backup_dir / manifest.id
            backup_path.mkdir(parents=True, exist_ok=True)

            for phase, step in plan(backup_path):
                component = await step()
                if component is not None:
                    manifest.add_component(component)
                await self.store.save(manifest)

            phase = "finalize"
            manifest.finalize()
            await self.store.save(manifest)
        except Exception as e:
            await self._mark_failed(manifest, phase, e, operation)
            raise ComponentBackupError(manifest.id, phase, str(e)) from e

        await self.verifier.verify_backup(manifest.id)

        logger.info(
            f"Backup completed: {manifest.name} ({manifest.size:,} bytes)",
            extra={
                "backup_id": manifest.id,
                "size": manifest.size,
                "components": len(manifest.components),
                "operation_type": f"{operation}_complete",
            },
        )

    async def _mark_failed(self, manifest: BackupManifest, phase: str, error: Exception, operation: str) -> None:
        manifest.status = BackupStatus.FAILED
        manifest.failure = f"{phase}: {error}"
        try:
            await self.store.save(manifest)
        except OSError as save_error:
            logger.error(f"Could not record failure of backup {manifest.id}: {save_error}")

        logger.error(
            f"Backup failed: {manifest.name} during {phase}: {error}",
            exc_info=not isinstance(error, BackupError),
            extra={"backup_id": manifest.id, "phase": phase, "operation_type": f"{operation}_failed"},
        )

    def _new_manifest(self, backup_type: BackupType, name: Optional[str], metadata: BackupMetadata) -> BackupManifest:
        now = utcnow()
        return BackupManifest(
            id=generate_backup_id(epoch_millis(now)),
            name=name or f"{backup_type.value}_backup_{now.date().isoformat()}",
            type=backup_type,
            timestamp=now,
            metadata=metadata,
            retention=RetentionPolicy.from_config(self.config.retention),
        )

    async def _build_metadata(self, overrides: Dict[str, Any]) -> BackupMetadata:
        deployment = self.config.deployment
        base = BackupMetadata(
            version=MANIFEST_FORMAT_VERSION,
            environment=deployment.environment,
            deployment={
                "project_id": deployment.project_id,
                "service_id": deployment.service_id,
                "environment_id": deployment.environment_id,
            },
            database_version=await self._get_database_version(),
            runtime_version=f"Python {platform.python_version()}",
            application_version=deployment.application_version,
        )
        return BackupMetadata(**{**base.model_dump(), **overrides})

    async def _get_database_version(self) -> str:
        """Get database server version."""
        database: DatabaseStrategy = self.strategies[ComponentType.DATABASE]
        try:
            return await database.provider.server_version()
        except Exception as e:
            logger.warning(f"Could not determine database version: {e}")
            return "unknown"
