"""Wire configuration and collaborators into the backup engine."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import RecoveryConfig
from .backup.archive import TarArchiveAdapter
from .backup.encryption import BackupCipher
from .backup.interfaces import ArchiveAdapter, DatabaseProvider, FileStorage
from .backup.manager import BackupManager
from .backup.models import BackupManifest, ComponentType, RestoreOptions, RetentionPolicy
from .backup.providers import LocalFileStorage, PostgresDumpProvider
from .backup.restore import RestoreManager
from .backup.retention import RetentionManager
from .backup.store import ManifestStore
from .backup.strategies import ConfigStrategy, DatabaseStrategy, FilesStrategy, LogsStrategy
from .backup.verify import BackupVerifier


class DisasterRecoveryService:
    """Single entry point for backup, verification, restore and retention."""

    def __init__(
        self,
        config: RecoveryConfig,
        database: DatabaseProvider,
        file_storage: Optional[FileStorage] = None,
        archiver: Optional[ArchiveAdapter] = None,
        cipher: Optional[BackupCipher] = None,
    ):
        """Initialize service.

        Args:
            config: Disaster-recovery configuration
            database: Database dump/restore collaborator
            file_storage: Upload directory; defaults to the configured local path
            archiver: Archive adapter; defaults to in-process tar.gz
            cipher: Payload cipher; built from the configured key when omitted
        """
        self.config = config
        file_storage = file_storage or LocalFileStorage(config.paths.upload_dir)
        archiver = archiver or TarArchiveAdapter()
        if cipher is None and (config.encryption.enabled or config.encryption.key):
            cipher = BackupCipher(config.encryption.key)

        self.store = ManifestStore(config.paths.manifest_dir)
        self.strategies = {
            ComponentType.DATABASE: DatabaseStrategy(database, cipher, encrypt=config.encryption.enabled),
            ComponentType.FILES: FilesStrategy(file_storage, archiver, cipher),
            ComponentType.CONFIG: ConfigStrategy(config),
            ComponentType.LOGS: LogsStrategy(config.paths.logs_dir, archiver, cipher),
        }
        self.verifier = BackupVerifier(self.store, cipher)
        self.backups = BackupManager(self.store, self.strategies, self.verifier, config)
        self.restorer = RestoreManager(self.store, self.strategies, self.verifier, self.backups)
        self.retention = RetentionManager(self.backups, RetentionPolicy.from_config(config.retention))

    @classmethod
    def from_env(cls) -> 'DisasterRecoveryService':
        """Create service for a PostgreSQL deployment from environment variables."""
        config = RecoveryConfig.from_env()
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL is required to back up the database")
        database = PostgresDumpProvider(database_url, str(Path(config.paths.backup_dir) / "_dumps"))
        return cls(config, database)

    async def create_full_backup(self, name: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None) -> str:
        return await self.backups.create_full_backup(name, metadata)

    async def create_incremental_backup(self, last_backup_id: str, name: Optional[str] = None) -> str:
        return await self.backups.create_incremental_backup(last_backup_id, name)

    async def create_emergency_backup(self, reason: str) -> str:
        return await self.backups.create_emergency_backup(reason)

    async def verify_backup(self, backup_id: str) -> bool:
        return await self.verifier.verify_backup(backup_id)

    async def restore_backup(self, backup_id: str, options: Optional[RestoreOptions] = None) -> bool:
        return await self.restorer.restore_backup(backup_id, options or RestoreOptions())

    async def cleanup_old_backups(self) -> int:
        return await self.retention.cleanup_old_backups()

    async def list_backups(self) -> List[BackupManifest]:
        return await self.backups.list_backups()

    async def get_backup(self, backup_id: str) -> BackupManifest:
        return await self.backups.get_backup(backup_id)

    async def delete_backup(self, backup_id: str) -> bool:
        return await self.backups.delete_backup(backup_id)
