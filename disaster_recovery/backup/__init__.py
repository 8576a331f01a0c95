"""Backup, verification, restore and retention of service state."""

from .archive import TarArchiveAdapter
from .encryption import BackupCipher
from .errors import (
    BackupError,
    ComponentBackupError,
    NotFoundError,
    RestoreError,
    VerificationFailure,
)
from .interfaces import ArchiveAdapter, DatabaseProvider, FileStorage
from .manager import BackupManager
from .models import (
    BackupComponent,
    BackupManifest,
    BackupStatus,
    BackupTrigger,
    BackupType,
    ComponentType,
    RestoreMode,
    RestoreOptions,
    RetentionPolicy,
)
from .providers import LocalFileStorage, PostgresDumpProvider
from .restore import RestoreManager
from .retention import RetentionManager
from .store import ManifestStore
from .verify import BackupVerifier

__all__ = [
    "ArchiveAdapter",
    "BackupCipher",
    "BackupComponent",
    "BackupError",
    "BackupManager",
    "BackupManifest",
    "BackupStatus",
    "BackupTrigger",
    "BackupType",
    "BackupVerifier",
    "ComponentBackupError",
    "ComponentType",
    "DatabaseProvider",
    "FileStorage",
    "LocalFileStorage",
    "ManifestStore",
    "NotFoundError",
    "PostgresDumpProvider",
    "RestoreError",
    "RestoreManager",
    "RestoreMode",
    "RestoreOptions",
    "RetentionManager",
    "RetentionPolicy",
    "TarArchiveAdapter",
    "VerificationFailure",
]
