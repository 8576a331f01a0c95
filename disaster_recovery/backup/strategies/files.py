"""Directory components: uploaded files, with incremental capture of changes."""

import shutil
from abc import abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..._utils import logger
from ..encryption import BackupCipher
from ..interfaces import ArchiveAdapter, FileStorage
from ..models import BackupComponent, ComponentType, RestoreMode, RestoreOptions
from .base import ComponentStrategy


class DirectoryArchiveStrategy(ComponentStrategy):
    """Archive a whole directory and extract it back on restore.

    A missing source directory yields a valid empty archive so verification
    always has a well-formed artifact to check.
    """

    archive_name: str

    def __init__(self, archiver: ArchiveAdapter, cipher: Optional[BackupCipher] = None):
        super().__init__(cipher)
        self.archiver = archiver

    @property
    @abstractmethod
    def target_dir(self) -> Path:
        """Live directory this component archives and restores into."""

    async def backup(self, backup_id: str, dest_dir: Path) -> BackupComponent:
        archive_path = dest_dir / self.archive_name
        source = self.target_dir

        if source.is_dir():
            await self.archiver.create(source, archive_path)
        else:
            logger.info(f"No {self.component_type.value} directory at {source}, writing empty archive")
            await self.archiver.create_empty(archive_path)

        return self.describe(archive_path, compressed=True)

    async def restore(self, component: BackupComponent, options: RestoreOptions) -> None:
        target = self.target_dir
        logger.info(f"Restoring {component.type.value} into {target} ({options.restore_mode.value})")

        async with self.plaintext(component) as archive_path:
            if options.restore_mode == RestoreMode.REPLACE and target.exists():
                shutil.rmtree(target)
            target.mkdir(parents=True, exist_ok=True)
            await self.archiver.extract(archive_path, target)


class FilesStrategy(DirectoryArchiveStrategy):
    """Uploaded assets held by the file storage collaborator."""

    component_type = ComponentType.FILES
    archive_name = "files.tar.gz"
    incremental_archive_name = "files_incremental.tar.gz"

    def __init__(self, storage: FileStorage, archiver: ArchiveAdapter, cipher: Optional[BackupCipher] = None):
        super().__init__(archiver, cipher)
        self.storage = storage

    @property
    def target_dir(self) -> Path:
        return self.storage.root

    async def backup_changed_since(self, backup_id: str, dest_dir: Path, since: datetime) -> Optional[BackupComponent]:
        """Archive only files modified after ``since``.

        Args:
            backup_id: Owning backup
            dest_dir: Artifact directory of the backup
            since: Timestamp of the previous backup

        Returns:
            Component record, or None when nothing changed
        """
        changed = await self.storage.list_changed_since(since)
        if not changed:
            logger.info(f"No files changed since {since.isoformat()}, skipping files component for {backup_id}")
            return None

        root = self.storage.root
        staging = dest_dir / "_files_staging"
        staging.mkdir(parents=True, exist_ok=True)
        try:
            for path in changed:
                relative = Path(path).relative_to(root)
                target = staging / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, target)

            archive_path = dest_dir / self.incremental_archive_name
            await self.archiver.create(staging, archive_path)
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info(f"Archived {len(changed)} changed files for {backup_id}")
        return self.describe(archive_path, compressed=True)
