"""Logs component."""

from pathlib import Path
from typing import Optional

from ..encryption import BackupCipher
from ..interfaces import ArchiveAdapter
from ..models import ComponentType
from .files import DirectoryArchiveStrategy


class LogsStrategy(DirectoryArchiveStrategy):
    component_type = ComponentType.LOGS
    archive_name = "logs.tar.gz"

    def __init__(self, logs_dir: str, archiver: ArchiveAdapter, cipher: Optional[BackupCipher] = None):
        super().__init__(archiver, cipher)
        self.logs_dir = Path(logs_dir)

    @property
    def target_dir(self) -> Path:
        return self.logs_dir
