"""Collaborator interfaces consumed by the backup engine."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List


class DatabaseProvider(ABC):
    """Dumps the live database to a file and loads dump files back."""

    @abstractmethod
    async def dump(self) -> Path:
        """Write a dump of the live database and return its path."""

    @abstractmethod
    async def restore(self, dump_file: Path) -> None:
        """Reload the live database from a dump file."""

    async def server_version(self) -> str:
        return "unknown"


class FileStorage(ABC):
    """Directory holding user-uploaded assets."""

    @property
    @abstractmethod
    def root(self) -> Path:
        """Upload directory."""

    @abstractmethod
    async def list_changed_since(self, since: datetime) -> List[Path]:
        """Return absolute paths of files under ``root`` modified after ``since``."""


class ArchiveAdapter(ABC):
    """Compressed directory archives."""

    @abstractmethod
    async def create(self, source_dir: Path, archive_path: Path) -> int:
        """Archive the contents of ``source_dir``; return the archive size."""

    @abstractmethod
    async def create_empty(self, archive_path: Path) -> int:
        """Write a valid archive with no members; return its size."""

    @abstractmethod
    async def extract(self, archive_path: Path, output_dir: Path) -> None:
        """Extract an archive into ``output_dir``."""
