"""tar.gz implementation of the archive adapter."""

import tarfile
from pathlib import Path

from .._utils import logger
from .errors import ArchiveError
from .interfaces import ArchiveAdapter


class TarArchiveAdapter(ArchiveAdapter):
    """Create and extract gzip-compressed tar archives in process.

    Members are stored relative to the archived directory, so extracting into
    a target directory recreates the original layout inside it.
    """

    async def create(self, source_dir: Path, archive_path: Path) -> int:
        """Create tar.gz archive from directory.

        Args:
            source_dir: Directory to archive
            archive_path: Output .tar.gz file path

        Returns:
            Size of created archive in bytes
        """
        if not source_dir.is_dir():
            raise ArchiveError(f"Archive source is not a directory: {source_dir}")

        logger.info(f"Creating archive: {archive_path}")

        try:
            with tarfile.open(archive_path, "w:gz") as tar:
                for item in sorted(source_dir.iterdir()):
                    tar.add(item, arcname=item.name)
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"Failed to create archive {archive_path}: {exc}") from exc

        archive_size = archive_path.stat().st_size
        logger.info(f"Archive created: {archive_size:,} bytes")

        return archive_size

    async def create_empty(self, archive_path: Path) -> int:
        """Create tar.gz archive with no members.

        Args:
            archive_path: Output .tar.gz file path

        Returns:
            Size of created archive in bytes
        """
        try:
            with tarfile.open(archive_path, "w:gz"):
                pass
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"Failed to create empty archive {archive_path}: {exc}") from exc

        logger.info(f"Empty archive created: {archive_path}")
        return archive_path.stat().st_size

    async def extract(self, archive_path: Path, output_dir: Path) -> None:
        """Extract tar.gz archive to directory.

        Args:
            archive_path: Path to .tar.gz archive
            output_dir: Directory to extract to
        """
        logger.info(f"Extracting archive: {archive_path} to {output_dir}")

        output_dir.mkdir(parents=True, exist_ok=True)

        try:
            with tarfile.open(archive_path, "r:gz") as tar:
                tar.extractall(output_dir, filter="data")
        except (OSError, tarfile.TarError) as exc:
            raise ArchiveError(f"Failed to extract archive {archive_path}: {exc}") from exc

        logger.info("Archive extracted successfully")
