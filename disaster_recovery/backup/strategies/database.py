"""Database component: dump through the database provider."""

import shutil
from pathlib import Path
from typing import Optional, Sequence

from ..._utils import logger
from ..encryption import ENCRYPTED_SUFFIX, BackupCipher
from ..interfaces import DatabaseProvider
from ..models import BackupComponent, ComponentType, RestoreOptions
from .base import ComponentStrategy

DUMP_FILENAME = "database.sql"
DUMP_MARKERS = (b"PostgreSQL", b"CREATE TABLE")


def looks_like_dump(data: bytes, markers: Sequence[bytes] = DUMP_MARKERS) -> bool:
    """Sanity check that a payload is a database dump."""
    return any(marker in data for marker in markers)


class DatabaseStrategy(ComponentStrategy):
    """Back up the database as a dump file, optionally encrypted at rest."""

    component_type = ComponentType.DATABASE

    def __init__(
        self,
        provider: DatabaseProvider,
        cipher: Optional[BackupCipher] = None,
        encrypt: bool = False,
    ):
        """Initialize strategy.

        Args:
            provider: Database dump/restore collaborator
            cipher: Cipher for encrypted dumps
            encrypt: Encrypt new dumps; requires ``cipher``
        """
        if encrypt and cipher is None:
            raise ValueError("encryption enabled but no cipher given")
        super().__init__(cipher)
        self.provider = provider
        self.encrypt = encrypt

    async def backup(self, backup_id: str, dest_dir: Path) -> BackupComponent:
        source = Path(await self.provider.dump())
        dump_file = dest_dir / DUMP_FILENAME
        try:
            shutil.copyfile(source, dump_file)
        finally:
            # The provider's dump is scratch output; only the copy in dest_dir is kept
            source.unlink(missing_ok=True)

        if not self.encrypt:
            logger.info(f"Database dump stored for {backup_id}: {dump_file}")
            return self.describe(dump_file)

        encrypted = dump_file.with_name(dump_file.name + ENCRYPTED_SUFFIX)
        try:
            self.cipher.encrypt_file(dump_file, encrypted)
        finally:
            dump_file.unlink()

        logger.info(f"Encrypted database dump stored for {backup_id}: {encrypted}")
        return self.describe(encrypted, encrypted=True)

    async def restore(self, component: BackupComponent, options: RestoreOptions) -> None:
        logger.info(f"Restoring database from backup: {component.path}")

        async with self.plaintext(component) as dump_file:
            await self.provider.restore(dump_file)
