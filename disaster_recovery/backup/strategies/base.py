"""Shared behaviour of component backup/restore strategies."""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from ..encryption import BackupCipher
from ..errors import EncryptionError
from ..models import BackupComponent, ComponentType, RestoreOptions
from ..utils import compute_checksum


class ComponentStrategy(ABC):
    """Back up one component kind into a directory and restore it again."""

    component_type: ComponentType

    def __init__(self, cipher: Optional[BackupCipher] = None):
        self.cipher = cipher

    @abstractmethod
    async def backup(self, backup_id: str, dest_dir: Path) -> BackupComponent:
        """Write the component payload into ``dest_dir``.

        Args:
            backup_id: Owning backup
            dest_dir: Artifact directory of the backup

        Returns:
            Component record describing the stored payload
        """

    @abstractmethod
    async def restore(self, component: BackupComponent, options: RestoreOptions) -> None:
        """Apply a stored component to the live system."""

    def describe(self, artifact: Path, encrypted: bool = False, compressed: bool = False) -> BackupComponent:
        """Build the component record from the artifact exactly as stored."""
        return BackupComponent(
            type=self.component_type,
            path=str(artifact),
            size=artifact.stat().st_size,
            checksum=compute_checksum(artifact),
            encrypted=encrypted,
            compressed=compressed,
        )

    @asynccontextmanager
    async def plaintext(self, component: BackupComponent) -> AsyncIterator[Path]:
        """Yield a readable path for the payload, decrypting it to a sibling file if needed."""
        stored = Path(component.path)
        if not stored.exists():
            raise FileNotFoundError(f"Backup artifact not found: {stored}")

        if not component.encrypted:
            yield stored
            return

        if self.cipher is None:
            raise EncryptionError(f"No cipher configured to decrypt {stored}")

        decrypted = stored.with_name(stored.name + ".decrypted")
        self.cipher.decrypt_file(stored, decrypted)
        try:
            yield decrypted
        finally:
            decrypted.unlink(missing_ok=True)
