"""Verify stored backups against their manifests."""

from pathlib import Path
from typing import List, Optional, Sequence

from .._utils import logger, utcnow
from .encryption import BackupCipher
from .errors import EncryptionError
from .models import BackupComponent, BackupStatus, BackupVerification, ComponentType
from .store import ManifestStore
from .strategies.database import DUMP_MARKERS, looks_like_dump
from .utils import compute_checksum


class BackupVerifier:
    """Recompute checksums and sanity check artifacts of a backup.

    Verification never stops at the first problem: every component is checked
    and all issues are recorded on the manifest in one pass.
    """

    def __init__(
        self,
        store: ManifestStore,
        cipher: Optional[BackupCipher] = None,
        dump_markers: Sequence[bytes] = DUMP_MARKERS,
    ):
        self.store = store
        self.cipher = cipher
        self.dump_markers = tuple(dump_markers)

    async def verify_backup(self, backup_id: str) -> bool:
        """Verify every component of a backup.

        Args:
            backup_id: Backup to verify

        Returns:
            True if all components passed

        Raises:
            NotFoundError: No manifest for ``backup_id``
        """
        manifest = await self.store.load(backup_id)
        logger.info(
            f"Verifying backup: {backup_id}",
            extra={"backup_id": backup_id, "operation_type": "backup_verify_start"},
        )

        issues: List[str] = []
        # A run that never finished stays failed, however sound its partial artifacts are
        if manifest.failure:
            issues.append(f"backup incomplete: failed during {manifest.failure}")
        elif manifest.status == BackupStatus.CREATING:
            issues.append("backup incomplete: status creating")

        manifest.status = BackupStatus.VERIFYING
        await self.store.save(manifest)

        for component in manifest.components:
            issues.extend(self._check_component(component))

        valid = not issues
        manifest.verification = BackupVerification(
            verified=valid,
            verification_date=utcnow(),
            checksum_valid=valid,
            restore_test_passed=manifest.verification.restore_test_passed,
            issues=issues,
        )
        manifest.status = BackupStatus.VERIFIED if valid else BackupStatus.FAILED
        await self.store.save(manifest)

        log = logger.info if valid else logger.warning
        log(
            f"Backup verification {'passed' if valid else 'failed'}: {backup_id}",
            extra={
                "backup_id": backup_id,
                "verified": valid,
                "issues": len(issues),
                "operation_type": "backup_verify_complete",
            },
        )
        return valid

    def _check_component(self, component: BackupComponent) -> List[str]:
        name = component.type.value
        artifact = Path(component.path)

        if not artifact.is_file():
            return [f"{name}: artifact missing at {artifact}"]

        try:
            checksum = compute_checksum(artifact)
        except OSError as e:
            return [f"{name}: failed to read artifact: {e}"]

        if checksum != component.checksum:
            return [f"{name}: checksum mismatch, expected {component.checksum}, got {checksum}"]

        if component.type == ComponentType.DATABASE:
            return self._check_dump(component)

        return []

    def _check_dump(self, component: BackupComponent) -> List[str]:
        try:
            with open(component.path, "rb") as f:
                data = f.read()
            if component.encrypted:
                if self.cipher is None:
                    return ["database: encrypted dump but no cipher configured"]
                data = self.cipher.decrypt(data)
        except (OSError, EncryptionError) as e:
            return [f"database: failed to read dump: {e}"]

        if not looks_like_dump(data, self.dump_markers):
            return [f"database: no database dump markers found in {component.path}"]
        return []
