"""Error hierarchy for backup, verification and restore operations."""

from typing import Optional


class BackupError(Exception):
    """Base exception for backup related failures.

    Carries the backup id and the phase that failed so callers can report
    which backup broke and where.
    """

    def __init__(self, message: str, backup_id: Optional[str] = None, phase: Optional[str] = None):
        super().__init__(message)
        self.backup_id = backup_id
        self.phase = phase


class NotFoundError(BackupError):
    """No manifest exists for the requested backup id."""

    def __init__(self, backup_id: str):
        super().__init__(f"Backup not found: {backup_id}", backup_id=backup_id, phase="lookup")


class ComponentBackupError(BackupError):
    """A component backup step failed; the enclosing backup is marked failed."""

    def __init__(self, backup_id: str, phase: str, reason: str):
        super().__init__(f"Backup {backup_id} failed during {phase}: {reason}", backup_id=backup_id, phase=phase)


class VerificationFailure(BackupError):
    """Checksum or format verification did not pass."""

    def __init__(self, backup_id: str, issues: Optional[list] = None):
        self.issues = list(issues or [])
        detail = "; ".join(self.issues) if self.issues else "verification failed"
        super().__init__(f"Backup {backup_id} failed verification: {detail}", backup_id=backup_id, phase="verify")


class RestoreError(BackupError):
    """A component restore step failed; remaining components were not restored."""

    def __init__(self, backup_id: str, phase: str, reason: str):
        super().__init__(f"Restore of {backup_id} failed during {phase}: {reason}", backup_id=backup_id, phase=phase)


class EncryptionError(BackupError):
    """Encrypting or decrypting a payload failed."""


class ArchiveError(BackupError):
    """Creating or extracting an archive failed."""


class DatabaseCommandError(BackupError):
    """The database dump or load command exited with an error."""


__all__ = [
    "ArchiveError",
    "BackupError",
    "ComponentBackupError",
    "DatabaseCommandError",
    "EncryptionError",
    "NotFoundError",
    "RestoreError",
    "VerificationFailure",
]
