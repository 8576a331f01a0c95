"""Tests for BackupVerifier."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from disaster_recovery.backup.archive import TarArchiveAdapter
from disaster_recovery.backup.errors import (
    ArchiveError,
    ComponentBackupError,
    NotFoundError,
    VerificationFailure,
)
from disaster_recovery.backup.models import BackupStatus, ComponentType, RestoreOptions
from disaster_recovery.service import DisasterRecoveryService


class FailingArchiver(TarArchiveAdapter):
    async def create(self, source_dir, archive_path):
        raise ArchiveError("disk full")


def flip_byte(path: Path, offset: int = 0) -> None:
    data = bytearray(path.read_bytes())
    data[offset] ^= 0xFF
    path.write_bytes(bytes(data))


@pytest.mark.asyncio
async def test_verify_untouched_backup(service):
    backup_id = await service.create_full_backup()

    assert await service.verify_backup(backup_id) is True
    manifest = await service.get_backup(backup_id)
    assert manifest.status == BackupStatus.VERIFIED
    assert manifest.verification.checksum_valid is True
    assert manifest.verification.verification_date is not None
    assert manifest.verification.issues == []


@pytest.mark.asyncio
async def test_verify_is_repeatable(service):
    backup_id = await service.create_full_backup()

    first = await service.verify_backup(backup_id)
    second = await service.verify_backup(backup_id)

    assert first is second is True
    manifest = await service.get_backup(backup_id)
    assert manifest.verification.issues == []


@pytest.mark.asyncio
async def test_corrupted_archive_reported(service):
    backup_id = await service.create_full_backup()
    manifest = await service.get_backup(backup_id)
    flip_byte(Path(manifest.get_component(ComponentType.FILES).path), offset=20)

    assert await service.verify_backup(backup_id) is False

    manifest = await service.get_backup(backup_id)
    assert manifest.status == BackupStatus.FAILED
    assert manifest.verification.verified is False
    assert manifest.verification.checksum_valid is False
    assert len(manifest.verification.issues) == 1
    assert manifest.verification.issues[0].startswith("files")
    assert "checksum mismatch" in manifest.verification.issues[0]


@pytest.mark.asyncio
async def test_every_broken_component_reported(service):
    backup_id = await service.create_full_backup()
    manifest = await service.get_backup(backup_id)
    Path(manifest.get_component(ComponentType.LOGS).path).unlink()
    flip_byte(Path(manifest.get_component(ComponentType.CONFIG).path))

    assert await service.verify_backup(backup_id) is False

    issues = (await service.get_backup(backup_id)).verification.issues
    assert len(issues) == 2
    assert any(issue.startswith("logs") and "missing" in issue for issue in issues)
    assert any(issue.startswith("config") for issue in issues)


@pytest.mark.asyncio
async def test_dump_without_markers(service, fake_database):
    fake_database.content = "-- just a comment\n"
    backup_id = await service.create_full_backup()

    assert await service.verify_backup(backup_id) is False
    issues = (await service.get_backup(backup_id)).verification.issues
    assert len(issues) == 1
    assert issues[0].startswith("database")
    assert "markers" in issues[0]


@pytest.mark.asyncio
async def test_verify_unknown_backup(service):
    with pytest.raises(NotFoundError) as exc_info:
        await service.verify_backup("backup_0_nothing")
    assert exc_info.value.backup_id == "backup_0_nothing"


@pytest.mark.asyncio
async def test_failed_backup_stays_failed(recovery_config, fake_database, live_state):
    service = DisasterRecoveryService(recovery_config, fake_database, archiver=FailingArchiver())
    with pytest.raises(ComponentBackupError) as exc_info:
        await service.create_full_backup()
    backup_id = exc_info.value.backup_id

    assert await service.verify_backup(backup_id) is False
    assert await service.verify_backup(backup_id) is False

    manifest = await service.get_backup(backup_id)
    assert manifest.status == BackupStatus.FAILED
    assert manifest.verification.verified is False
    assert manifest.verification.issues == ["backup incomplete: failed during files: disk full"]

    mock_restore = fake_database.restore = AsyncMock()
    with pytest.raises(VerificationFailure):
        await service.restore_backup(backup_id, RestoreOptions(create_backup_before_restore=False))
    mock_restore.assert_not_awaited()


@pytest.mark.asyncio
async def test_unfinished_backup_not_verified(service):
    backup_id = await service.create_full_backup()
    manifest = await service.get_backup(backup_id)
    manifest.status = BackupStatus.CREATING
    await service.store.save(manifest)

    assert await service.verify_backup(backup_id) is False
    issues = (await service.get_backup(backup_id)).verification.issues
    assert issues == ["backup incomplete: status creating"]
