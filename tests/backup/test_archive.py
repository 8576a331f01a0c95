"""Tests for the tar.gz archive adapter."""

import io
import tarfile

import pytest

from disaster_recovery.backup.archive import TarArchiveAdapter
from disaster_recovery.backup.errors import ArchiveError


@pytest.mark.asyncio
async def test_create_and_extract_archive(tmp_path):
    """Test archive creation and extraction."""
    source_dir = tmp_path / "source"
    (source_dir / "nested").mkdir(parents=True)
    (source_dir / "test1.txt").write_text("Hello World")
    (source_dir / "nested" / "test2.json").write_text('{"key": "value"}')

    archiver = TarArchiveAdapter()
    archive_path = tmp_path / "test.tar.gz"
    size = await archiver.create(source_dir, archive_path)

    assert archive_path.exists()
    assert size == archive_path.stat().st_size

    extract_dir = tmp_path / "extracted"
    await archiver.extract(archive_path, extract_dir)

    # Members are relative to the archived directory
    assert (extract_dir / "test1.txt").read_text() == "Hello World"
    assert (extract_dir / "nested" / "test2.json").read_text() == '{"key": "value"}'
    assert not (extract_dir / "source").exists()


@pytest.mark.asyncio
async def test_create_empty_archive(tmp_path):
    archiver = TarArchiveAdapter()
    archive_path = tmp_path / "empty.tar.gz"

    size = await archiver.create_empty(archive_path)

    assert size > 0
    with tarfile.open(archive_path, "r:gz") as tar:
        assert tar.getmembers() == []


@pytest.mark.asyncio
async def test_create_from_missing_directory(tmp_path):
    with pytest.raises(ArchiveError):
        await TarArchiveAdapter().create(tmp_path / "missing", tmp_path / "out.tar.gz")


@pytest.mark.asyncio
async def test_extract_corrupt_archive(tmp_path):
    archive_path = tmp_path / "bad.tar.gz"
    archive_path.write_bytes(b"not an archive")

    with pytest.raises(ArchiveError):
        await TarArchiveAdapter().extract(archive_path, tmp_path / "out")


@pytest.mark.asyncio
async def test_extract_rejects_paths_outside_target(tmp_path):
    archive_path = tmp_path / "evil.tar.gz"
    payload = b"overwritten"
    with tarfile.open(archive_path, "w:gz") as tar:
        member = tarfile.TarInfo("../escaped.txt")
        member.size = len(payload)
        tar.addfile(member, io.BytesIO(payload))

    with pytest.raises(ArchiveError):
        await TarArchiveAdapter().extract(archive_path, tmp_path / "restore")

    assert not (tmp_path / "escaped.txt").exists()
