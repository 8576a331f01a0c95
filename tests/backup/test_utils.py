"""Tests for backup utility functions."""

import pytest
import tempfile
from pathlib import Path
from datetime import datetime, timezone

from disaster_recovery.backup.utils import (
    compute_checksum,
    generate_backup_id,
    save_manifest,
    load_manifest,
)


def test_compute_checksum():
    """Test checksum computation."""
    with tempfile.NamedTemporaryFile(mode='w', delete=False) as f:
        f.write("Test content for checksum")
        filepath = Path(f.name)

    try:
        # Compute checksum
        checksum = compute_checksum(filepath)
        assert checksum.startswith("sha256:")
        assert len(checksum) == len("sha256:") + 64

        # Stable for unchanged content
        assert compute_checksum(filepath) == checksum

        filepath.write_text("Modified content")
        assert compute_checksum(filepath) != checksum

    finally:
        filepath.unlink()


def test_generate_backup_id():
    """Test backup ID generation."""
    backup_id = generate_backup_id()

    prefix, millis, suffix = backup_id.split("_")
    assert prefix == "backup"
    assert millis.isdigit()
    assert len(suffix) == 9


def test_generate_backup_id_sorts_by_time_and_is_unique():
    """Ids from later timestamps sort later; same timestamp still differs."""
    earlier = generate_backup_id(1_700_000_000_000)
    later = generate_backup_id(1_700_000_000_001)
    assert earlier < later

    ids = {generate_backup_id(1_700_000_000_000) for _ in range(200)}
    assert len(ids) == 200


@pytest.mark.asyncio
async def test_save_and_load_manifest():
    """Test manifest save and load."""
    with tempfile.TemporaryDirectory() as tmpdir:
        manifest_path = Path(tmpdir) / "manifest.json"

        manifest_data = {
            "id": "backup_1_abc",
            "timestamp": datetime.now(timezone.utc),
            "components": [{"type": "config", "size": 10}],
        }

        await save_manifest(manifest_data, manifest_path)
        assert manifest_path.exists()

        loaded_data = await load_manifest(manifest_path)
        assert loaded_data["id"] == "backup_1_abc"
        assert loaded_data["components"][0]["type"] == "config"
        assert isinstance(loaded_data["timestamp"], str)
