"""Utility functions for backup/restore operations."""

import hashlib
import json
import secrets
from pathlib import Path
from typing import Any, Dict, Optional

from .._utils import epoch_millis, logger

_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"


def compute_checksum(file_path: Path) -> str:
    """Compute SHA-256 checksum of file.

    Args:
        file_path: Path to file

    Returns:
        SHA-256 checksum as hex string with 'sha256:' prefix
    """
    sha256 = hashlib.sha256()

    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)

    return f"sha256:{sha256.hexdigest()}"


def generate_backup_id(millis: Optional[int] = None) -> str:
    """Generate a backup ID that sorts by creation time.

    Returns:
        Backup ID in format: backup_<epoch-ms>_<9 random chars>
    """
    millis = epoch_millis() if millis is None else millis
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"backup_{millis}_{suffix}"


async def save_manifest(manifest: Dict[str, Any], output_path: Path) -> None:
    """Save manifest JSON to file, overwriting any previous version.

    Args:
        manifest: Manifest dictionary
        output_path: Output file path
    """
    with open(output_path, "w") as f:
        json.dump(manifest, f, indent=2, default=str)

    logger.debug(f"Manifest saved: {output_path}")


async def load_manifest(manifest_path: Path) -> Dict[str, Any]:
    """Load manifest JSON from file.

    Args:
        manifest_path: Manifest file path

    Returns:
        Manifest dictionary
    """
    with open(manifest_path, "r") as f:
        manifest = json.load(f)

    logger.debug(f"Manifest loaded: {manifest_path}")
    return manifest
