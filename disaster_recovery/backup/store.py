"""Manifest persistence: one JSON file per backup id."""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .._utils import logger
from .errors import NotFoundError
from .models import BackupManifest
from .utils import load_manifest, save_manifest


class ManifestStore:
    """Key-value store of manifests keyed by backup id, with listing."""

    def __init__(self, manifest_dir: str):
        self.manifest_dir = Path(manifest_dir)
        self.manifest_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, backup_id: str) -> Path:
        return self.manifest_dir / f"{backup_id}.json"

    async def save(self, manifest: BackupManifest) -> None:
        await save_manifest(manifest.model_dump(mode="json"), self._path(manifest.id))

    async def get(self, backup_id: str) -> Optional[BackupManifest]:
        """Return the manifest, or None if it is missing or unreadable."""
        path = self._path(backup_id)
        if not path.exists():
            return None
        try:
            return BackupManifest(**await load_manifest(path))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Skipping unreadable manifest {path.name}: {e}")
            return None

    async def load(self, backup_id: str) -> BackupManifest:
        manifest = await self.get(backup_id)
        if manifest is None:
            raise NotFoundError(backup_id)
        return manifest

    async def list(self) -> List[BackupManifest]:
        """List all readable manifests, newest first.

        Entries being written concurrently may be partial; those are skipped.
        """
        manifests = []
        for path in self.manifest_dir.glob("*.json"):
            manifest = await self.get(path.stem)
            if manifest is not None:
                manifests.append(manifest)

        manifests.sort(key=lambda m: m.timestamp, reverse=True)
        return manifests

    async def delete(self, backup_id: str) -> bool:
        path = self._path(backup_id)
        if not path.exists():
            return False
        path.unlink()
        return True
