"""Retention policy enforcement for backups."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from .._utils import logger, utcnow
from .manager import BackupManager
from .models import BackupManifest, BackupType, RetentionPolicy


class RetentionManager:
    """Prune backups that fell out of the retention policy.

    Full and emergency backups expire only past the yearly cutoff; incremental
    backups expire past any of the daily, weekly, monthly or yearly cutoffs.
    A backup is only deleted when its own policy allows automatic deletion.
    """

    def __init__(self, backups: BackupManager, policy: RetentionPolicy):
        self.backups = backups
        self.policy = policy

    def _cutoffs(self, now: datetime) -> Dict[str, datetime]:
        policy = self.policy
        return {
            "daily": now - timedelta(days=policy.keep_daily),
            "weekly": now - timedelta(weeks=policy.keep_weekly),
            "monthly": now - timedelta(days=30 * policy.keep_monthly),
            "yearly": now - timedelta(days=365 * policy.keep_yearly),
        }

    def is_expired(self, manifest: BackupManifest, now: Optional[datetime] = None) -> bool:
        cutoffs = self._cutoffs(now or utcnow())
        if manifest.timestamp < cutoffs["yearly"]:
            return True
        if manifest.type != BackupType.INCREMENTAL:
            return False
        return any(manifest.timestamp < cutoffs[key] for key in ("monthly", "weekly", "daily"))

    async def find_expired(self) -> List[BackupManifest]:
        """Backups past their retention, whether or not they may be auto-deleted."""
        now = utcnow()
        return [m for m in await self.backups.list_backups() if self.is_expired(m, now)]

    async def cleanup_old_backups(self) -> int:
        """Delete expired backups whose policy allows it.

        Returns:
            Number of backups actually deleted
        """
        deleted_count = 0

        for manifest in await self.find_expired():
            if not manifest.retention.auto_delete:
                logger.debug(f"Keeping expired backup {manifest.id}: auto delete disabled")
                continue

            try:
                if await self.backups.delete_backup(manifest.id):
                    deleted_count += 1
            except Exception as e:
                logger.error(
                    f"Failed to delete backup: {manifest.id}: {e}",
                    extra={"backup_id": manifest.id, "operation_type": "backup_delete_failed"},
                )

        logger.info(
            f"Cleaned up {deleted_count} old backups",
            extra={"deleted_count": deleted_count, "operation_type": "backup_cleanup"},
        )
        return deleted_count
