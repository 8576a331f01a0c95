"""Backup and disaster-recovery orchestration."""

from .config import RecoveryConfig
from .service import DisasterRecoveryService

__version__ = "0.1.0"
__author__ = "disaster-recovery"
__url__ = "https://github.com/disaster-recovery/disaster-recovery"

__all__ = ["DisasterRecoveryService", "RecoveryConfig", "__version__"]
