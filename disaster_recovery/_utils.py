import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger("disaster-recovery")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(moment: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch, for ids and generated names."""
    moment = moment or utcnow()
    return int(moment.timestamp() * 1000)
