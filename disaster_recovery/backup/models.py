"""Data models for backup/restore operations."""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BackupType(str, Enum):
    FULL = "full"
    INCREMENTAL = "incremental"
    EMERGENCY = "emergency"


class BackupStatus(str, Enum):
    CREATING = "creating"
    COMPLETED = "completed"
    FAILED = "failed"
    VERIFYING = "verifying"
    VERIFIED = "verified"


class ComponentType(str, Enum):
    DATABASE = "database"
    FILES = "files"
    CONFIG = "config"
    LOGS = "logs"


# Order in which a full backup captures components
BACKUP_ORDER = [ComponentType.DATABASE, ComponentType.FILES, ComponentType.CONFIG, ComponentType.LOGS]


class BackupTrigger(str, Enum):
    MANUAL = "manual"
    SCHEDULED = "scheduled"
    PRE_DEPLOYMENT = "pre_deployment"
    DISASTER = "disaster"


class RestoreMode(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"


class BackupComponent(BaseModel):
    """One stored slice of system state within a backup."""

    model_config = ConfigDict(frozen=True)

    type: ComponentType = Field(..., description="Component kind")
    path: str = Field(..., description="Location of the stored payload")
    size: int = Field(..., ge=0, description="Stored payload size in bytes")
    checksum: str = Field(..., description="SHA-256 checksum of the payload as stored")
    encrypted: bool = False
    compressed: bool = False


class BackupMetadata(BaseModel):
    """Environment and version provenance of a backup."""

    model_config = ConfigDict(extra="forbid")

    version: str = "1.0.0"
    environment: str = "development"
    deployment: Dict[str, str] = Field(default_factory=dict, description="Platform identifiers")
    database_version: str = "unknown"
    runtime_version: str = ""
    application_version: str = "1.0.0"
    created_by: str = "system"
    trigger: BackupTrigger = BackupTrigger.MANUAL


class BackupVerification(BaseModel):
    """Outcome of the most recent verification pass."""

    verified: bool = False
    verification_date: Optional[datetime] = None
    checksum_valid: bool = False
    restore_test_passed: Optional[bool] = None
    issues: List[str] = Field(default_factory=list)


class RetentionPolicy(BaseModel):
    """How long a backup is kept before it may be pruned."""

    keep_daily: int = Field(7, ge=0, description="Days")
    keep_weekly: int = Field(4, ge=0, description="Weeks")
    keep_monthly: int = Field(12, ge=0, description="Months of 30 days")
    keep_yearly: int = Field(2, ge=0, description="Years of 365 days")
    auto_delete: bool = True

    @classmethod
    def from_config(cls, retention) -> "RetentionPolicy":
        """Snapshot the configured default policy."""
        return cls(
            keep_daily=retention.keep_daily,
            keep_weekly=retention.keep_weekly,
            keep_monthly=retention.keep_monthly,
            keep_yearly=retention.keep_yearly,
            auto_delete=retention.auto_delete,
        )


class BackupManifest(BaseModel):
    """Durable record describing one backup attempt and its components."""

    id: str = Field(..., description="Unique backup identifier")
    name: str = Field(..., description="Human readable label")
    type: BackupType
    timestamp: datetime = Field(..., description="Backup creation timestamp")
    size: int = Field(0, ge=0, description="Sum of component sizes in bytes")
    components: List[BackupComponent] = Field(default_factory=list)
    metadata: BackupMetadata = Field(default_factory=BackupMetadata)
    status: BackupStatus = BackupStatus.CREATING
    verification: BackupVerification = Field(default_factory=BackupVerification)
    retention: RetentionPolicy = Field(default_factory=RetentionPolicy)
    failure: Optional[str] = Field(None, description="Phase and reason of a failed backup run")

    def add_component(self, component: BackupComponent) -> None:
        """Append a component, keeping component types unique."""
        if self.get_component(component.type) is not None:
            raise ValueError(f"Backup {self.id} already has a {component.type.value} component")
        self.components.append(component)

    def get_component(self, component_type: ComponentType) -> Optional[BackupComponent]:
        for component in self.components:
            if component.type == component_type:
                return component
        return None

    def finalize(self) -> None:
        """Compute the total size and mark the backup completed."""
        self.size = sum(component.size for component in self.components)
        self.status = BackupStatus.COMPLETED


class RestoreOptions(BaseModel):
    """Caller choices for a restore run; never persisted."""

    target_environment: str = "staging"  # staging, production
    components: List[ComponentType] = Field(default_factory=lambda: list(BACKUP_ORDER))
    point_in_time: Optional[datetime] = Field(
        None, description="Advisory only; used upstream to pick the manifest"
    )
    verify_before_restore: bool = True
    create_backup_before_restore: bool = True
    restore_mode: RestoreMode = RestoreMode.REPLACE
