"""Configuration management for disaster-recovery."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class RetentionConfig:
    """Default retention policy attached to new backups."""
    keep_daily: int = 7  # days
    keep_weekly: int = 4  # weeks
    keep_monthly: int = 12  # months
    keep_yearly: int = 2  # years
    auto_delete: bool = True

    @classmethod
    def from_env(cls) -> 'RetentionConfig':
        """Create config from environment variables."""
        return cls(
            keep_daily=int(os.getenv("BACKUP_KEEP_DAILY", "7")),
            keep_weekly=int(os.getenv("BACKUP_KEEP_WEEKLY", "4")),
            keep_monthly=int(os.getenv("BACKUP_KEEP_MONTHLY", "12")),
            keep_yearly=int(os.getenv("BACKUP_KEEP_YEARLY", "2")),
            auto_delete=_env_bool("BACKUP_AUTO_DELETE", "true")
        )

    def __post_init__(self):
        """Validate configuration."""
        for name in ("keep_daily", "keep_weekly", "keep_monthly", "keep_yearly"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class EncryptionConfig:
    """Encryption of database dumps at rest."""
    enabled: bool = False
    key: Optional[str] = None  # hex encoded, 32 bytes

    @classmethod
    def from_env(cls) -> 'EncryptionConfig':
        """Create config from environment variables."""
        return cls(
            enabled=_env_bool("BACKUP_ENCRYPT", "false"),
            key=os.getenv("BACKUP_ENCRYPTION_KEY") or None
        )

    def __post_init__(self):
        """Validate configuration."""
        if self.key is None:
            return
        try:
            raw = bytes.fromhex(self.key)
        except ValueError:
            raise ValueError("encryption key must be hex encoded") from None
        if len(raw) != 32:
            raise ValueError(f"encryption key must be 32 bytes, got {len(raw)}")


@dataclass(frozen=True)
class PathsConfig:
    """Filesystem locations used by backups."""
    backup_dir: str = "./backups"
    upload_dir: str = "./public/uploads"
    logs_dir: str = "./logs"

    @classmethod
    def from_env(cls) -> 'PathsConfig':
        """Create config from environment variables."""
        return cls(
            backup_dir=os.getenv("BACKUP_DIR", "./backups"),
            upload_dir=os.getenv("UPLOAD_DIR", "./public/uploads"),
            logs_dir=os.getenv("LOGS_DIR", "./logs")
        )

    @property
    def manifest_dir(self) -> str:
        return os.path.join(self.backup_dir, "manifests")


@dataclass(frozen=True)
class DeploymentConfig:
    """Deployment provenance recorded in backup metadata."""
    environment: str = "development"  # development, staging, production
    project_id: str = ""
    service_id: str = ""
    environment_id: str = ""
    application_version: str = "1.0.0"

    # Non-secret database coordinates; credentials are never kept here
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "postgres"

    @classmethod
    def from_env(cls) -> 'DeploymentConfig':
        """Create config from environment variables."""
        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            project_id=os.getenv("RAILWAY_PROJECT_ID", ""),
            service_id=os.getenv("RAILWAY_SERVICE_ID", ""),
            environment_id=os.getenv("RAILWAY_ENVIRONMENT_ID", ""),
            application_version=os.getenv("APP_VERSION", "1.0.0"),
            database_host=os.getenv("DATABASE_HOST", "localhost"),
            database_port=int(os.getenv("DATABASE_PORT", "5432")),
            database_name=os.getenv("DATABASE_NAME", "postgres")
        )

    def __post_init__(self):
        """Validate configuration."""
        valid_environments = {"development", "staging", "production"}
        if self.environment not in valid_environments:
            raise ValueError(f"Unknown environment: {self.environment}. Available: {valid_environments}")
        if not 0 < self.database_port < 65536:
            raise ValueError(f"database_port out of range: {self.database_port}")


@dataclass(frozen=True)
class RecoveryConfig:
    """Main disaster-recovery configuration."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    retention: RetentionConfig = field(default_factory=RetentionConfig)
    encryption: EncryptionConfig = field(default_factory=EncryptionConfig)
    deployment: DeploymentConfig = field(default_factory=DeploymentConfig)

    @classmethod
    def from_env(cls) -> 'RecoveryConfig':
        """Create complete config from environment variables."""
        return cls(
            paths=PathsConfig.from_env(),
            retention=RetentionConfig.from_env(),
            encryption=EncryptionConfig.from_env(),
            deployment=DeploymentConfig.from_env()
        )

    def to_snapshot(self) -> Dict[str, Any]:
        """Redacted view of the configuration written into config backups.

        The encryption key and any database credentials are left out.
        """
        deployment = self.deployment
        return {
            'environment': deployment.environment,
            'application_version': deployment.application_version,
            'database': {
                'host': deployment.database_host,
                'port': deployment.database_port,
                'database': deployment.database_name,
            },
            'storage': {
                'upload_dir': self.paths.upload_dir,
                'logs_dir': self.paths.logs_dir,
                'backup_dir': self.paths.backup_dir,
            },
            'retention': {
                'keep_daily': self.retention.keep_daily,
                'keep_weekly': self.retention.keep_weekly,
                'keep_monthly': self.retention.keep_monthly,
                'keep_yearly': self.retention.keep_yearly,
                'auto_delete': self.retention.auto_delete,
            },
            'encryption': {'enabled': self.encryption.enabled},
            'railway': {
                'project_id': deployment.project_id,
                'service_id': deployment.service_id,
                'environment_id': deployment.environment_id,
            },
        }
