"""Global pytest configuration and fixtures."""

import os
import sys
import time

import pytest
from pathlib import Path
from typing import List

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from disaster_recovery.backup.interfaces import DatabaseProvider
from disaster_recovery.config import PathsConfig, RecoveryConfig
from disaster_recovery.service import DisasterRecoveryService

DUMP_CONTENT = (
    "--\n-- PostgreSQL database dump\n--\n"
    "CREATE TABLE articles (id integer PRIMARY KEY, title text);\n"
    "INSERT INTO articles VALUES (1, 'hello');\n"
)


class FakeDatabase(DatabaseProvider):
    """In-process database provider recording restores."""

    def __init__(self, dump_dir: Path, content: str = DUMP_CONTENT):
        self.dump_dir = dump_dir
        self.content = content
        self.dumps = 0
        self.restored: List[str] = []

    async def dump(self) -> Path:
        self.dump_dir.mkdir(parents=True, exist_ok=True)
        self.dumps += 1
        dump_file = self.dump_dir / f"dump_{self.dumps}.sql"
        dump_file.write_text(self.content)
        return dump_file

    async def restore(self, dump_file: Path) -> None:
        self.restored.append(Path(dump_file).read_text())

    async def server_version(self) -> str:
        return "PostgreSQL 15"


@pytest.fixture
def recovery_config(tmp_path):
    """Configuration rooted in a temporary directory."""
    return RecoveryConfig(
        paths=PathsConfig(
            backup_dir=str(tmp_path / "backups"),
            upload_dir=str(tmp_path / "uploads"),
            logs_dir=str(tmp_path / "logs"),
        )
    )


@pytest.fixture
def live_state(tmp_path):
    """Populate upload and log directories."""
    uploads = tmp_path / "uploads"
    (uploads / "images").mkdir(parents=True)
    (uploads / "images" / "logo.png").write_bytes(b"\x89PNG fake image")
    (uploads / "report.pdf").write_bytes(b"%PDF-1.4 fake")

    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / "app.log").write_text("started\n")
    return tmp_path


@pytest.fixture
def aged_uploads(live_state):
    """Upload files last modified an hour ago."""
    uploads = live_state / "uploads"
    past = time.time() - 3600
    for path in uploads.rglob("*"):
        if path.is_file():
            os.utime(path, (past, past))
    return uploads


@pytest.fixture
def fake_database(tmp_path):
    return FakeDatabase(tmp_path / "dumps")


@pytest.fixture
def service(recovery_config, fake_database, live_state):
    """Service wired with the fake database and real tar archives."""
    return DisasterRecoveryService(recovery_config, fake_database)
