"""Default collaborators: local upload directory and PostgreSQL via pg_dump/psql."""

import asyncio
import os
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .._utils import logger, utcnow
from .errors import DatabaseCommandError
from .interfaces import DatabaseProvider, FileStorage


class LocalFileStorage(FileStorage):
    """Upload directory on the local filesystem."""

    def __init__(self, root: str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    async def list_changed_since(self, since: datetime) -> List[Path]:
        """Find files whose modification time is after ``since``.

        Args:
            since: Timezone-aware cutoff

        Returns:
            Sorted list of changed file paths
        """
        if not self._root.exists():
            return []

        cutoff = since.timestamp()
        changed = [
            path for path in sorted(self._root.rglob("*"))
            if path.is_file() and path.stat().st_mtime > cutoff
        ]

        logger.debug(f"Found {len(changed)} files changed since {since.isoformat()}")
        return changed


class PostgresDumpProvider(DatabaseProvider):
    """Dump and reload a PostgreSQL database with the client binaries."""

    def __init__(
        self,
        database_url: str,
        dump_dir: str,
        pg_dump: str = "pg_dump",
        psql: str = "psql",
    ):
        """Initialize provider.

        Args:
            database_url: libpq connection string, including credentials
            dump_dir: Directory receiving dump files
            pg_dump: pg_dump executable
            psql: psql executable
        """
        self.database_url = database_url
        self.dump_dir = Path(dump_dir)
        self.pg_dump = pg_dump
        self.psql = psql

    async def dump(self) -> Path:
        self.dump_dir.mkdir(parents=True, exist_ok=True)
        stamp = utcnow().strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        dump_file = self.dump_dir / f"dump_{stamp}.sql"

        await self._run(
            self.pg_dump,
            [
                self.database_url,
                "--no-owner",
                "--no-privileges",
                "--clean",
                "--if-exists",
                "--file", str(dump_file),
            ],
        )

        logger.info(f"Database dump written: {dump_file} ({dump_file.stat().st_size:,} bytes)")
        return dump_file

    async def restore(self, dump_file: Path) -> None:
        if not dump_file.exists():
            raise FileNotFoundError(f"Dump file not found: {dump_file}")

        await self._run(
            self.psql,
            [
                self.database_url,
                "--file", str(dump_file),
                "--single-transaction",
                "--set", "ON_ERROR_STOP=1",
            ],
        )

        logger.info(f"Database restored from: {dump_file}")

    async def server_version(self) -> str:
        try:
            output = await self._run(self.psql, [self.database_url, "-tAc", "SHOW server_version"])
        except (DatabaseCommandError, OSError) as e:
            logger.warning(f"Could not determine database version: {e}")
            return "unknown"
        version = output.strip()
        return f"PostgreSQL {version}" if version else "unknown"

    async def _run(self, program: str, args: Sequence[str]) -> str:
        process = await asyncio.create_subprocess_exec(
            program,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=os.environ.copy(),
        )
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            message = _redact(stderr.decode(errors="replace").strip(), self.database_url)
            raise DatabaseCommandError(f"{program} failed with code {process.returncode}: {message}")

        return stdout.decode(errors="replace")


def _redact(text: str, secret: Optional[str]) -> str:
    if secret:
        text = text.replace(secret, "<database-url>")
    return re.sub(r"://([^:/@]+):[^@]+@", r"://\1:***@", text)
