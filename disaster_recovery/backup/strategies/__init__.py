"""Per-component backup/restore strategies."""

from .base import ComponentStrategy
from .config import ConfigStrategy
from .database import DatabaseStrategy
from .files import FilesStrategy
from .logs import LogsStrategy

__all__ = ["ComponentStrategy", "ConfigStrategy", "DatabaseStrategy", "FilesStrategy", "LogsStrategy"]
