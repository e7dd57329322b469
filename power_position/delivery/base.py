"""Base class for snapshot sinks."""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Optional


class Sink(ABC):
    """Persists snapshot lines. Repeated writes to one path overwrite."""

    def __init__(self, name: str):
        self.name = name
        self._write_count = 0
        self._error_count = 0

    @abstractmethod
    def create_directory(self, path: Path) -> None:
        """Create a directory and its parents; no-op if it exists."""
        pass

    @abstractmethod
    async def write_lines(
        self,
        path: Path,
        lines: Iterable[str],
        cancel: Optional[asyncio.Event] = None
    ) -> bool:
        """
        Write lines to path, replacing any existing content.

        Args:
            path: Destination file
            lines: Lines without trailing newlines
            cancel: Set when the write should be abandoned

        Returns:
            True if the file was written
        """
        pass

    def get_stats(self) -> dict[str, Any]:
        """Get write statistics."""
        total = self._write_count + self._error_count
        return {
            "name": self.name,
            "write_count": self._write_count,
            "error_count": self._error_count,
            "success_rate": self._write_count / total if total > 0 else 0.0
        }
