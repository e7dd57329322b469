"""File system snapshot sink."""

import asyncio
import os
from pathlib import Path
from typing import Iterable, Optional

import structlog

from ..errors import PersistenceError
from .base import Sink

logger = structlog.get_logger(__name__)


class FileSink(Sink):
    """Writes snapshots as UTF-8 text files."""

    def __init__(self, name: str = "file", encoding: str = "utf-8"):
        super().__init__(name)
        self.encoding = encoding

    def create_directory(self, path: Path) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._error_count += 1
            raise PersistenceError(
                f"Could not create output directory: {e}",
                operation="create_directory",
                target=str(path)
            ) from e

    async def write_lines(
        self,
        path: Path,
        lines: Iterable[str],
        cancel: Optional[asyncio.Event] = None
    ) -> bool:
        if cancel is not None and cancel.is_set():
            logger.info("Write cancelled before start", sink_name=self.name, output_path=str(path))
            return False

        content = "".join(f"{line}\n" for line in lines)

        try:
            await asyncio.to_thread(self._replace_file, Path(path), content)
        except OSError as e:
            self._error_count += 1
            logger.warning(
                "Snapshot write failed",
                sink_name=self.name,
                output_path=str(path),
                error=str(e)
            )
            return False

        self._write_count += 1
        return True

    def _replace_file(self, path: Path, content: str) -> None:
        """Write to a sibling temp file, then swap it in."""
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            with open(tmp_path, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
