"""
Download sinks - where finished export artifacts are delivered.

An artifact reaches a sink only after it is completely built. The
filesystem sink writes through a temporary file in the target directory
and renames it into place, so a reader never sees a partial file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union

from reports.exceptions import ExportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportArtifact:
    """A finished export file held in memory."""
    filename: str
    content: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.content)


class DownloadSink(Protocol):
    """Receives finished artifacts; returns where the file ended up."""

    def save(self, artifact: ExportArtifact) -> str:
        ...


class FileSystemDownloadSink:
    """Save artifacts into a downloads directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def save(self, artifact: ExportArtifact) -> str:
        target = self.directory / Path(artifact.filename).name
        tmp_name: Optional[str] = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self.directory,
                prefix=".download-",
                suffix=".part",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(artifact.content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to save {artifact.filename}: {e}")
            raise ExportError(f"Could not save {artifact.filename}: {e}") from e

        logger.info(f"Export saved to: {target}")
        return str(target)


class MemoryDownloadSink:
    """Keep artifacts in memory, e.g. to stream them from a web handler."""

    def __init__(self):
        self.artifacts: List[ExportArtifact] = []

    def save(self, artifact: ExportArtifact) -> str:
        self.artifacts.append(artifact)
        return artifact.filename

    @property
    def last(self) -> Optional[ExportArtifact]:
        return self.artifacts[-1] if self.artifacts else None
