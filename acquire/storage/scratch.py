from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

RESTORE_DIR_NAME = ".nuget"
RESTORE_PROJECT_DIR_NAME = "restore"
RESTORE_PROJECT_NAME = "Restore.csproj"


@dataclass(frozen=True)
class ScratchDirectory:
    """
    A run-scoped scratch tree:

        <path>/
            .nuget/                   redirected NuGet global packages folder
            restore/Restore.csproj    generated restore project
    """

    path: Path

    @property
    def restore_directory(self) -> Path:
        return self.path / RESTORE_DIR_NAME

    @property
    def project_path(self) -> Path:
        return self.path / RESTORE_PROJECT_DIR_NAME / RESTORE_PROJECT_NAME

    def package_directory(self, folder_name: str) -> Path:
        return self.restore_directory / folder_name


@contextmanager
def scratch_directory(root: Path) -> Iterator[ScratchDirectory]:
    """
    Create a uniquely named scratch tree under `root` and remove it when the
    block exits, however it exits.
    """
    root.mkdir(parents=True, exist_ok=True)
    scratch = ScratchDirectory(Path(tempfile.mkdtemp(dir=root)))
    logger.debug(f"Using scratch directory {scratch.path}")
    try:
        yield scratch
    finally:
        if scratch.path.exists():
            shutil.rmtree(scratch.path)
            logger.debug(f"Removed scratch directory {scratch.path}")
