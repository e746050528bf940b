from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SENTINEL_FILE_NAME = "EnableWorkloadResolver.sentinel"


@dataclass(frozen=True)
class SdkTree:
    """Paths inside an SDK installation root."""

    root: Path

    def manifest_directory(self, manifest_version: str, workload_name: str) -> Path:
        return self.root / "sdk-manifests" / manifest_version / workload_name

    def pack_directory(self, package_name: str, version: str) -> Path:
        return self.root / "packs" / package_name / version

    def sentinel_path(self, sdk_version: str) -> Path:
        return self.root / "sdk" / sdk_version / SENTINEL_FILE_NAME


def move_directory(source: Path, destination: Path) -> None:
    """
    Move `source` to `destination`, replacing whatever is there.

    The destination is deleted first (no merge), then its parent is created
    as needed and the source is moved into place.
    """
    logger.info(f"Moving {source} to {destination}...")
    if destination.exists():
        shutil.rmtree(destination)

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))


def write_sentinel(path: Path) -> Path:
    # The sdk/<version> directory belongs to the SDK; it is not created here.
    logger.info(f"Writing sentinel to {path}.")
    path.write_bytes(b"")
    return path
