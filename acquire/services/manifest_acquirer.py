"""
Acquire the workload manifest by restoring its NuGet package into the
scratch cache.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from acquire.core.config import AcquireConfig
from acquire.core.muxer import SdkMuxer
from acquire.domain.errors import ManifestNotFoundError, RestoreError
from acquire.domain.manifest_io import (
    MANIFEST_FILE_NAME,
    TARGETS_FILE_NAME,
    apply_version_overrides,
    load_manifest,
    save_manifest,
)
from acquire.domain.models import ManifestInformation
from acquire.domain.workload_utils import package_folder_name
from acquire.services.restore_project import (
    render_manifest_project,
    write_build_suppression_files,
    write_project,
)
from acquire.storage.scratch import ScratchDirectory

logger = logging.getLogger(__name__)


@dataclass
class AcquiredManifest:
    """The pinned manifest and the scratch directory holding it."""

    directory: Path
    manifest: ManifestInformation


class ManifestAcquirer:
    """Restores the manifest package and prepares its manifest for install."""

    def __init__(self, config: AcquireConfig, muxer: SdkMuxer):
        self.config = config
        self.muxer = muxer

    def acquire(self, scratch: ScratchDirectory) -> AcquiredManifest:
        self._restore_manifest_package(scratch)
        manifest_dir = self._normalize_version_directory(scratch)

        source = self._apply_local_manifest(manifest_dir)
        manifest = load_manifest(source)

        pinned = apply_version_overrides(manifest, self.config.versions)
        if pinned:
            logger.info(f"Pinned versions of {len(pinned)} pack(s): {', '.join(pinned)}")

        save_manifest(manifest, manifest_dir / MANIFEST_FILE_NAME)
        return AcquiredManifest(directory=manifest_dir, manifest=manifest)

    def _restore_manifest_package(self, scratch: ScratchDirectory) -> None:
        project = scratch.project_path
        write_build_suppression_files(project.parent)
        write_project(
            project,
            render_manifest_project(
                self.config.package_name,
                self.config.package_version,
                self.config.target_framework,
            ),
        )

        logger.info("Restoring...")
        result = self.muxer.restore(project, scratch.restore_directory)
        if not result.succeeded:
            raise RestoreError(
                f"Unable to restore {self.config.package_name} workload.",
                returncode=result.returncode,
                output=result.output,
            )

    def _normalize_version_directory(self, scratch: ScratchDirectory) -> Path:
        """
        Rename whatever version folder the package restored into to the fixed
        manifest version the SDK layout expects.
        """
        package_dir = scratch.package_directory(package_folder_name(self.config.package_name))
        manifest_dir = package_dir / self.config.manifest_version
        if manifest_dir.is_dir():
            return manifest_dir

        version_dirs = sorted(p for p in package_dir.iterdir() if p.is_dir()) if package_dir.is_dir() else []
        if not version_dirs:
            raise ManifestNotFoundError(
                f"Restore of {self.config.package_name} produced no version directory under {package_dir}"
            )
        if len(version_dirs) > 1:
            logger.warning(
                f"Found {len(version_dirs)} versions of {self.config.package_name}; using {version_dirs[0].name}"
            )

        version_dirs[0].rename(manifest_dir)
        return manifest_dir

    def _local_manifest_sources(self) -> Tuple[Optional[Path], Optional[Path]]:
        """
        Returns (directory to take WorkloadManifest.targets from, manifest file
        replacing the restored one). Either may be None.
        """
        manifest_path = self.config.manifest_path
        if manifest_path is None:
            return None, None
        if manifest_path.is_dir():
            return manifest_path, None
        return manifest_path.parent, manifest_path

    def _apply_local_manifest(self, manifest_dir: Path) -> Path:
        source_dir, manifest_override = self._local_manifest_sources()

        if source_dir is not None:
            targets_path = source_dir / TARGETS_FILE_NAME
            if targets_path.is_file():
                target = manifest_dir / TARGETS_FILE_NAME
                logger.warning(f"Copying targets : {targets_path} -> {target}")
                shutil.copyfile(targets_path, target)

        if manifest_override is not None:
            logger.warning(f"Using local manifest {manifest_override}")
            return manifest_override
        return manifest_dir / MANIFEST_FILE_NAME
