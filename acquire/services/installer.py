"""
Move restored artifacts from the scratch cache into the SDK tree and flag the
SDK as workload-aware.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from acquire.core.config import AcquireConfig
from acquire.core.muxer import SdkMuxer
from acquire.domain.errors import SdkVersionError
from acquire.domain.models import ResolvedPack
from acquire.domain.workload_utils import package_folder_name
from acquire.storage.scratch import ScratchDirectory
from acquire.storage.sdk_tree import SdkTree, move_directory, write_sentinel

logger = logging.getLogger(__name__)


class WorkloadInstaller:
    """
    Installs the acquired manifest and packs.

    Moves are applied one at a time; a failure part way leaves earlier moves
    in place.
    """

    def __init__(self, config: AcquireConfig, muxer: SdkMuxer):
        self.config = config
        self.muxer = muxer
        self.tree = SdkTree(config.resolved_sdk_directory)

    def install_manifest(self, manifest_dir: Path) -> Path:
        destination = self.tree.manifest_directory(self.config.manifest_version, self.config.workload_name)
        move_directory(manifest_dir, destination)
        return destination

    def install_packs(self, packs: Iterable[ResolvedPack], scratch: ScratchDirectory) -> None:
        for pack in packs:
            source = scratch.package_directory(package_folder_name(pack.package_name)) / pack.version
            move_directory(source, self.tree.pack_directory(pack.package_name, pack.version))

    def enable_workload_resolver(self) -> Path:
        sdk_version = self.muxer.sdk_version()
        if not sdk_version.strip():
            raise SdkVersionError("The SDK reported an empty version; cannot place the workload resolver sentinel")
        return write_sentinel(self.tree.sentinel_path(sdk_version))
