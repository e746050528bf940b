"""
Resolve the packs a workload needs into concrete NuGet packages and restore
them into the scratch cache.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Set

from acquire.core.muxer import SdkMuxer
from acquire.domain.errors import ManifestLookupError, RestoreError
from acquire.domain.models import ManifestInformation, ResolvedPack
from acquire.services.restore_project import render_packs_project, write_project
from acquire.storage.scratch import ScratchDirectory

logger = logging.getLogger(__name__)


def workload_pack_ids(manifest: ManifestInformation, workload_id: Optional[str]) -> Optional[Set[str]]:
    """
    Pack ids to consider for `workload_id`, or None to consider every pack.

    Raises ManifestLookupError if the workload, or any pack it lists, is not
    declared in the manifest.
    """
    if workload_id is None:
        return None

    workload = manifest.find_workload(workload_id)
    if workload is None:
        raise ManifestLookupError("Workload", workload_id)

    pack_ids = list(workload.packs or [])
    for pack_id in pack_ids:
        if manifest.find_pack(pack_id) is None:
            raise ManifestLookupError("Pack", pack_id)
    return set(pack_ids)


def resolve_packs(
    manifest: ManifestInformation,
    rid: str,
    workload_id: Optional[str] = None,
) -> List[ResolvedPack]:
    """
    Map manifest packs to (package name, version) pairs in manifest order.

    Aliased packs resolve through their runtime identifier map and are
    skipped when `rid` is not in it.
    """
    subset = workload_pack_ids(manifest, workload_id)
    resolved: List[ResolvedPack] = []

    for pack_id, pack in (manifest.packs or {}).items():
        if subset is not None and pack_id not in subset:
            continue

        package_name = pack.delivery_package(pack_id, rid)
        if package_name is None:
            logger.debug(f"Skipping {pack_id}: no alias for {rid}")
            continue

        resolved.append(ResolvedPack(package_name, pack.version))

    return resolved


def restore_packs(
    packs: List[ResolvedPack],
    scratch: ScratchDirectory,
    muxer: SdkMuxer,
    framework: str,
) -> None:
    """Restore every resolved pack into the scratch cache with one project."""
    project = write_project(scratch.project_path, render_packs_project(packs, framework))

    logger.info(f"Restoring {len(packs)} pack(s)...")
    result = muxer.restore(project, scratch.restore_directory, capture_output=True)
    if not result.succeeded:
        if result.output:
            logger.error(result.output.rstrip())
        names = ", ".join(f"{pack.package_name} {pack.version}" for pack in packs)
        raise RestoreError(
            f"Unable to restore workload packs: {names}",
            returncode=result.returncode,
            output=result.output,
        )
