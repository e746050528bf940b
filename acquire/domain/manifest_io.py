"""
Reading and writing `WorkloadManifest.json`.

Manifests are hand-edited and routinely carry comments and trailing commas,
so they are read with the JSON5 parser. They are written back indented, with
null fields dropped.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import json5
from pydantic import ValidationError

from acquire.domain.errors import ManifestNotFoundError
from acquire.domain.models import ManifestInformation

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "WorkloadManifest.json"
TARGETS_FILE_NAME = "WorkloadManifest.targets"


def parse_manifest(text: str) -> ManifestInformation:
    payload = json5.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Workload manifest must be a JSON object.")
    return ManifestInformation.model_validate(payload)


def load_manifest(path: Path) -> ManifestInformation:
    if not path.is_file():
        raise ManifestNotFoundError(f"Workload manifest not found: {path}")
    logger.debug(f"Loading workload manifest from {path}")
    try:
        return parse_manifest(path.read_text(encoding="utf-8-sig"))
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse workload manifest {path}: {e}")
        raise


def dump_manifest(manifest: ManifestInformation) -> str:
    return manifest.model_dump_json(indent=2, by_alias=True, exclude_none=True)


def save_manifest(manifest: ManifestInformation, path: Path) -> Path:
    path.write_text(dump_manifest(manifest), encoding="utf-8")
    return path


def apply_version_overrides(manifest: ManifestInformation, versions: Dict[str, str]) -> List[str]:
    """
    Replace every pack version that exactly equals an override key.

    Returns the ids of the packs whose version changed.
    """
    changed: List[str] = []
    if not versions:
        return changed
    for pack_id, pack in (manifest.packs or {}).items():
        replacement = versions.get(pack.version)
        if replacement is None:
            continue
        logger.debug(f"Pinning {pack_id}: {pack.version} -> {replacement}")
        pack.version = replacement
        changed.append(pack_id)
    return changed
