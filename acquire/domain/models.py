"""
Pydantic models for workload manifests.

This module defines the documents read from and written back to
`WorkloadManifest.json`:
- The manifest itself (schema version, dependencies, workloads, packs)
- Workload definitions and the packs they pull in
- Pack version entries, including per-runtime-identifier aliases

JSON keys that are not valid Python identifiers (`depends-on`, `alias-to`)
are mapped through field aliases. Models are always dumped with
`by_alias=True` so the file written back keeps the original key names.
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Base Model
# ---------------------------------------------------------------------------


class ManifestModel(BaseModel):
    """
    Common behaviour of manifest documents.

    Property names are matched case-insensitively (`"Version"` reads as
    `version`). Keys that match no field are kept as extra data.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _match_property_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = {(field.alias or name).lower(): field.alias or name for name, field in cls.model_fields.items()}
        return {
            known.get(key.lower(), key) if isinstance(key, str) else key: value
            for key, value in data.items()
        }


# ---------------------------------------------------------------------------
# Pack Models
# ---------------------------------------------------------------------------


class PackVersionInformation(ManifestModel):
    """
    A single installable pack declared in the manifest's `packs` mapping.

    `version` is mutable: it may hold a placeholder token such as
    `${MicrosoftNETCoreAppVersion}` that is replaced before the pack is
    restored.
    """

    kind: Optional[str] = Field(
        default=None,
        description="Pack kind (e.g. 'sdk', 'framework', 'library', 'template').",
    )
    version: str = Field(
        description="Pack version, or a placeholder token to be substituted.",
    )
    alias_to: Optional[Dict[str, str]] = Field(
        default=None,
        alias="alias-to",
        description="Runtime identifier -> package id actually delivering this pack on that platform.",
    )

    def delivery_package(self, pack_id: str, rid: str) -> Optional[str]:
        """
        Return the NuGet package that delivers this pack for `rid`.

        Packs without an alias map are delivered by a package named after the
        pack itself. Aliased packs are delivered by the package mapped to
        `rid`, or by nothing at all when the map has no entry for it.
        """
        if self.alias_to is None:
            return pack_id
        package_name = self.alias_to.get(rid)
        return package_name or None


# ---------------------------------------------------------------------------
# Workload Models
# ---------------------------------------------------------------------------


class WorkloadInformation(ManifestModel):
    """
    A workload definition: the set of packs it installs and the workloads it
    builds upon.
    """

    abstract: bool = Field(
        default=False,
        description="Abstract workloads can only be used through 'extends'.",
    )
    kind: Optional[str] = Field(default=None, description="Workload kind ('dev' or 'build').")
    description: Optional[str] = Field(default=None, description="Human-friendly description.")
    packs: Optional[List[str]] = Field(
        default=None,
        description="Ids of the packs this workload installs. Each must be a key of the manifest's packs.",
    )
    extends: Optional[List[str]] = Field(
        default=None,
        description="Ids of workloads this workload extends.",
    )
    platforms: Optional[List[str]] = Field(
        default=None,
        description="Runtime identifiers this workload is supported on.",
    )


# ---------------------------------------------------------------------------
# Manifest Models
# ---------------------------------------------------------------------------


class ManifestInformation(ManifestModel):
    """
    Top-level workload manifest document.

    Persisted at: <sdk>/sdk-manifests/<manifest version>/<workload name>/WorkloadManifest.json
    """

    version: Union[int, str] = Field(
        default=0,
        description="Manifest schema version.",
    )
    description: Optional[str] = Field(default=None, description="Free-text manifest description.")
    depends_on: Optional[Dict[str, Union[int, str]]] = Field(
        default=None,
        alias="depends-on",
        description="Manifest id -> minimum required version of that manifest.",
    )
    workloads: Optional[Dict[str, WorkloadInformation]] = Field(
        default=None,
        description="Workload id -> workload definition.",
    )
    packs: Optional[Dict[str, PackVersionInformation]] = Field(
        default=None,
        description="Pack id -> pack version entry. Key order is the install order.",
    )
    data: Optional[Any] = Field(
        default=None,
        description="Opaque extension data, preserved round-trip.",
    )

    def find_workload(self, workload_id: str) -> Optional[WorkloadInformation]:
        return (self.workloads or {}).get(workload_id)

    def find_pack(self, pack_id: str) -> Optional[PackVersionInformation]:
        return (self.packs or {}).get(pack_id)


class ResolvedPack(NamedTuple):
    """A concrete NuGet package to restore and install for one pack."""

    package_name: str
    version: str
