"""
Run configuration for workload acquisition.

The configuration is built once from the command line (plus a few
environment variables for locating tools and scratch space) and passed
explicitly to every stage. It is never mutated after parsing.

Environment variables:
* WORKLOAD_ACQUIRE_DOTNET   - path of the `dotnet` executable to drive.
* WORKLOAD_ACQUIRE_TMP_DIR  - parent directory of the per-run scratch tree.
* DOTNET_ROOT               - consulted when WORKLOAD_ACQUIRE_DOTNET is unset.
"""
from __future__ import annotations

import logging
import os
import platform
import shutil
import struct
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from acquire.domain.errors import UsageError
from acquire.domain.workload_utils import placeholder_token, split_flag

logger = logging.getLogger(__name__)

DOTNET_ENV_VAR = "WORKLOAD_ACQUIRE_DOTNET"
TMP_DIR_ENV_VAR = "WORKLOAD_ACQUIRE_TMP_DIR"

MANIFEST_VERSION = "6.0.100"
TARGET_FRAMEWORK = "net6.0"
DEFAULT_PACKAGE_NAME = "Microsoft.NET.Sdk.BlazorWebAssembly.AOT"
DEFAULT_PACKAGE_VERSION = "6.0.0-*"
DEFAULT_WORKLOAD_NAME = "Microsoft.NET.Workload.BlazorWebAssembly"


def default_rid() -> str:
    """Runtime identifier of the machine we are running on."""
    if sys.platform == "win32":
        return "win-x64" if struct.calcsize("P") == 8 else "win-x86"
    if sys.platform == "darwin":
        return "osx-x64"
    if sys.platform.startswith("linux"):
        return "linux-x64"
    logger.error(f"Unsupported platform: {platform.system()}")
    return "any"


def _muxer_file_name() -> str:
    return "dotnet.exe" if sys.platform == "win32" else "dotnet"


def default_muxer_path() -> Path:
    """
    Locate the `dotnet` executable.

    Priority:
    1. Environment variable WORKLOAD_ACQUIRE_DOTNET
    2. $DOTNET_ROOT/dotnet
    3. `dotnet` on PATH
    4. The bare name, left for the OS to resolve
    """
    env_path = os.environ.get(DOTNET_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    dotnet_root = os.environ.get("DOTNET_ROOT")
    if dotnet_root:
        candidate = Path(dotnet_root).expanduser() / _muxer_file_name()
        if candidate.exists():
            return candidate

    found = shutil.which("dotnet")
    if found:
        return Path(found)
    return Path(_muxer_file_name())


def default_sdk_directory(muxer_path: Path) -> Path:
    # The muxer sits at the SDK root; PATH entries are usually symlinks to it.
    return muxer_path.resolve().parent


def default_scratch_root() -> Path:
    env_path = os.environ.get(TMP_DIR_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / "tmp"


class AcquireConfig(BaseModel):
    """
    Everything a single acquisition run needs to know.
    """

    model_config = ConfigDict(frozen=True)

    rid: str = Field(
        default_factory=default_rid,
        description="Runtime identifier used to resolve per-platform pack aliases.",
    )
    muxer_path: Path = Field(
        default_factory=default_muxer_path,
        description="The `dotnet` executable used for restores and the SDK version query.",
    )
    sdk_directory: Optional[Path] = Field(
        default=None,
        description="Root of the SDK installation to patch. Defaults to the muxer's directory.",
    )
    scratch_root: Path = Field(
        default_factory=default_scratch_root,
        description="Directory under which the per-run scratch tree is created.",
    )
    manifest_version: str = Field(
        default=MANIFEST_VERSION,
        description="Fixed manifest version label used for the sdk-manifests layout.",
    )
    target_framework: str = Field(
        default=TARGET_FRAMEWORK,
        description="Target framework of the generated restore projects.",
    )
    workload_name: str = Field(
        default=DEFAULT_WORKLOAD_NAME,
        description="Directory name of the installed manifest under sdk-manifests.",
    )
    workload_id: Optional[str] = Field(
        default=None,
        description="If set, only packs of this workload are installed.",
    )
    package_name: str = Field(
        default=DEFAULT_PACKAGE_NAME,
        description="NuGet package carrying the workload manifest.",
    )
    package_version: str = Field(
        default=DEFAULT_PACKAGE_VERSION,
        description="Version (or floating version range) of the manifest package.",
    )
    manifest_path: Optional[Path] = Field(
        default=None,
        description="Local WorkloadManifest.json (or its directory) overriding the restored one.",
    )
    versions: Dict[str, str] = Field(
        default_factory=dict,
        description="Placeholder token -> pinned version substituted into pack versions.",
    )

    @property
    def resolved_sdk_directory(self) -> Path:
        if self.sdk_directory is not None:
            return self.sdk_directory
        return default_sdk_directory(self.muxer_path)


_FLAG_FIELDS = {
    "-manifest": "manifest_path",
    "-workload": "workload_name",
    "-workloadId": "workload_id",
    "-packageName": "package_name",
    "-packageVersion": "package_version",
    "-rid": "rid",
    "-sdkPath": "sdk_directory",
}


def parse_arguments(argv: Iterable[str], defaults: Optional[AcquireConfig] = None) -> AcquireConfig:
    """
    Parse `-name:value` tokens into an AcquireConfig.

    Recognized flags: -manifest, -workload, -workloadId, -packageName,
    -packageVersion, -rid, -sdkPath and the repeatable -v:key=value.
    Raises UsageError for anything else.
    """
    base = defaults or AcquireConfig()
    overrides: Dict[str, object] = {}
    versions: Dict[str, str] = dict(base.versions)

    for arg in argv:
        parts = split_flag(arg)
        if parts is None:
            raise UsageError(f"Unknown argument: {arg}")
        name, value = parts

        if name == "-v":
            key, sep, version = value.partition("=")
            if not sep or not key:
                raise UsageError(f"Malformed argument {name}: {value}")
            versions[placeholder_token(key)] = version
        elif name in _FLAG_FIELDS:
            field_name = _FLAG_FIELDS[name]
            if field_name in ("manifest_path", "sdk_directory"):
                overrides[field_name] = Path(value)
            else:
                overrides[field_name] = value
        else:
            raise UsageError(f"Unknown argument: {name}")

    overrides["versions"] = versions
    return base.model_copy(update=overrides)
