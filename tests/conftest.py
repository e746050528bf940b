import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from acquire.core.muxer import RestoreResult, SdkMuxer
from acquire.storage.scratch import ScratchDirectory

MANIFEST_PACKAGE = "Contoso.NET.Workload.Manifest"
SDK_VERSION = "6.0.100-preview.4.21255.9"


class FakeMuxer(SdkMuxer):
    """
    Stands in for `dotnet`: each restore lays out the referenced packages in
    the redirected packages folder the way NuGet does.
    """

    def __init__(
        self,
        manifest: Optional[dict] = None,
        manifest_package: str = MANIFEST_PACKAGE,
        manifest_folder: str = "6.0.0-preview.4.21253.7",
        sdk_version: str = SDK_VERSION,
        restore_codes: Sequence[int] = (),
    ):
        self.manifest = manifest or {}
        self.manifest_package = manifest_package
        self.manifest_folder = manifest_folder
        self.version = sdk_version
        self.restore_codes = list(restore_codes)
        self.restored: List[List[tuple]] = []
        self.capture_flags: List[bool] = []

    def restore(self, project: Path, packages_dir: Path, capture_output: bool = False) -> RestoreResult:
        self.capture_flags.append(capture_output)
        references = [
            (ref.get("Include"), ref.get("Version"))
            for ref in ET.parse(project).getroot().iter("PackageReference")
        ]
        self.restored.append(references)

        code = self.restore_codes[len(self.restored) - 1] if len(self.restored) <= len(self.restore_codes) else 0
        if code != 0:
            return RestoreResult(code, "error NU1101: Unable to find package" if capture_output else None)

        for name, version in references:
            if name == self.manifest_package:
                folder = packages_dir / name.lower() / self.manifest_folder
                folder.mkdir(parents=True, exist_ok=True)
                (folder / "WorkloadManifest.json").write_text(json.dumps(self.manifest), encoding="utf-8")
            else:
                folder = packages_dir / name.lower() / version
                folder.mkdir(parents=True, exist_ok=True)
                (folder / f"{name.lower()}.nuspec").write_text(name, encoding="utf-8")
        return RestoreResult(0, "" if capture_output else None)

    def sdk_version(self) -> str:
        return self.version


@pytest.fixture
def sdk_root(tmp_path: Path) -> Path:
    root = tmp_path / "dotnet"
    (root / "sdk" / SDK_VERSION).mkdir(parents=True)
    return root


@pytest.fixture
def scratch_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "tmp"
    monkeypatch.setenv("WORKLOAD_ACQUIRE_TMP_DIR", str(root))
    return root


@pytest.fixture
def scratch(tmp_path: Path) -> ScratchDirectory:
    path = tmp_path / "scratch"
    path.mkdir()
    return ScratchDirectory(path)
