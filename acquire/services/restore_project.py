"""
Rendering of the throwaway MSBuild projects used to drive `dotnet restore`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
from xml.sax.saxutils import quoteattr

from acquire.domain.models import ResolvedPack

# Empty Directory.Build.* files stop MSBuild from importing customizations
# from whatever directory tree the scratch folder happens to live in.
BUILD_SUPPRESSION_FILES = ("Directory.Build.props", "Directory.Build.targets")
EMPTY_PROJECT = "<Project />"

# NU1213: package has a package type that is not supported by the project.
PACKS_NO_WARN = "$(NoWarn);NU1213"


def write_build_suppression_files(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in BUILD_SUPPRESSION_FILES:
        (directory / name).write_text(EMPTY_PROJECT, encoding="utf-8")


def _package_reference(package_name: str, version: str) -> str:
    return f"        <PackageReference Include={quoteattr(package_name)} Version={quoteattr(version)} />"


def _render_project(framework: str, references: Iterable[str], no_warn: str = "") -> str:
    lines: List[str] = [
        '<Project Sdk="Microsoft.NET.Sdk">',
        "    <PropertyGroup>",
        f"        <TargetFramework>{framework}</TargetFramework>",
    ]
    if no_warn:
        lines.append(f"        <NoWarn>{no_warn}</NoWarn>")
    lines.append("    </PropertyGroup>")
    lines.append("    <ItemGroup>")
    lines.extend(references)
    lines.append("    </ItemGroup>")
    lines.append("</Project>")
    lines.append("")
    return "\n".join(lines)


def render_manifest_project(package_name: str, package_version: str, framework: str) -> str:
    """Project referencing only the workload manifest package."""
    return _render_project(framework, [_package_reference(package_name, package_version)])


def render_packs_project(packs: Iterable[ResolvedPack], framework: str) -> str:
    """Project referencing every resolved pack, in order."""
    references = [_package_reference(pack.package_name, pack.version) for pack in packs]
    return _render_project(framework, references, no_warn=PACKS_NO_WARN)


def write_project(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
