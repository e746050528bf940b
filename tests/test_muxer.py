import os
import sys
from pathlib import Path

import pytest

from acquire.core.muxer import DotnetMuxer
from acquire.domain.errors import SdkVersionError

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script as dotnet")

FAKE_DOTNET = """#!/bin/sh
if [ "$1" = "--version" ]; then
  if [ -n "$FAKE_DOTNET_FAIL" ]; then
    echo "host failure" >&2
    exit 145
  fi
  printf '  %s  \\n' "${FAKE_DOTNET_VERSION-6.0.100-rc.1.21463.6}"
  exit 0
fi
echo "NUGET_PACKAGES=$NUGET_PACKAGES"
echo "ARGS=$*"
echo "NUGET_PACKAGES=$NUGET_PACKAGES ARGS=$*" > "$(dirname "$0")/restore.log"
exit ${FAKE_DOTNET_EXIT:-0}
"""


@pytest.fixture
def dotnet(tmp_path: Path) -> DotnetMuxer:
    script = tmp_path / "dotnet"
    script.write_text(FAKE_DOTNET, encoding="utf-8")
    os.chmod(script, 0o755)
    return DotnetMuxer(script)


def test_restore_redirects_packages_folder(dotnet, tmp_path):
    project = tmp_path / "restore" / "Restore.csproj"
    packages = tmp_path / ".nuget"

    result = dotnet.restore(project, packages, capture_output=True)

    assert result.succeeded
    assert f"NUGET_PACKAGES={packages}" in result.output
    assert f"ARGS=restore {project}" in result.output


def test_restore_without_capture_streams_output(dotnet, tmp_path):
    project = tmp_path / "Restore.csproj"
    packages = tmp_path / ".nuget"

    result = dotnet.restore(project, packages)

    assert result.returncode == 0
    assert result.output is None
    assert (tmp_path / "restore.log").read_text().strip() == f"NUGET_PACKAGES={packages} ARGS=restore {project}"


def test_restore_reports_exit_code(dotnet, tmp_path, monkeypatch):
    monkeypatch.setenv("FAKE_DOTNET_EXIT", "1")

    result = dotnet.restore(tmp_path / "Restore.csproj", tmp_path / ".nuget", capture_output=True)

    assert not result.succeeded
    assert result.returncode == 1


def test_restore_does_not_leak_packages_folder_into_environment(dotnet, tmp_path, monkeypatch):
    monkeypatch.delenv("NUGET_PACKAGES", raising=False)
    dotnet.restore(tmp_path / "Restore.csproj", tmp_path / ".nuget", capture_output=True)
    assert "NUGET_PACKAGES" not in os.environ


def test_sdk_version_is_trimmed(dotnet):
    assert dotnet.sdk_version() == "6.0.100-rc.1.21463.6"


def test_sdk_version_failure_names_the_muxer(dotnet, monkeypatch):
    monkeypatch.setenv("FAKE_DOTNET_FAIL", "1")

    with pytest.raises(SdkVersionError) as exc:
        dotnet.sdk_version()

    assert str(dotnet.path) in str(exc.value)
    assert "145" in str(exc.value)
    assert exc.value.exit_code == 1


def test_empty_sdk_version_is_an_error(dotnet, monkeypatch):
    monkeypatch.setenv("FAKE_DOTNET_VERSION", "")

    with pytest.raises(SdkVersionError, match="no SDK version"):
        dotnet.sdk_version()
