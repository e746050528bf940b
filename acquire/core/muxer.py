"""
Access to the SDK's `dotnet` executable (the "muxer").

Restores and the SDK version query are delegated to the real tool. They run
synchronously with no timeout.
"""
from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import NamedTuple, Optional

from acquire.domain.errors import SdkVersionError

logger = logging.getLogger(__name__)

PACKAGES_ENV_VAR = "NUGET_PACKAGES"


class RestoreResult(NamedTuple):
    returncode: int
    output: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class SdkMuxer(ABC):
    """
    Abstract base class for the external SDK tool.
    """

    @abstractmethod
    def restore(self, project: Path, packages_dir: Path, capture_output: bool = False) -> RestoreResult:
        """
        Restore `project` with the global packages folder redirected to `packages_dir`.
        When `capture_output` is set, the tool's stdout/stderr are returned instead of shown.
        """
        pass

    @abstractmethod
    def sdk_version(self) -> str:
        """Return the active SDK version. Raises SdkVersionError if none is reported."""
        pass


class DotnetMuxer(SdkMuxer):
    def __init__(self, path: Path):
        self.path = path

    def restore(self, project: Path, packages_dir: Path, capture_output: bool = False) -> RestoreResult:
        env = dict(os.environ)
        env[PACKAGES_ENV_VAR] = str(packages_dir)
        command = [str(self.path), "restore", str(project)]
        logger.debug(f"Running {' '.join(command)} ({PACKAGES_ENV_VAR}={packages_dir})")

        if capture_output:
            proc = subprocess.run(
                command,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
            return RestoreResult(proc.returncode, proc.stdout)

        proc = subprocess.run(command, env=env)
        return RestoreResult(proc.returncode)

    def sdk_version(self) -> str:
        proc = subprocess.run(
            [str(self.path), "--version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        version = proc.stdout.strip()
        if proc.returncode != 0:
            if proc.stderr:
                logger.error(proc.stderr.rstrip())
            raise SdkVersionError(f"{self.path} --version exited with code {proc.returncode}")
        if not version:
            raise SdkVersionError(f"{self.path} --version reported no SDK version")
        return version
