"""
Fatal error conditions raised while acquiring a workload.

Each error carries the process exit code `main` returns for it. Filesystem
errors during the install phase are intentionally not wrapped here.
"""
from __future__ import annotations

from typing import Optional


class AcquireError(Exception):
    """Base class for classified, fatal acquisition failures."""

    exit_code: int = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(AcquireError):
    """Malformed or unrecognized command-line argument."""


class RestoreError(AcquireError):
    """The external package restore returned a non-zero exit code."""

    def __init__(self, message: str, returncode: int, output: Optional[str] = None):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class ManifestNotFoundError(AcquireError):
    """The restored package does not contain the expected manifest layout."""


class ManifestLookupError(AcquireError, KeyError):
    """A workload id or pack id referenced by the request is not in the manifest."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' is not declared in the workload manifest")
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class SdkVersionError(AcquireError):
    """The SDK did not report a usable version."""
