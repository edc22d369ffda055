from __future__ import annotations

import os


class ManifestError(Exception):
    """
    Base exception for manifest loading failures raised in strict mode.
    """

    pass


class ManifestNotFoundError(ManifestError, FileNotFoundError):
    """
    Raised when no manifest file exists at the requested path.
    """

    def __init__(self, path: "str | os.PathLike[str]") -> None:
        self.path = os.fspath(path)
        super().__init__(f"Manifest file not found at: {self.path}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidManifestError(ManifestError, ValueError):
    """
    Raised when a manifest parses as JSON but is not a JSON object.
    """

    pass
