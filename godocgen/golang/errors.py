"""Failures raised while extracting documentation from a Go package."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class ExtractionError(RuntimeError):
    """Base class for failures that abort extraction of a single package."""


class LocateError(ExtractionError):
    """Raised when no candidate directory exists for a package."""

    def __init__(self, package: str, candidates: Sequence[Path]) -> None:
        self.package = package
        self.candidates = tuple(candidates)
        super().__init__(f"package directory not found for {package}")


class ParseError(ExtractionError):
    """Raised when a package directory yields no parseable Go source."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class PackageNotFound(ExtractionError):
    """Raised when parsed files only declare external test packages."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        super().__init__(f"no package found in {directory}")


__all__ = ["ExtractionError", "LocateError", "PackageNotFound", "ParseError"]
