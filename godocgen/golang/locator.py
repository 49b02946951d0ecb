"""Package directory resolution and source file selection."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Sequence

from ..logging import get_logger
from .errors import LocateError

SOURCE_SUFFIX = ".go"
TEST_FILE_SUFFIX = "_test.go"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    "node_modules",
    "vendor",
    "testdata",
}

logger = get_logger("locator")


class UnitFilter:
    """Accepts Go source files and rejects test files and everything else."""

    def __init__(
        self, source_suffix: str = SOURCE_SUFFIX, test_suffix: str = TEST_FILE_SUFFIX
    ) -> None:
        self.source_suffix = source_suffix
        self.test_suffix = test_suffix

    def __call__(self, filename: str) -> bool:
        return self.accepts(filename)

    def accepts(self, filename: str) -> bool:
        if filename.endswith(self.test_suffix):
            return False
        return filename.endswith(self.source_suffix)

    def select(self, directory: Path) -> List[Path]:
        """Return eligible files in ``directory`` sorted by name."""
        return sorted(
            entry
            for entry in directory.iterdir()
            if entry.is_file() and self.accepts(entry.name)
        )


class SourceLocator:
    """Resolves a package name to the directory holding its sources."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def candidates(self, package: str, path: str | None = None) -> List[Path]:
        candidates: List[Path] = []
        if path:
            candidates.append(self.root / path)
        candidates.append(self.root / package)
        candidates.append(self.root)
        return candidates

    def locate(self, package: str, path: str | None = None) -> Path:
        """Return the first existing candidate directory for ``package``."""
        candidates = self.candidates(package, path)
        for candidate in candidates:
            if candidate.is_dir():
                logger.debug("Resolved package %s to %s", package, candidate)
                return candidate
        raise LocateError(package, candidates)


def discover_packages(
    root: Path,
    exclude_patterns: Sequence[str] = (),
    *,
    unit_filter: UnitFilter | None = None,
) -> List[str]:
    """Return package names for every directory under ``root`` holding Go sources.

    Names are slash-separated paths relative to ``root``; a package living in
    ``root`` itself is named after the directory so that the locator's root
    fallback resolves it.
    """
    unit_filter = unit_filter or UnitFilter()
    root = Path(root)
    names: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix() if current != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS or name.startswith((".", "_")):
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(rel_path, exclude_patterns):
                continue
            kept.append(name)
        dirnames[:] = kept

        if not any(unit_filter.accepts(filename) for filename in filenames):
            continue
        if rel_dir:
            names.append(rel_dir)
        else:
            names.append(root.resolve().name)
    return names


def _is_excluded(rel_path: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        cleaned = pattern.strip().strip("/")
        if not cleaned:
            continue
        if fnmatchcase(rel_path, cleaned):
            return True
        if "/" not in cleaned and any(fnmatchcase(part, cleaned) for part in rel_path.split("/")):
            return True
    return False


__all__ = [
    "SOURCE_SUFFIX",
    "TEST_FILE_SUFFIX",
    "SourceLocator",
    "UnitFilter",
    "discover_packages",
]
