"""Helper utilities for constructing temporary Go modules in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from godocgen.extractor import PackageExtractor
from godocgen.models import PackageDoc

IMPORT_ROOT = "github.com/acme/tools"


class GoModuleBuilder:
    """Utility for writing Go sources into a throwaway module and extracting them."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "module"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the module."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def extract(self, package: str, **options: bool) -> PackageDoc:
        """Return a freshly extracted model for ``package``."""
        extractor = PackageExtractor(self.root, IMPORT_ROOT, **options)
        return extractor.extract(package)

    def path(self) -> Path:
        """Return the module root path."""
        return self.root


__all__ = ["GoModuleBuilder", "IMPORT_ROOT"]
