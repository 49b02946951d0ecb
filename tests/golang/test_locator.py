"""Tests for package location, file selection and discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from godocgen.golang.errors import LocateError
from godocgen.golang.locator import SourceLocator, UnitFilter, discover_packages
from tests._fixtures.go_builder import GoModuleBuilder


def test_unit_filter_accepts_only_non_test_go_files() -> None:
    unit_filter = UnitFilter()

    assert unit_filter("widget.go") is True
    assert unit_filter("widget_test.go") is False
    assert unit_filter("README.md") is False
    assert unit_filter("widget.go.orig") is False


def test_unit_filter_selects_sorted_files(go_module: GoModuleBuilder) -> None:
    go_module.write(
        {
            "pkg/b.go": "package pkg\n",
            "pkg/a.go": "package pkg\n",
            "pkg/a_test.go": "package pkg\n",
            "pkg/notes.txt": "ignored\n",
        }
    )

    selected = UnitFilter().select(go_module.path() / "pkg")

    assert [path.name for path in selected] == ["a.go", "b.go"]


def test_locator_prefers_package_directory(go_module: GoModuleBuilder) -> None:
    go_module.write({"widget/widget.go": "package widget\n"})
    locator = SourceLocator(go_module.path())

    assert locator.locate("widget") == go_module.path() / "widget"


def test_locator_falls_back_to_root(go_module: GoModuleBuilder) -> None:
    go_module.write({"main.go": "package tools\n"})
    locator = SourceLocator(go_module.path())

    assert locator.locate("tools") == go_module.path()


def test_locator_skips_files_named_like_the_package(go_module: GoModuleBuilder) -> None:
    go_module.write({"main.go": "package tools\n", "tools": "binary\n"})
    locator = SourceLocator(go_module.path())

    assert locator.locate("tools") == go_module.path()


def test_locator_probes_explicit_path_first(go_module: GoModuleBuilder) -> None:
    go_module.write(
        {
            "services/api/api.go": "package api\n",
            "api/api.go": "package api\n",
        }
    )
    locator = SourceLocator(go_module.path())

    assert locator.locate("api", "services/api") == go_module.path() / "services" / "api"


def test_locator_raises_when_no_candidate_exists(tmp_path: Path) -> None:
    locator = SourceLocator(tmp_path / "absent")

    with pytest.raises(LocateError) as excinfo:
        locator.locate("missing")

    assert excinfo.value.package == "missing"
    assert "missing" in str(excinfo.value)
    assert len(excinfo.value.candidates) == 2


def test_discover_packages_skips_excluded_directories(go_module: GoModuleBuilder) -> None:
    go_module.write(
        {
            "root.go": "package tools\n",
            "widget/widget.go": "package widget\n",
            "widget/internal/gen/gen.go": "package gen\n",
            "cache/cache_test.go": "package cache\n",
            "vendor/dep/dep.go": "package dep\n",
            "testdata/sample.go": "package sample\n",
            ".hidden/x.go": "package x\n",
            "_scratch/y.go": "package y\n",
            "docs/readme.md": "# docs\n",
        }
    )

    names = discover_packages(go_module.path(), exclude_patterns=["internal"])

    assert names == ["module", "widget"]
