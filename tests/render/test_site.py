"""Tests for site-level pages."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from godocgen.config import GodocgenConfig, PackageConfig, RepositoryConfig
from godocgen.render import SiteBuilder


def _config(tmp_path: Path) -> GodocgenConfig:
    return GodocgenConfig(
        project_dir=tmp_path,
        repository=RepositoryConfig(
            name="tools", owner="acme", import_path="github.com/acme/tools"
        ),
        packages=[PackageConfig(name="widget"), PackageConfig(name="gear")],
    )


def _templates(tmp_path: Path, files: dict) -> None:
    templates = tmp_path / "templates"
    templates.mkdir(exist_ok=True)
    for name, content in files.items():
        (templates / name).write_text(content, encoding="utf-8")


def test_create_structure(tmp_path: Path) -> None:
    directories = SiteBuilder(_config(tmp_path)).create_structure()

    docs = tmp_path / "docs"
    assert directories[0] == docs
    assert sorted(path.name for path in docs.iterdir()) == [
        "api-reference",
        "examples",
        "getting-started",
        "guides",
        "packages",
    ]


def test_shared_templates_render_into_docs(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _templates(
        tmp_path,
        {
            "intro.md": "{{ name }} by {{ owner }} ({{ import_path }})\n",
            "broken.md": "{% if %}\n",
            "notes.txt": "ignored\n",
        },
    )

    with caplog.at_level(logging.WARNING, logger="godocgen"):
        written = SiteBuilder(_config(tmp_path)).process_shared_templates()

    docs = tmp_path / "docs"
    assert written == [docs / "intro.md"]
    assert (docs / "intro.md").read_text(encoding="utf-8") == (
        "tools by acme (github.com/acme/tools)\n"
    )
    assert not (docs / "notes.txt").exists()
    assert "Failed to process template" in caplog.text


def test_shared_templates_without_templates_dir(tmp_path: Path) -> None:
    assert SiteBuilder(_config(tmp_path)).process_shared_templates() == []


def test_generate_indexes_renders_available_templates(tmp_path: Path) -> None:
    _templates(
        tmp_path,
        {
            "packages-index.md": "{% for package in packages %}{{ package.name }};{% endfor %}\n",
            "faq.md": "FAQ for {{ name }}\n",
        },
    )

    written = SiteBuilder(_config(tmp_path)).generate_indexes()

    docs = tmp_path / "docs"
    assert written == [
        docs / "packages" / "README.md",
        tmp_path / ".gitbook.yaml",
        docs / "guides" / "faq.md",
    ]
    assert (docs / "packages" / "README.md").read_text(encoding="utf-8") == "widget;gear;"
    assert not (docs / "getting-started" / "README.md").exists()
    assert (tmp_path / ".gitbook.yaml").read_text(encoding="utf-8") == (
        "root: ./docs\n\nstructure:\n  readme: README.md\n  summary: SUMMARY.md\n"
    )


def test_generate_indexes_keeps_existing_preserved_pages(tmp_path: Path) -> None:
    _templates(tmp_path, {"contributing.md": "generated\n"})
    existing = tmp_path / "docs" / "guides" / "contributing.md"
    existing.parent.mkdir(parents=True)
    existing.write_text("curated\n", encoding="utf-8")

    written = SiteBuilder(_config(tmp_path)).generate_indexes()

    assert existing not in written
    assert existing.read_text(encoding="utf-8") == "curated\n"


def test_copy_readme(tmp_path: Path) -> None:
    builder = SiteBuilder(_config(tmp_path))
    assert builder.copy_readme() is None

    (tmp_path / "README.md").write_text("# tools\n", encoding="utf-8")

    target = builder.copy_readme()

    assert target == tmp_path / "docs" / "README.md"
    assert target.read_text(encoding="utf-8") == "# tools\n"
