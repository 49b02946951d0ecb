"""Tests for the per-package markdown renderer."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from godocgen.config import RepositoryConfig
from godocgen.models import FieldDoc, FunctionDoc, PackageDoc, TypeDoc, TypeKind, ValueDoc
from godocgen.render import RenderError, RenderedPackage, TemplateRenderer
from godocgen.render.renderer import oneline, shorten

REPOSITORY = RepositoryConfig(
    name="tools", owner="acme", description="Acme tooling", import_path="github.com/acme/tools"
)


def _widget(doc: str = "Package widget builds widgets.") -> PackageDoc:
    return PackageDoc(
        name="widget",
        import_path="github.com/acme/tools/widget",
        doc=doc,
        functions=(
            FunctionDoc(name="New", doc="New creates a Widget.", signature="func New() *Widget"),
        ),
        types=(
            TypeDoc(
                name="Widget",
                doc="Widget is a thing.\nIt has an ID.",
                decl="type Widget struct {\n\tID string\n}",
                kind=TypeKind.STRUCT,
                fields=(FieldDoc(name="ID", type="string", doc="ID is unique.\nAlways."),),
                methods=(
                    FunctionDoc(
                        name="Name", doc="", signature="func (w *Widget) Name() string"
                    ),
                ),
            ),
            TypeDoc(
                name="Celsius",
                doc="",
                decl="type Celsius float64",
                kind=TypeKind.OTHER,
                underlying="float64",
            ),
        ),
        constants=(ValueDoc(name="Max", doc="Limits.", decl="Max = 10"),),
        variables=(ValueDoc(name="Default", doc="", decl="Default = New()"),),
    )


def _renderer(tmp_path: Path, **options) -> TemplateRenderer:
    return TemplateRenderer(
        tmp_path / "docs", REPOSITORY, project_dir=tmp_path, **options
    )


def test_shorten_and_oneline_filters() -> None:
    assert shorten("short") == "short"
    assert shorten("x" * 100) == "x" * 100
    assert shorten("x" * 101) == "x" * 97 + "..."
    assert oneline("  first line \nsecond") == "first line"
    assert oneline("") == ""


def test_render_package_writes_every_page(tmp_path: Path) -> None:
    written = _renderer(tmp_path).render_package(_widget(), "widget")

    docs = tmp_path / "docs"
    assert written == [
        docs / "packages" / "widget.md",
        docs / "api-reference" / "widget.md",
        docs / "getting-started" / "widget.md",
        docs / "examples" / "widget" / "README.md",
        docs / "examples" / "widget" / "basic.md",
        docs / "examples" / "widget" / "advanced.md",
        docs / "guides" / "widget" / "README.md",
        docs / "guides" / "widget" / "best-practices.md",
        docs / "guides" / "widget" / "patterns.md",
    ]
    assert all(path.is_file() for path in written)


def test_package_page_links_into_api_reference(tmp_path: Path) -> None:
    _renderer(tmp_path).render_package(_widget(), "widget")

    page = (tmp_path / "docs" / "packages" / "widget.md").read_text(encoding="utf-8")
    assert page.startswith("# widget\n\nPackage widget builds widgets.\n\n## Installation\n")
    assert "go get github.com/acme/tools/widget" in page
    assert "- [New](../api-reference/widget.md#new) - New creates a Widget." in page
    assert "- [Celsius](../api-reference/widget.md#celsius)\n" in page


def test_package_page_shortens_long_docs(tmp_path: Path) -> None:
    package = _widget()
    long_doc = "word " * 40
    package = PackageDoc(
        name=package.name,
        import_path=package.import_path,
        doc=package.doc,
        functions=(FunctionDoc(name="New", doc=long_doc, signature="func New()"),),
    )

    _renderer(tmp_path).render_package(package, "widget")

    page = (tmp_path / "docs" / "packages" / "widget.md").read_text(encoding="utf-8")
    assert f"- [New](../api-reference/widget.md#new) - {long_doc[:97]}..." in page


def test_api_page_sections(tmp_path: Path) -> None:
    _renderer(tmp_path).render_package(_widget(), "widget")

    api = (tmp_path / "docs" / "api-reference" / "widget.md").read_text(encoding="utf-8")
    assert api.startswith("# widget API\n")
    assert "## Functions\n\n### New\n\nNew creates a Widget.\n\n```go\nfunc New() *Widget\n```" in api
    assert "| `ID` | `string` | ID is unique. |" in api
    assert "##### Name\n\n```go\nfunc (w *Widget) Name() string\n```" in api
    assert "### Celsius\n\n```go\ntype Celsius float64\n```\n\n#### Underlying Type" in api
    assert "## Constants\n\n### Max\n\nLimits.\n\n```go\nMax = 10\n```" in api
    assert "## Variables\n\n### Default\n\n```go\nDefault = New()\n```" in api
    assert api.index("## Functions") < api.index("## Types") < api.index("## Constants")


def test_user_templates_override_packaged_ones(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "package.md.j2").write_text(
        "custom {{ package.name }} ({{ slug }})\n", encoding="utf-8"
    )

    _renderer(tmp_path, templates_dir=templates).render_package(_widget(), "tools-widget")

    docs = tmp_path / "docs"
    assert (docs / "packages" / "tools-widget.md").read_text(encoding="utf-8") == (
        "custom widget (tools-widget)\n"
    )
    assert (docs / "api-reference" / "tools-widget.md").read_text(encoding="utf-8").startswith(
        "# widget API"
    )


def test_examples_can_be_disabled(tmp_path: Path) -> None:
    written = _renderer(tmp_path, generate_examples=False).render_package(_widget(), "widget")

    assert not (tmp_path / "docs" / "examples" / "widget").exists()
    assert len(written) == 6


def test_examples_embed_repository_example_source(tmp_path: Path) -> None:
    example = tmp_path / "examples" / "widget" / "main.go"
    example.parent.mkdir(parents=True)
    example.write_text("package main\n\nfunc main() {}\n", encoding="utf-8")

    _renderer(tmp_path).render_package(_widget(), "widget")

    readme = (tmp_path / "docs" / "examples" / "widget" / "README.md").read_text(encoding="utf-8")
    assert "```go\npackage main\n\nfunc main() {}\n```" in readme
    assert "git clone https://github.com/acme/tools.git" in readme


def test_existing_guides_are_not_overwritten(tmp_path: Path) -> None:
    guide = tmp_path / "docs" / "guides" / "widget" / "patterns.md"
    guide.parent.mkdir(parents=True)
    guide.write_text("mine\n", encoding="utf-8")

    written = _renderer(tmp_path).render_package(_widget(), "widget")

    assert guide not in written
    assert guide.read_text(encoding="utf-8") == "mine\n"


def test_render_combined(tmp_path: Path) -> None:
    renderer = _renderer(tmp_path)

    path = renderer.render_combined([RenderedPackage(slug="widget", package=_widget())])

    content = path.read_text(encoding="utf-8")
    assert path == tmp_path / "docs" / "api-reference" / "combined.md"
    assert content.startswith("# tools API Reference\n\nAcme tooling\n")
    assert "# widget\n\n`github.com/acme/tools/widget`\n\nPackage widget builds widgets." in content
    assert "### New" in content


def test_broken_template_raises_render_error(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "api.md.j2").write_text("{% if %}\n", encoding="utf-8")

    with pytest.raises(RenderError, match="api.md.j2"):
        _renderer(tmp_path, templates_dir=templates).render_package(_widget(), "widget")


def test_nested_slug_links_resolve(tmp_path: Path) -> None:
    _renderer(tmp_path).render_package(_widget(), "internal/gear")

    docs = tmp_path / "docs"
    pages = [
        docs / "packages" / "internal" / "gear.md",
        docs / "getting-started" / "internal" / "gear.md",
        docs / "guides" / "internal" / "gear" / "README.md",
    ]
    package_page = pages[0].read_text(encoding="utf-8")
    assert "(../../api-reference/internal/gear.md)" in package_page
    for page in pages:
        links = re.findall(r"\]\((\.\./[^)#]+)", page.read_text(encoding="utf-8"))
        assert links
        for link in links:
            assert (page.parent / link).resolve().is_file(), f"{page}: {link}"
