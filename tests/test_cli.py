"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from godocgen.cli import _build_parser, main
from tests._fixtures.go_builder import GoModuleBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_extract_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["extract", "widget", "--root", "src", "--import-root", "example.com/x", "--all-decls"]
    )
    assert args.command == "extract"
    assert args.package == "widget"
    assert args.root == Path("src")
    assert args.import_root == "example.com/x"
    assert args.all_decls is True
    assert args.strict is False


def test_cli_requires_a_command() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args([])


def test_extract_prints_package_json(
    go_module: GoModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    go_module.write(
        {
            "widget/widget.go": """
            // Package widget builds widgets.
            package widget

            // New creates a Widget.
            func New() int { return 0 }
            """,
        }
    )

    main(["extract", "widget", "--root", str(go_module.path()), "--import-root", "example.com/x"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "widget"
    assert payload["import_path"] == "example.com/x/widget"
    assert payload["functions"] == [
        {"name": "New", "doc": "New creates a Widget.", "signature": "func New() int"}
    ]


def test_extract_exits_on_missing_package(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["extract", "widget", "--root", str(tmp_path / "nowhere")])
    assert excinfo.value.code == 1


def test_generate_exits_without_config(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "--config", str(tmp_path / "docs-config.json")])
    assert excinfo.value.code == 1


def test_generate_writes_docs_tree(
    go_module: GoModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    go_module.write(
        {
            "widget/widget.go": """
            package widget

            func New() {}
            """,
            "docs-config.json": """
            {"repository": {"name": "tools", "owner": "acme"},
             "packages": [{"name": "widget"}]}
            """,
        }
    )

    main(["generate", "--config", str(go_module.path() / "docs-config.json")])

    out = capsys.readouterr().out
    assert "Documentation generated for 1 package(s) in docs" in out
    assert (go_module.path() / "docs" / "packages" / "widget.md").is_file()
    assert (go_module.path() / "docs" / "api-reference" / "widget.md").is_file()


def test_extract_exits_when_root_is_a_file(tmp_path: Path) -> None:
    binary = tmp_path / "widget"
    binary.write_text("not a directory\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["extract", "widget", "--root", str(binary)])
    assert excinfo.value.code == 1
