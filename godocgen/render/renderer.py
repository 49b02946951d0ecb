"""Renders package documentation models into markdown files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError

from ..config import RepositoryConfig
from ..logging import get_logger
from ..models import PackageDoc

logger = get_logger("render")

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")
_SHORTEN_LIMIT = 100

_EXAMPLE_FILES = ("examples/{slug}/main.go", "example_test.go")
_EXAMPLE_PAGES = ("README.md", "basic.md", "advanced.md")
_GUIDE_PAGES = ("README.md", "best-practices.md", "patterns.md")


class RenderError(RuntimeError):
    """Raised when a template cannot be rendered or written."""


@dataclass(frozen=True)
class RenderedPackage:
    """A package model paired with the slug its pages were written under."""

    slug: str
    package: PackageDoc


def shorten(value: str, limit: int = _SHORTEN_LIMIT) -> str:
    """Cut ``value`` to ``limit`` characters, ending with an ellipsis when cut."""
    if len(value) > limit:
        return value[: limit - 3] + "..."
    return value


def oneline(value: str) -> str:
    """Return the first line of ``value`` without surrounding whitespace."""
    lines = value.strip().split("\n")
    return lines[0].strip() if lines else ""


def create_environment(*directories: Optional[Path]) -> Environment:
    """Build the Jinja environment shared by the package and site renderers."""
    search_path = [str(directory) for directory in directories if directory]
    env = Environment(
        loader=FileSystemLoader(search_path),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["shorten"] = shorten
    env.filters["oneline"] = oneline
    return env


class TemplateRenderer:
    """Writes the markdown pages of one package into the docs tree.

    Templates found in ``templates_dir`` take precedence over the packaged
    ones with the same name. Models are only read, never modified.
    """

    def __init__(
        self,
        docs_dir: Path,
        repository: RepositoryConfig,
        *,
        project_dir: Optional[Path] = None,
        templates_dir: Optional[Path] = None,
        generate_examples: bool = True,
    ) -> None:
        self.docs_dir = Path(docs_dir)
        self.repository = repository
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.generate_examples = generate_examples
        user_dir = templates_dir if templates_dir and templates_dir.is_dir() else None
        self._env = create_environment(user_dir, DEFAULT_TEMPLATES_DIR)

    def render_package(self, package: PackageDoc, slug: str) -> List[Path]:
        """Render every page for ``package`` and return the paths written."""
        context = {"package": package, "slug": slug, "repository": self.repository}
        written = [
            self._write("package.md.j2", self.docs_dir / "packages" / f"{slug}.md", context),
            self._write("api.md.j2", self.docs_dir / "api-reference" / f"{slug}.md", context),
            self._write(
                "getting_started.md.j2",
                self.docs_dir / "getting-started" / f"{slug}.md",
                context,
            ),
        ]

        if self.generate_examples:
            examples_dir = self.docs_dir / "examples" / slug
            example_context = dict(context, example_source=self._example_source(slug))
            for page in _EXAMPLE_PAGES:
                written.append(
                    self._write(f"examples/{page}.j2", examples_dir / page, example_context)
                )

        guides_dir = self.docs_dir / "guides" / slug
        for page in _GUIDE_PAGES:
            target = guides_dir / page
            if target.exists():
                logger.debug("Keeping existing guide %s", target)
                continue
            written.append(self._write(f"guides/{page}.j2", target, context))

        logger.debug("Rendered %d page(s) for %s", len(written), slug)
        return written

    def render_combined(self, packages: Sequence[RenderedPackage]) -> Path:
        """Write a single API reference page covering every package in ``packages``."""
        context = {"packages": list(packages), "repository": self.repository}
        return self._write(
            "combined_api.md.j2", self.docs_dir / "api-reference" / "combined.md", context
        )

    def render_template(self, name: str, context: Dict[str, Any]) -> str:
        try:
            template = self._env.get_template(name)
            return template.render(**context)
        except TemplateError as exc:
            raise RenderError(f"Failed to render {name}: {exc}") from exc

    def _write(self, name: str, target: Path, context: Dict[str, Any]) -> Path:
        depth = len(target.relative_to(self.docs_dir).parts) - 1
        content = self.render_template(name, dict(context, docs_root="../" * depth))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise RenderError(f"Failed to write {target}: {exc}") from exc
        return target

    def _example_source(self, slug: str) -> str:
        for pattern in _EXAMPLE_FILES:
            candidate = self.project_dir / pattern.format(slug=slug)
            if candidate.is_file():
                try:
                    return candidate.read_text(encoding="utf-8").rstrip()
                except (OSError, UnicodeDecodeError):
                    logger.warning("Could not read example source %s", candidate)
        return ""


__all__ = [
    "DEFAULT_TEMPLATES_DIR",
    "RenderError",
    "RenderedPackage",
    "TemplateRenderer",
    "create_environment",
    "oneline",
    "shorten",
]
