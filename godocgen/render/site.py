"""Site-level pages: directory layout, section indexes and shared templates."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import TemplateError, TemplateNotFound

from ..config import GodocgenConfig
from ..logging import get_logger
from .renderer import DEFAULT_TEMPLATES_DIR, RenderError, create_environment

logger = get_logger("site")

SECTIONS = ("getting-started", "packages", "api-reference", "examples", "guides")
README_NAMES = ("README.md", "readme.md", "Readme.md", "README.MD")

# template name -> output path relative to the docs directory
_INDEX_PAGES = (
    ("getting-started.md", "getting-started/README.md"),
    ("packages-index.md", "packages/README.md"),
    ("api-reference-index.md", "api-reference/README.md"),
    ("examples-index.md", "examples/README.md"),
    ("guides-index.md", "guides/README.md"),
    ("docs-index.md", "README.md"),
)
_PRESERVED_PAGES = (
    ("contributing.md", "guides/contributing.md"),
    ("faq.md", "guides/faq.md"),
)


class SiteBuilder:
    """Builds the parts of the docs tree that do not belong to a single package."""

    def __init__(self, config: GodocgenConfig) -> None:
        self.config = config
        self.docs_dir = config.docs_dir
        self.templates_dir = config.templates_dir
        self._user_env = (
            create_environment(self.templates_dir) if self.templates_dir.is_dir() else None
        )
        self._default_env = create_environment(DEFAULT_TEMPLATES_DIR)

    def create_structure(self) -> List[Path]:
        directories = [self.docs_dir] + [self.docs_dir / section for section in SECTIONS]
        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)
        logger.debug("Created documentation directory structure under %s", self.docs_dir)
        return directories

    def process_shared_templates(self) -> List[Path]:
        """Render every ``*.md`` template of the templates dir into the docs dir."""
        if self._user_env is None:
            logger.debug("No templates directory at %s", self.templates_dir)
            return []
        self.docs_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for template_path in sorted(self.templates_dir.glob("*.md")):
            target = self.docs_dir / template_path.name
            try:
                content = self._user_env.get_template(template_path.name).render(
                    **self._shared_context()
                )
                target.write_text(content, encoding="utf-8")
            except (TemplateError, OSError) as exc:
                logger.warning("Failed to process template %s: %s", template_path, exc)
                continue
            logger.debug("Processed template %s -> %s", template_path, target)
            written.append(target)
        return written

    def generate_indexes(self) -> List[Path]:
        """Render section indexes, write ``.gitbook.yaml`` and seed preserved guides."""
        context = self._index_context()
        written: List[Path] = []
        for template_name, relative in _INDEX_PAGES:
            path = self._render_user_template(template_name, self.docs_dir / relative, context)
            if path is not None:
                written.append(path)

        written.append(self.write_gitbook_config())

        for template_name, relative in _PRESERVED_PAGES:
            target = self.docs_dir / relative
            if target.exists():
                logger.debug("Keeping existing %s", target)
                continue
            try:
                path = self._render_user_template(template_name, target, context)
            except RenderError as exc:
                logger.debug("Could not generate %s: %s", target, exc)
                continue
            if path is not None:
                written.append(path)
        return written

    def write_gitbook_config(self) -> Path:
        target = self.config.project_dir / ".gitbook.yaml"
        try:
            content = self._default_env.get_template("gitbook.yaml.j2").render(
                docs_dir=self.config.docs.docs_dir.strip("/")
            )
            target.write_text(content, encoding="utf-8")
        except (TemplateError, OSError) as exc:
            raise RenderError(f"Failed to write {target}: {exc}") from exc
        logger.debug("Generated %s", target)
        return target

    def copy_readme(self) -> Optional[Path]:
        """Copy the repository README into the docs dir, if the repository has one."""
        for name in README_NAMES:
            source = self.config.project_dir / name
            if source.is_file():
                target = self.docs_dir / "README.md"
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source, target)
                logger.debug("Copied %s to %s", source, target)
                return target
        logger.debug("No README found in %s, skipping copy", self.config.project_dir)
        return None

    def _render_user_template(
        self, template_name: str, target: Path, context: Dict[str, Any]
    ) -> Optional[Path]:
        if self._user_env is None:
            return None
        try:
            template = self._user_env.get_template(template_name)
        except TemplateNotFound:
            logger.debug("Template %s not found, skipping %s", template_name, target)
            return None
        try:
            content = template.render(**context)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except (TemplateError, OSError) as exc:
            raise RenderError(f"Failed to generate {target}: {exc}") from exc
        logger.debug("Generated %s", target)
        return target

    def _shared_context(self) -> Dict[str, Any]:
        repository = self.config.repository
        return {
            "repository": repository,
            "import_path": repository.import_path,
            "owner": repository.owner,
            "name": repository.name,
        }

    def _index_context(self) -> Dict[str, Any]:
        context = self._shared_context()
        context["packages"] = self.config.packages
        context["config"] = self.config
        return context


__all__ = ["README_NAMES", "SECTIONS", "SiteBuilder"]
