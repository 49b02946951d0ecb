"""Run driver: builds the docs tree and documents every configured package."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import GodocgenConfig, PackageConfig
from .extractor import PackageExtractor
from .golang.errors import ExtractionError
from .golang.locator import discover_packages
from .logging import get_logger
from .render import RenderError, RenderedPackage, SiteBuilder, TemplateRenderer


@dataclass
class PackageFailure:
    """A package whose extraction or rendering failed, with the cause."""

    package: str
    error: str


@dataclass
class RunReport:
    """Outcome of a generation run."""

    generated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[PackageFailure] = field(default_factory=list)
    combined_api: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class _Target:
    config: PackageConfig
    discovered: bool = False


class Orchestrator:
    """Coordinates site setup, extraction and rendering for one configuration.

    Packages are processed one after another. A package that cannot be
    located, parsed or rendered is logged and recorded in the report, and
    the run carries on with the next one.
    """

    def __init__(
        self,
        config: GodocgenConfig,
        *,
        extractor: PackageExtractor | None = None,
        renderer: TemplateRenderer | None = None,
        site: SiteBuilder | None = None,
    ) -> None:
        self.config = config
        self.extractor = extractor or PackageExtractor(
            config.root_dir,
            config.repository.import_path,
            include_unexported=config.extraction.all_decls,
            strict=config.extraction.strict,
        )
        self.renderer = renderer or TemplateRenderer(
            config.docs_dir,
            config.repository,
            project_dir=config.project_dir,
            templates_dir=config.templates_dir,
            generate_examples=config.output.generate_examples,
        )
        self.site = site or SiteBuilder(config)
        self.logger = get_logger("orchestrator")

    def run(self) -> RunReport:
        repository = self.config.repository
        targets = self.targets()
        self.logger.info(
            "Generating documentation for %s/%s (%d packages)",
            repository.owner,
            repository.name,
            len(targets),
        )

        self.site.create_structure()
        self._site_step("processing shared templates", self.site.process_shared_templates)
        self._site_step("generating documentation indexes", self.site.generate_indexes)
        self._site_step("copying repository README", self.site.copy_readme)

        report = RunReport()
        rendered: List[RenderedPackage] = []
        for target in targets:
            name = target.config.name
            self.logger.debug("Generating documentation for %s", name)
            try:
                package = self.extractor.extract(name, target.config.path)
                if (
                    target.discovered
                    and self.config.discovery.include_only_with_godoc
                    and not package.doc
                ):
                    self.logger.debug("Skipping %s: no package documentation", name)
                    report.skipped.append(name)
                    continue
                self.renderer.render_package(package, name)
            except (ExtractionError, RenderError, OSError) as exc:
                self.logger.error("Error generating docs for %s: %s", name, exc)
                report.failures.append(PackageFailure(package=name, error=str(exc)))
                continue
            rendered.append(RenderedPackage(slug=name, package=package))
            report.generated.append(name)
            self.logger.debug("Generated documentation for %s", name)

        if self.config.output.generate_combined_api and rendered:
            try:
                report.combined_api = self.renderer.render_combined(rendered)
            except RenderError as exc:
                self.logger.error("Error generating combined API reference: %s", exc)

        self.logger.info(
            "Documentation generation complete for %s: %d generated, %d failed",
            repository.name,
            len(report.generated),
            len(report.failures),
        )
        return report

    def targets(self) -> List[_Target]:
        """Return configured packages followed by newly discovered ones."""
        targets = [_Target(config=package) for package in self.config.packages]
        if not self.config.discovery.enabled:
            return targets
        known = {package.name for package in self.config.packages}
        for name in discover_packages(
            self.config.root_dir, self.config.discovery.exclude_patterns
        ):
            if name in known:
                continue
            known.add(name)
            targets.append(_Target(config=PackageConfig(name=name), discovered=True))
        return targets

    def _site_step(self, description: str, step) -> None:  # type: ignore[no-untyped-def]
        try:
            step()
        except (RenderError, OSError) as exc:
            self.logger.error("Error %s: %s", description, exc)


__all__ = ["Orchestrator", "PackageFailure", "RunReport"]
