"""Configuration loading for godocgen (docs-config.json / docs-config.yml)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAMES = (
    "docs-config.json",
    ".docs-config.json",
    ".config/docs.json",
    "docs-config.yml",
    ".docs-config.yml",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or cannot be parsed."""


@dataclass
class RepositoryConfig:
    """Repository metadata used for import paths and links."""

    name: str = ""
    owner: str = ""
    description: str = ""
    import_path: str = ""


@dataclass
class PackageConfig:
    """A package to document; ``path`` overrides its location in monorepos."""

    name: str
    description: str = ""
    priority: int = 0
    path: Optional[str] = None


@dataclass
class DocsConfig:
    root_dir: str = "."
    docs_dir: str = "docs"
    templates_dir: str = "templates"


@dataclass
class DiscoveryConfig:
    """Automatic package discovery below the root directory."""

    enabled: bool = False
    exclude_patterns: List[str] = field(default_factory=list)
    include_only_with_godoc: bool = False


@dataclass
class OutputConfig:
    generate_combined_api: bool = False
    generate_examples: bool = True
    verbose: bool = False


@dataclass
class ExtractionConfig:
    """Parser behaviour: unexported declarations and strict syntax handling."""

    all_decls: bool = False
    strict: bool = False


@dataclass
class GodocgenConfig:
    """Represents the settings of a docs configuration file."""

    project_dir: Path
    source: Optional[Path] = None
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    packages: List[PackageConfig] = field(default_factory=list)
    docs: DocsConfig = field(default_factory=DocsConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    @property
    def root_dir(self) -> Path:
        return (self.project_dir / self.docs.root_dir).resolve()

    @property
    def docs_dir(self) -> Path:
        return self.project_dir / self.docs.docs_dir

    @property
    def templates_dir(self) -> Path:
        return self.project_dir / self.docs.templates_dir


def find_config(project_dir: Path) -> Optional[Path]:
    """Return the first known configuration file present in ``project_dir``."""
    for name in CONFIG_FILENAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, project_dir: Optional[Path] = None
) -> GodocgenConfig:
    """Load configuration from ``config_path`` or the first file found in ``project_dir``.

    Relative directories in the file are resolved against the project
    directory, which defaults to the directory holding an explicit config
    file (or its parent for ``.config/docs.json``) and to the current
    directory otherwise.
    """
    if config_path is not None:
        config_file = config_path.expanduser().resolve()
        if not config_file.is_file():
            raise ConfigError(f"Configuration file {config_path} does not exist")
        if project_dir is None:
            project_dir = config_file.parent
            if project_dir.name == ".config":
                project_dir = project_dir.parent
        project_dir = project_dir.expanduser().resolve()
    else:
        project_dir = (project_dir or Path.cwd()).expanduser().resolve()
        found = find_config(project_dir)
        if found is None:
            raise ConfigError(
                f"No configuration file found in {project_dir}; create docs-config.json"
            )
        config_file = found

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    repo_data = _as_dict(data.get("repository"))
    repository = RepositoryConfig(
        name=_as_str(repo_data.get("name")) or "",
        owner=_as_str(repo_data.get("owner")) or "",
        description=_as_str(repo_data.get("description")) or "",
        import_path=_as_str(repo_data.get("import_path")) or "",
    )
    if not repository.import_path:
        repository.import_path = f"github.com/{repository.owner}/{repository.name}"

    packages: List[PackageConfig] = []
    raw_packages = data.get("packages") or []
    if not isinstance(raw_packages, list):
        raise ConfigError("'packages' must be a list")
    for entry in raw_packages:
        package_data = _as_dict(entry)
        name = _as_str(package_data.get("name"))
        if not name:
            raise ConfigError("Every package entry needs a 'name'")
        packages.append(
            PackageConfig(
                name=name,
                description=_as_str(package_data.get("description")) or "",
                priority=_as_int(package_data.get("priority")) or 0,
                path=_as_str(package_data.get("path")) or None,
            )
        )

    docs_data = _as_dict(data.get("docs"))
    docs = DocsConfig(
        root_dir=_as_str(docs_data.get("root_dir")) or ".",
        docs_dir=_as_str(docs_data.get("docs_dir")) or "docs",
        templates_dir=_as_str(docs_data.get("templates_dir")) or "templates",
    )

    discovery_data = _as_dict(data.get("discovery"))
    discovery = DiscoveryConfig(
        enabled=_as_bool(discovery_data.get("enabled")) or False,
        exclude_patterns=_as_str_list(discovery_data.get("exclude_patterns")),
        include_only_with_godoc=_as_bool(discovery_data.get("include_only_with_godoc")) or False,
    )

    output_data = _as_dict(data.get("output"))
    generate_examples = _as_bool(output_data.get("generate_examples"))
    output = OutputConfig(
        generate_combined_api=_as_bool(output_data.get("generate_combined_api")) or False,
        generate_examples=True if generate_examples is None else generate_examples,
        verbose=_as_bool(output_data.get("verbose")) or False,
    )

    extraction_data = _as_dict(data.get("extraction"))
    extraction = ExtractionConfig(
        all_decls=_as_bool(extraction_data.get("all_decls")) or False,
        strict=_as_bool(extraction_data.get("strict")) or False,
    )

    return GodocgenConfig(
        project_dir=project_dir,
        source=config_file,
        repository=repository,
        packages=packages,
        docs=docs,
        discovery=discovery,
        output=output,
        extraction=extraction,
    )


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}

    if path.suffix == ".json":
        try:
            loaded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    else:
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAMES",
    "ConfigError",
    "DiscoveryConfig",
    "DocsConfig",
    "ExtractionConfig",
    "GodocgenConfig",
    "OutputConfig",
    "PackageConfig",
    "RepositoryConfig",
    "find_config",
    "load_config",
]
