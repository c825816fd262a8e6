from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Tuple

from mkdocs.config.config_options import Type

# Fixed namespace markers of the mirrored content
REPORT_PREFIX: Tuple[str, ...] = ("Infra", "reports")
SCHEMA_PREFIX: Tuple[str, ...] = ("Product-Opener", "api", "schemas")

# Options shared by every plugin that reads mirrored content
CONTENT_CONFIG_SCHEME = (
    ("content_dir", Type(str, default="content/docs")),
    ("reports_dir", Type(str, default="content/docs/Infra/reports")),
    ("api_spec", Type(str, default="ref/api.yaml")),
    ("lang", Type(str, default="en")),
)


@dataclass(frozen=True)
class ContentSettings:
    """Content locations shared by the plugins.

    Plugins build one of these from their ``mkdocs.yml`` options and pass it
    to the lookup functions, so nothing in the core reads global state.
    """

    content_root: Path
    reports_root: Path
    api_spec_path: Path
    lang: str = "en"

    @classmethod
    def from_plugin_config(
        cls, plugin_config: Mapping[str, Any], config_file_path: str
    ) -> "ContentSettings":
        """Resolve the content options against the directory holding ``mkdocs.yml``."""
        project_root = Path(config_file_path).resolve().parent
        return cls(
            content_root=(project_root / plugin_config["content_dir"]).resolve(),
            reports_root=(project_root / plugin_config["reports_dir"]).resolve(),
            api_spec_path=(project_root / plugin_config["api_spec"]).resolve(),
            lang=plugin_config["lang"],
        )


def resolve_inside(base_dir: Path, rel_path: str) -> Path:
    """Resolve ``rel_path`` under ``base_dir``; ValueError if it lands outside."""
    base = base_dir.resolve()
    target = (base / rel_path).resolve()
    target.relative_to(base)
    return target
