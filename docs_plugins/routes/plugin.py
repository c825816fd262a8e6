import json
from pathlib import Path
from typing import List

from mkdocs.config.config_options import Type
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin
from mkdocs.structure.files import Files
from mkdocs.utils import log

from docs_plugins.routes.classifier import classify
from docs_plugins.routes.params import (
    enumerate_routes,
    routes_from_directory,
    routes_from_files,
)
from docs_plugins.settings import CONTENT_CONFIG_SCHEME, ContentSettings, resolve_inside


class RouteManifestPlugin(BasePlugin):
    """Write every route the site serves to a JSON manifest after the build.

    Docs pages come from the MkDocs file collection, report posts from
    ``reports_dir`` (mounted under ``Infra/reports``), and schema pages from
    the ``components.schemas`` of the API specification.
    """

    config_scheme = CONTENT_CONFIG_SCHEME + (
        ("output", Type(str, default="routes.json")),
    )

    def __init__(self):
        super().__init__()
        self.docs_routes: List[dict] = []

    def on_files(self, files: Files, *, config: MkDocsConfig) -> Files:
        self.docs_routes = routes_from_files(files, self.config["lang"])
        return files

    def on_post_build(self, *, config: MkDocsConfig) -> None:
        settings = ContentSettings.from_plugin_config(
            self.config, config["config_file_path"]
        )

        # Refuse to write outside the site directory
        try:
            output_path = resolve_inside(Path(config["site_dir"]), self.config["output"])
        except ValueError:
            log.error(
                f"[route_manifest] output '{self.config['output']}' resolves outside the site directory"
            )
            return

        routes = enumerate_routes(
            self.docs_routes,
            routes_from_directory(settings.reports_root, settings.lang),
            settings.api_spec_path,
            settings.lang,
        )
        manifest = {
            "routes": [
                dict(param, namespace=classify(param["slug"]).value) for param in routes
            ]
        }

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(manifest, f, ensure_ascii=False, indent=2)
        log.info(f"[route_manifest] wrote {len(routes)} routes to {output_path}")
