from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from mkdocs.config.config_options import Type
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin
from mkdocs.structure.pages import Page
from mkdocs.utils import log

from docs_plugins.page_actions.actions import PageActions
from docs_plugins.routes.params import route_from_url
from docs_plugins.settings import CONTENT_CONFIG_SCHEME, ContentSettings, resolve_inside
from docs_plugins.source_lookup.loader import load_page_source


class PageActionsPlugin(BasePlugin):
    """MkDocs plugin that offers the hand-written source of each page.

    The source is located through the mirrored content tree (see
    :mod:`docs_plugins.source_lookup`), published under ``source_dir`` and
    linked from a split-button injected next to the page's H1. Generated
    API reference pages and pages without a source file get no widget.

    Runs in ``on_post_page`` so it operates on the fully rendered HTML.
    """

    config_scheme = CONTENT_CONFIG_SCHEME + (
        ("source_dir", Type(str, default="_source")),
    )

    def __init__(self):
        super().__init__()
        self._actions = PageActions()
        self.settings: Optional[ContentSettings] = None
        self.sources: Dict[str, str] = {}

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        self.settings = ContentSettings.from_plugin_config(
            self.config, config["config_file_path"]
        )
        self.sources = {}
        if not self.settings.content_root.is_dir():
            log.warning(
                f"[page_actions] content directory not found at {self.settings.content_root}"
            )
        return config

    def _wrap_h1(self, h1, url: str, filename: str, soup: BeautifulSoup) -> None:
        """Wrap an H1 element and the actions widget in a flex container."""
        widget_html = self._actions.generate_dropdown_html(url=url, filename=filename)

        wrapper = soup.new_tag("div")
        wrapper["class"] = "h1-page-actions-wrapper"
        h1.wrap(wrapper)
        wrapper.append(BeautifulSoup(widget_html, "html.parser"))

    def on_post_page(
        self, output: str, *, page: Page, config: MkDocsConfig
    ) -> Optional[str]:
        if self.settings is None:
            return output
        if self._actions.is_page_excluded(page.file.src_path, page.meta):
            return output

        route = route_from_url(page.url)
        source = load_page_source(route, self.settings)
        if not source:
            return output

        soup = BeautifulSoup(output, "html.parser")
        h1 = soup.find("h1")
        if not h1:
            return output

        source_path = self._actions.build_source_path(route)
        base_path = urlsplit(config.get("site_url") or "").path
        url = self._actions.build_source_url(base_path, self.config["source_dir"], source_path)
        self._wrap_h1(h1, url, self._actions.build_filename(route), soup)
        self.sources[source_path] = source
        return str(soup)

    def on_post_build(self, *, config: MkDocsConfig) -> None:
        if not self.sources:
            return

        try:
            target = resolve_inside(Path(config["site_dir"]), self.config["source_dir"])
        except ValueError:
            log.error(
                f"[page_actions] source_dir '{self.config['source_dir']}' resolves outside the site directory"
            )
            return

        for source_path, source in self.sources.items():
            destination = target / source_path
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(source, encoding="utf-8")
        log.info(f"[page_actions] wrote {len(self.sources)} page sources to {target}")
