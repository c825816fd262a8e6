import posixpath
from typing import Optional

from mkdocs.config.config_options import Type
from mkdocs.config.defaults import MkDocsConfig
from mkdocs.plugins import BasePlugin
from mkdocs.structure.files import Files
from mkdocs.structure.pages import Page
from mkdocs.utils import log

from docs_plugins.resolve_links.links import HrefResolver, LinkContext
from docs_plugins.resolve_links.page_index import PageIndex, render_as_pages, split_locale
from docs_plugins.resolve_links.treeprocessor import ResolveLinksExtension


class ResolveLinksPlugin(BasePlugin):
    """MkDocs plugin that rewrites relative links left behind by synced content.

    Links in mirrored upstream markdown point at ``.md`` files or
    trailing-slash directories that don't exist under those names here.
    Every markdown link of a page is passed through :class:`HrefResolver`
    while the page is rendered, before MkDocs resolves links itself, so hrefs
    are still relative to the page's source file. Links that resolve against
    the page index are pointed at the matching source file and MkDocs turns
    them into page URLs; everything else is left as-is.

    Files ending in one of ``markdown_suffixes`` are rendered as pages.
    """

    config_scheme = (
        ("locales", Type(list, default=[])),
        ("default_locale", Type(str, default="en")),
        ("markdown_suffixes", Type(list, default=[".mdx"])),
    )

    def __init__(self):
        super().__init__()
        self.page_index: Optional[PageIndex] = None
        self.current_page: Optional[Page] = None

    def on_config(self, config: MkDocsConfig) -> MkDocsConfig:
        config["markdown_extensions"].append(ResolveLinksExtension(self.current_resolver))
        return config

    def on_files(self, files: Files, *, config: MkDocsConfig) -> Files:
        converted = render_as_pages(files, self.config["markdown_suffixes"])
        if converted:
            log.info(f"[resolve_links] rendering {converted} additional files as pages")

        self.page_index = PageIndex.from_files(
            files,
            locales=self.config["locales"],
            default_locale=self.config["default_locale"],
        )
        log.info(f"[resolve_links] page index holds {len(self.page_index)} entries")
        return files

    def page_context(self, page: Page) -> LinkContext:
        """Directory and locale the page's links are relative to."""
        src_uri = page.file.src_uri
        _, file_locale = split_locale(
            src_uri, self.config["locales"], self.config["default_locale"]
        )
        locale = page.meta.get("locale") or file_locale
        return LinkContext(current_dir=posixpath.dirname(src_uri), locale=locale)

    def current_resolver(self) -> Optional[HrefResolver]:
        """Resolver for the page being rendered, None outside of a page render."""
        if self.page_index is None or self.current_page is None:
            return None
        return HrefResolver(self.page_index.lookup, self.page_context(self.current_page))

    def on_page_markdown(
        self, markdown: str, *, page: Page, config: MkDocsConfig, files: Files
    ) -> Optional[str]:
        self.current_page = page
        return markdown

    def on_page_content(
        self, html: str, *, page: Page, config: MkDocsConfig, files: Files
    ) -> Optional[str]:
        self.current_page = None
        return html
