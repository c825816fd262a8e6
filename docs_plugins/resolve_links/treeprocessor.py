import logging
from typing import Callable, Optional
from xml.etree.ElementTree import Element

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

log = logging.getLogger("mkdocs.plugins.resolve_links")

# Runs after "inline" (20) has built the <a> elements and before MkDocs'
# "relpath" (0) turns source paths into page URLs.
PRIORITY = 1

ResolverFactory = Callable[[], Optional[Callable[[str], str]]]


class ResolveLinksTreeprocessor(Treeprocessor):
    """Pass the href of every markdown link through the current page's resolver."""

    def __init__(self, md: Markdown, resolver_factory: ResolverFactory):
        super().__init__(md)
        self.resolver_factory = resolver_factory

    def run(self, root: Element) -> None:
        resolver = self.resolver_factory()
        if resolver is None:
            return

        rewritten = 0
        for element in root.iter("a"):
            href = element.get("href")
            if not href:
                continue
            resolved = resolver(href)
            if resolved != href:
                element.set("href", resolved)
                rewritten += 1
        if rewritten:
            log.debug(f"[resolve_links] rewrote {rewritten} links")


class ResolveLinksExtension(Extension):
    def __init__(self, resolver_factory: ResolverFactory, **kwargs):
        self.resolver_factory = resolver_factory
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:
        md.treeprocessors.register(
            ResolveLinksTreeprocessor(md, self.resolver_factory), "resolve_links", PRIORITY
        )
