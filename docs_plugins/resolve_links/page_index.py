import logging
import posixpath
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from mkdocs.structure.files import File, Files

log = logging.getLogger("mkdocs.plugins.resolve_links")


@dataclass(frozen=True)
class PageEntry:
    """A rendered page known to the index, addressed by source path and locale."""

    path: str
    src_uri: str
    directory: str
    locale: str


@dataclass(frozen=True)
class PageLink:
    """A lookup hit: ``url`` is the page's source file relative to the linking directory.

    MkDocs turns links to source files into page URLs when it renders the
    markdown, so this is the form a link has to take before that step.
    """

    url: str
    entry: PageEntry


class MarkdownSourceFile(File):
    """A file MkDocs wouldn't treat as markdown (``.mdx``), rendered as a page anyway."""

    def is_documentation_page(self) -> bool:
        return True


def render_as_pages(files: Files, suffixes: Sequence[str]) -> int:
    """Turn the files ending in one of ``suffixes`` into documentation pages.

    Returns how many files were converted.
    """
    suffixes = tuple(suffixes)
    if not suffixes:
        return 0
    converted = [
        file
        for file in files
        if file.src_uri.endswith(suffixes)
        and not file.is_documentation_page()
        and file.src_dir is not None
    ]
    for file in converted:
        files.remove(file)
        files.append(
            MarkdownSourceFile(
                file.src_path,
                file.src_dir,
                file.dest_dir,
                file.use_directory_urls,
                inclusion=file.inclusion,
            )
        )
    return len(converted)


def split_locale(
    src_uri: str, locales: Sequence[str], default_locale: str
) -> Tuple[str, str]:
    """Split the "dot" locale marker off a source path.

    ``guide.fr.md`` -> ``("guide.md", "fr")`` when ``fr`` is a known locale;
    anything else belongs to the default locale.
    """
    directory, filename = posixpath.split(src_uri)
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return src_uri, default_locale
    base, marker, locale = stem.rpartition(".")
    if marker and base and locale in locales:
        return posixpath.join(directory, f"{base}.{ext}"), locale
    return src_uri, default_locale


class PageIndex:
    """
    In-memory index of the rendered pages, keyed by ``(source path, locale)``.

    Lookups take an href relative to a directory, the way authors write links
    inside a page, and never raise: anything that doesn't normalize to a known
    page is simply ``None``.
    """

    def __init__(self, entries: Iterable[PageEntry], default_locale: str = "en"):
        self.default_locale = default_locale
        self._entries: Dict[Tuple[str, str], PageEntry] = {}
        for entry in entries:
            self._entries.setdefault((entry.path, entry.locale), entry)

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def from_files(
        cls,
        files: Files,
        locales: Sequence[str] = (),
        default_locale: str = "en",
    ) -> "PageIndex":
        """Index the documentation pages; static and media files are never link targets."""
        entries = []
        for file in files.documentation_pages():
            path, locale = split_locale(file.src_uri, locales, default_locale)
            entries.append(
                PageEntry(
                    path=path,
                    src_uri=file.src_uri,
                    directory=posixpath.dirname(path),
                    locale=locale,
                )
            )
        log.debug(f"[resolve_links] indexed {len(entries)} pages")
        return cls(entries, default_locale=default_locale)

    @staticmethod
    def normalize(href: str, directory: str) -> Optional[str]:
        """Join ``href`` onto ``directory``; None if it escapes the docs root."""
        joined = posixpath.normpath(posixpath.join(directory, href))
        if joined == "." or joined == ".." or joined.startswith("../"):
            return None
        return joined

    def find(self, href: str, directory: str, locale: str) -> Optional[PageEntry]:
        path = self.normalize(href, directory)
        if path is None:
            return None
        entry = self._entries.get((path, locale))
        if entry is None and locale != self.default_locale:
            # Untranslated pages are served from the default locale
            entry = self._entries.get((path, self.default_locale))
        return entry

    def lookup(self, href: str, directory: str, locale: str) -> Optional[PageLink]:
        entry = self.find(href, directory, locale)
        if entry is None:
            return None
        return PageLink(
            url=posixpath.relpath(entry.src_uri, directory or "."),
            entry=entry,
        )

    __call__ = lookup
