import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

# Any URI scheme prefix (`https:`, `mailto:`, `data:` ...)
SCHEME_PATTERN = re.compile(r"^[a-z][a-z\d+.-]*:", re.IGNORECASE)


class PageHandle(Protocol):
    url: str


Lookup = Callable[[str, str, str], Optional[PageHandle]]


@dataclass(frozen=True)
class LinkContext:
    """Where the link was found: the page's source directory and locale."""

    current_dir: str
    locale: str


def build_href_candidates(path: str) -> List[str]:
    """Build the ordered list of resolvable href variants for known synced-link shapes."""
    # Extend this list if new upstream link shapes appear.
    if path.endswith(".md"):
        return [path, f"{path[:-3]}.mdx"]
    if path.endswith(".mdx"):
        return [path]

    if path.endswith("/"):
        no_slash = path[:-1]
        return [f"{no_slash}.mdx", f"{path}index.mdx"]

    # Other shapes are left untouched.
    return [path]


def is_external_href(href: str) -> bool:
    """Site-absolute, fragment-only and scheme-prefixed hrefs are not ours to touch."""
    return (
        href.startswith("/")
        or href.startswith("#")
        or SCHEME_PATTERN.match(href) is not None
    )


def split_href(href: str) -> Tuple[str, str]:
    """Return ``(path, suffix)`` where suffix is the ``?query#hash`` tail to carry over."""
    without_hash, _, hash_part = href.partition("#")
    raw_path, _, query_part = without_hash.partition("?")
    suffix = f"{'?' + query_part if query_part else ''}{'#' + hash_part if hash_part else ''}"
    return raw_path, suffix


def resolve_href(href: str, context: LinkContext, lookup: Lookup) -> str:
    """
    Resolve an internal relative docs link against the page index.

    Some upstream links use `.md` files or trailing-slash paths (`foo/`).
    Browsers resolve these by URL-joining, which can create incorrect nested
    paths. A small set of common shapes is normalized and resolved against the
    current page directory + locale. If a match exists, the canonical docs URL
    is returned with `?query` and `#hash` preserved. Otherwise the original
    href is kept.
    """
    if is_external_href(href):
        return href

    raw_path, suffix = split_href(href)

    # Make relativity explicit for the lookup (`foo` -> `./foo`).
    if raw_path.startswith("./") or raw_path.startswith("../"):
        base = raw_path
    else:
        base = f"./{raw_path}"

    for candidate in build_href_candidates(base):
        target = lookup(candidate, context.current_dir, context.locale)
        if target is not None:
            return f"{target.url}{suffix}"

    # Never rewrite a link we couldn't resolve.
    return href


class HrefResolver:
    """Per-page link transform: binds a lookup and a context to ``resolve_href``."""

    def __init__(self, lookup: Lookup, context: LinkContext):
        self.lookup = lookup
        self.context = context

    def __call__(self, href: str) -> str:
        return resolve_href(href, self.context, self.lookup)
