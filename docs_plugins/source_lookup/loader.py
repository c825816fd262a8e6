import logging
from pathlib import Path
from typing import Iterable, Sequence

from docs_plugins.routes.classifier import Namespace, classify
from docs_plugins.settings import ContentSettings
from docs_plugins.source_lookup.paths import candidate_paths, report_candidate_paths

log = logging.getLogger("mkdocs.plugins.source_lookup")


def read_first(paths: Iterable[Path]) -> str:
    """Return the text of the first readable path, or "" when none is."""
    for path in paths:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            # Continue to next path
            continue
    return ""


def load_page_source(route: Sequence[str], settings: ContentSettings) -> str:
    """
    Load the hand-written source behind ``route``.

    An empty string means no source is available: either the route is a
    generated API reference page or none of the candidate files exist.
    """
    namespace = classify(route)
    if namespace is Namespace.API_REFERENCE:
        return ""

    if namespace is Namespace.REPORT:
        paths = report_candidate_paths(route, settings.content_root)
    else:
        paths = candidate_paths(route, settings.content_root)

    source = read_first(paths)
    if not source:
        log.debug(f"[source_lookup] no source found for /{'/'.join(route)}")
    return source
