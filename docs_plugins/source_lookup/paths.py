"""Candidate source locations for a route.

Content is mirrored from several upstream repositories that disagree on
directory layout: some keep pages flat, some group them under a ``(docs)``
folder one or two levels down. Each convention below maps a route to the
relative bases it could live at; the generator expands every base into a
direct ``.mdx`` file and a folder ``index.mdx`` and concatenates them in
priority order. Adding a convention is one more entry in ``CONVENTIONS``.
"""

from pathlib import Path
from typing import Callable, List, Sequence, Tuple

DOCS_GROUP = "(docs)"
MAX_GROUP_DEPTH = 2

Convention = Callable[[Sequence[str]], List[str]]


def _join(segments: Sequence[str]) -> str:
    return "/".join(segments)


def as_is(route: Sequence[str]) -> List[str]:
    return [_join(route) or "index"]


def docs_group_after(depth: int) -> Convention:
    """Inject the ``(docs)`` folder after the first ``depth`` segments."""

    def convention(route: Sequence[str]) -> List[str]:
        if len(route) < depth:
            return []
        return [_join([*route[:depth], DOCS_GROUP, *route[depth:]])]

    convention.__name__ = f"docs_group_after_{depth}"
    return convention


CONVENTIONS: Tuple[Convention, ...] = (as_is,) + tuple(
    docs_group_after(depth) for depth in range(1, MAX_GROUP_DEPTH + 1)
)
REPORT_CONVENTIONS: Tuple[Convention, ...] = (as_is,)


def expand(content_root: Path, base: str) -> List[Path]:
    """Direct file first, then folder index."""
    return [content_root / f"{base}.mdx", content_root / base / "index.mdx"]


def candidate_paths(
    route: Sequence[str],
    content_root: Path,
    conventions: Sequence[Convention] = CONVENTIONS,
) -> List[Path]:
    """Ordered filesystem paths that may hold the source of ``route``."""
    paths: List[Path] = []
    for convention in conventions:
        for base in convention(route):
            paths.extend(expand(content_root, base))

    # Site root
    if not route:
        paths.append(content_root / "index.mdx")
    return paths


def report_candidate_paths(route: Sequence[str], content_root: Path) -> List[Path]:
    return candidate_paths(route, content_root, REPORT_CONVENTIONS)
