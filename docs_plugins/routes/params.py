import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml
from mkdocs.structure.files import Files

from docs_plugins.settings import REPORT_PREFIX, SCHEMA_PREFIX

log = logging.getLogger("mkdocs.plugins.routes")

SCHEMA_DIR = "schemas"
SOURCE_SUFFIXES = (".md", ".mdx")

# Known schema pages, used when the API specification can't be read
FALLBACK_SCHEMA_NAMES = (
    "product_base",
    "product_misc",
    "product_tags",
    "product_images",
    "product_eco_score",
    "product_ingredients",
    "product_nutrition",
    "product_nutriscore",
    "product_quality",
    "product_extended",
    "product_metadata",
    "product_knowledge_panels",
    "product_attribute_groups",
    "product",
    "ingredient",
    "nutrient",
)


def route_param(slug: Sequence[str], lang: str = "en") -> Dict[str, Any]:
    return {"slug": list(slug), "lang": lang}


def schema_url_name(schema_name: str) -> str:
    """``Product-Base`` -> ``product_base``."""
    return schema_name.lower().replace("-", "_")


def schema_routes(names: Iterable[str], lang: str = "en") -> List[Dict[str, Any]]:
    """Bare schemas index first, then one page per schema under ``schemas/``."""
    params = [route_param(SCHEMA_PREFIX, lang)]
    for name in names:
        params.append(route_param([*SCHEMA_PREFIX, SCHEMA_DIR, name], lang))
    return params


FALLBACK_SCHEMA_ROUTES = schema_routes(FALLBACK_SCHEMA_NAMES)


def load_schema_routes(api_spec_path: Path, lang: str = "en") -> List[Dict[str, Any]]:
    """Derive schema routes from ``components.schemas`` of an OpenAPI document.

    Any failure to read or parse the document falls back to the static list.
    """
    try:
        with open(api_spec_path, "r", encoding="utf-8") as f:
            api_spec = yaml.safe_load(f)
        schemas = (api_spec.get("components") or {}).get("schemas") or {}
        if not isinstance(schemas, dict):
            raise TypeError(f"components.schemas is a {type(schemas).__name__}")
    except (OSError, ValueError, yaml.YAMLError, AttributeError, TypeError) as e:
        log.error(f"[routes] error reading API specification {api_spec_path}: {e}")
        return [route_param(param["slug"], lang) for param in FALLBACK_SCHEMA_ROUTES]

    names = [schema_url_name(str(name)) for name in schemas]
    log.debug(f"[routes] found {len(names)} schemas in {api_spec_path}")
    return schema_routes(names, lang)


def route_from_source(rel_path: str) -> Optional[List[str]]:
    """``guides/setup.md`` -> ``["guides", "setup"]``; ``guides/index.md`` -> ``["guides"]``."""
    rel_path = rel_path.replace("\\", "/")
    if not rel_path.endswith(SOURCE_SUFFIXES):
        return None
    route = posixpath.splitext(rel_path)[0]
    if route == "index":
        return []
    if route.endswith("/index"):
        route = route[: -len("/index")]
    return route.split("/")


def route_from_url(page_url: str) -> List[str]:
    """Route of a built page: ``Infra/setup/`` or ``Infra/setup.html`` -> ``["Infra", "setup"]``."""
    route = page_url.strip("/")
    if route == ".":
        return []
    if route.endswith(".html"):
        route = route[: -len(".html")]
        if route == "index" or route.endswith("/index"):
            route = route[: -len("index")].rstrip("/")
    return route.split("/") if route else []


def routes_from_files(files: Files, lang: str = "en") -> List[Dict[str, Any]]:
    params = []
    for file in files.documentation_pages():
        route = route_from_source(file.src_uri)
        if route is not None:
            params.append(route_param(route, lang))
    return params


def routes_from_directory(root: Path, lang: str = "en") -> List[Dict[str, Any]]:
    """Routes of every ``.md``/``.mdx`` file below ``root``; empty if it doesn't exist."""
    if not root.is_dir():
        log.warning(f"[routes] content directory not found at {root}")
        return []
    params = []
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        route = route_from_source(path.relative_to(root).as_posix())
        if route is not None:
            params.append(route_param(route, lang))
    return params


def is_valid_param(param: Any) -> bool:
    return isinstance(param, dict) and isinstance(param.get("slug"), (list, tuple))


def enumerate_routes(
    docs_routes: Iterable[Any],
    report_routes: Iterable[Any],
    api_spec_path: Path,
    lang: str = "en",
) -> List[Dict[str, Any]]:
    """
    Combine docs, reports and API schema routes into one list for pre-rendering.

    Report routes are mounted under the reports namespace. Entries without a
    well-formed slug are dropped, and repeated routes keep their first
    occurrence.
    """
    mounted_reports = [
        dict(param, slug=[*REPORT_PREFIX, *param["slug"]])
        for param in report_routes
        if is_valid_param(param)
    ]
    all_params = [
        *docs_routes,
        *mounted_reports,
        *load_schema_routes(api_spec_path, lang),
    ]

    seen = set()
    valid_params = []
    for param in all_params:
        if not is_valid_param(param):
            continue
        key = (tuple(str(segment) for segment in param["slug"]), str(param.get("lang")))
        if key in seen:
            continue
        seen.add(key)
        valid_params.append(param)
    return valid_params
