import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, Tuple

from docs_plugins.settings import REPORT_PREFIX, SCHEMA_PREFIX


class Namespace(str, Enum):
    REPORT = "report"
    SCHEMA = "schema"
    API_REFERENCE = "api-reference"
    GENERAL_DOC = "general-doc"


# Segment shapes of auto-generated API endpoint pages
API_SEGMENT_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^(get|post|patch|delete|put)-"),
    re.compile(r"_(get|post|patch|delete|put)$"),
    re.compile(
        r"^(predict|extract|generate|create|update|delete|retrieve|list|destroy|partial_update|stats)"
    ),
    re.compile(r"_auth_|authentication"),
    re.compile(r"knowledge_panel"),
    re.compile(r"_(create|update|delete|retrieve|list|destroy|partial_update|stats)$"),
)

# (product namespace, any of these segments) anywhere in the route
API_SEGMENT_PAIRS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Product-Opener", ("v2", "v3")),
    ("Open-prices", ("prices", "auth", "users", "locations", "proofs")),
    ("Robotoff", ("predict", "annotation-management", "insight-management")),
)


def is_report(route: Sequence[str]) -> bool:
    return len(route) >= 3 and tuple(route[:2]) == REPORT_PREFIX


def has_api_segment(route: Sequence[str]) -> bool:
    return any(
        pattern.search(segment)
        for segment in route
        for pattern in API_SEGMENT_PATTERNS
    )


def has_api_pair(route: Sequence[str]) -> bool:
    # Co-occurrence only; segment order within the route is ignored.
    return any(
        product in route and any(segment in route for segment in segments)
        for product, segments in API_SEGMENT_PAIRS
    )


def is_api_reference(route: Sequence[str]) -> bool:
    return has_api_segment(route) or has_api_pair(route)


def is_schema(route: Sequence[str]) -> bool:
    return tuple(route[: len(SCHEMA_PREFIX)]) == SCHEMA_PREFIX


@dataclass(frozen=True)
class Rule:
    name: str
    matches: Callable[[Sequence[str]], bool]
    namespace: Namespace


# Order matters: first match wins.
RULES: Tuple[Rule, ...] = (
    Rule("report", is_report, Namespace.REPORT),
    Rule("api-reference", is_api_reference, Namespace.API_REFERENCE),
    Rule("schema", is_schema, Namespace.SCHEMA),
)


def classify(route: Sequence[str], rules: Sequence[Rule] = RULES) -> Namespace:
    """Return the content namespace of ``route``; general docs when no rule matches."""
    for rule in rules:
        if rule.matches(route):
            return rule.namespace
    return Namespace.GENERAL_DOC

