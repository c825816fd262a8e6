import pytest

from docs_plugins.resolve_links.links import (
    HrefResolver,
    LinkContext,
    build_href_candidates,
    is_external_href,
    resolve_href,
    split_href,
)
from docs_plugins.resolve_links.page_index import PageEntry, PageIndex


def make_index():
    return PageIndex(
        [
            PageEntry("Infra/setup.mdx", "Infra/setup.mdx", "Infra", "en"),
            PageEntry("Infra/guides/install.md", "Infra/guides/install.md", "Infra/guides", "en"),
            PageEntry("Infra/guides/install.mdx", "Infra/guides/install.mdx", "Infra/guides", "en"),
            PageEntry("Infra/guides/docs.mdx", "Infra/guides/docs.mdx", "Infra/guides", "en"),
            PageEntry(
                "Infra/guides/nested/index.mdx",
                "Infra/guides/nested/index.mdx",
                "Infra/guides/nested",
                "en",
            ),
        ]
    )


class RecordingLookup:
    """Lookup that never matches and remembers what it was asked."""

    def __init__(self):
        self.calls = []

    def __call__(self, candidate, directory, locale):
        self.calls.append(candidate)
        return None


class TestBuildHrefCandidates:
    def test_md_tries_literal_path_first(self):
        assert build_href_candidates("./setup.md") == ["./setup.md", "./setup.mdx"]

    def test_mdx_is_already_canonical(self):
        assert build_href_candidates("./setup.mdx") == ["./setup.mdx"]

    def test_trailing_slash_tries_sibling_before_index(self):
        assert build_href_candidates("docs/") == ["docs.mdx", "docs/index.mdx"]

    def test_other_shapes_are_untouched(self):
        assert build_href_candidates("./setup") == ["./setup"]
        assert build_href_candidates("./image.png") == ["./image.png"]


class TestSplitHref:
    def test_query_and_fragment(self):
        assert split_href("foo?x=1#y") == ("foo", "?x=1#y")

    def test_fragment_only_suffix(self):
        assert split_href("../setup.md#install") == ("../setup.md", "#install")

    def test_no_suffix(self):
        assert split_href("foo/") == ("foo/", "")


class TestResolveHref:
    def setup_method(self):
        self.index = make_index()
        self.context = LinkContext(current_dir="Infra/guides", locale="en")

    @pytest.mark.parametrize(
        "href",
        [
            "/Infra/setup/",
            "#install",
            "https://example.com/setup.md",
            "mailto:docs@example.com",
            "HTTP://EXAMPLE.COM",
        ],
    )
    def test_external_hrefs_are_returned_unchanged(self, href):
        lookup = RecordingLookup()
        assert is_external_href(href)
        assert resolve_href(href, self.context, lookup) == href
        assert lookup.calls == []

    def test_md_link_resolves_to_mdx_page(self):
        result = resolve_href("../setup.md#install", self.context, self.index.lookup)
        assert result == "../setup.mdx#install"

    def test_bare_relative_link_gets_dot_prefix(self):
        lookup = RecordingLookup()
        resolve_href("install.md", self.context, lookup)
        assert lookup.calls == ["./install.md", "./install.mdx"]

    def test_literal_md_wins_over_mdx(self):
        result = resolve_href("install.md", self.context, self.index.lookup)
        assert result == "install.md"

    def test_trailing_slash_prefers_sibling_file(self):
        result = resolve_href("docs/", self.context, self.index.lookup)
        assert result == "docs.mdx"

    def test_trailing_slash_falls_back_to_index(self):
        result = resolve_href("nested/", self.context, self.index.lookup)
        assert result == "nested/index.mdx"

    def test_query_and_fragment_are_preserved(self):
        result = resolve_href("../setup.md?x=1#y", self.context, self.index.lookup)
        assert result == "../setup.mdx?x=1#y"

    def test_query_and_fragment_preserved_when_unresolved(self):
        result = resolve_href("foo?x=1#y", self.context, self.index.lookup)
        assert result.endswith("?x=1#y")
        assert result == "foo?x=1#y"

    def test_unresolved_link_is_not_rewritten(self):
        assert resolve_href("../missing.md", self.context, self.index.lookup) == "../missing.md"

    @pytest.mark.parametrize(
        "href", ["../setup.md#install", "docs/", "nested/?a=b", "missing/", "plain"]
    )
    def test_resolution_is_idempotent(self, href):
        once = resolve_href(href, self.context, self.index.lookup)
        twice = resolve_href(once, self.context, self.index.lookup)
        assert once == twice


class TestHrefResolver:
    def test_binds_lookup_and_context(self):
        resolver = HrefResolver(make_index().lookup, LinkContext("Infra", "en"))
        assert resolver("setup.md") == "setup.mdx"
        assert resolver("#top") == "#top"
