from mkdocs.structure.files import File, Files

from docs_plugins.resolve_links.page_index import (
    MarkdownSourceFile,
    PageEntry,
    PageIndex,
    render_as_pages,
    split_locale,
)


def make_files(tmp_path, paths, use_directory_urls=True):
    return Files(
        [
            File(path, str(tmp_path / "docs"), str(tmp_path / "site"), use_directory_urls)
            for path in paths
        ]
    )


class TestSplitLocale:
    def test_known_locale_marker(self):
        assert split_locale("guides/setup.fr.md", ["fr"], "en") == ("guides/setup.md", "fr")

    def test_unknown_marker_is_part_of_the_name(self):
        assert split_locale("guides/setup.v2.md", ["fr"], "en") == ("guides/setup.v2.md", "en")

    def test_no_marker(self):
        assert split_locale("setup.md", ["fr"], "en") == ("setup.md", "en")

    def test_no_extension(self):
        assert split_locale("README", ["fr"], "en") == ("README", "en")


class TestPageIndexLookup:
    def setup_method(self):
        self.index = PageIndex(
            [
                PageEntry("Infra/setup.mdx", "Infra/setup.mdx", "Infra", "en"),
                PageEntry("Infra/setup.mdx", "Infra/setup.fr.mdx", "Infra", "fr"),
                PageEntry("Infra/only-en.md", "Infra/only-en.md", "Infra", "en"),
            ],
            default_locale="en",
        )

    def test_relative_lookup(self):
        link = self.index.lookup("../setup.mdx", "Infra/guides", "en")
        assert link.url == "../setup.mdx"
        assert link.entry.src_uri == "Infra/setup.mdx"

    def test_link_from_the_docs_root(self):
        assert self.index.lookup("Infra/setup.mdx", "", "en").url == "Infra/setup.mdx"

    def test_locale_is_part_of_the_key(self):
        assert self.index.lookup("./setup.mdx", "Infra", "fr").url == "setup.fr.mdx"

    def test_missing_translation_falls_back_to_default_locale(self):
        assert self.index.lookup("./only-en.md", "Infra", "fr").url == "only-en.md"

    def test_escaping_the_docs_root_is_a_miss(self):
        assert self.index.lookup("../../setup.mdx", "Infra", "en") is None
        assert self.index.lookup("../", "", "en") is None

    def test_unknown_path_is_a_miss(self):
        assert self.index.lookup("./nope.mdx", "Infra", "en") is None

    def test_index_is_callable_as_lookup(self):
        assert self.index("./setup.mdx", "Infra", "en") is not None


class TestPageIndexFromFiles:
    def test_only_documentation_pages_are_indexed(self, tmp_path):
        files = make_files(
            tmp_path,
            ["index.md", "Infra/setup.md", "Infra/legacy.mdx", "img/logo.png"],
        )
        index = PageIndex.from_files(files)

        assert len(index) == 2
        assert index.find("./index.md", "", "en").src_uri == "index.md"
        assert index.find("./setup.md", "Infra", "en") is not None
        assert index.find("./legacy.mdx", "Infra", "en") is None
        assert index.find("./logo.png", "img", "en") is None

    def test_locale_variants(self, tmp_path):
        files = make_files(tmp_path, ["setup.md", "setup.fr.md"])
        index = PageIndex.from_files(files, locales=["fr"])

        assert index.find("./setup.md", "", "en").src_uri == "setup.md"
        assert index.find("./setup.md", "", "fr").src_uri == "setup.fr.md"


class TestRenderAsPages:
    def test_mdx_files_become_pages(self, tmp_path):
        files = make_files(tmp_path, ["Infra/setup.mdx", "Infra/notes.md", "img/logo.png"])

        assert render_as_pages(files, [".mdx"]) == 1

        page = files.get_file_from_path("Infra/setup.mdx")
        assert isinstance(page, MarkdownSourceFile)
        assert page.url == "Infra/setup/"
        assert page.dest_uri == "Infra/setup/index.html"
        assert len(files.documentation_pages()) == 2
        assert not files.get_file_from_path("img/logo.png").is_documentation_page()

    def test_indexed_once_rendered(self, tmp_path):
        files = make_files(tmp_path, ["Infra/setup.mdx"])
        render_as_pages(files, [".mdx"])
        assert PageIndex.from_files(files).find("setup.mdx", "Infra", "en") is not None

    def test_no_suffixes(self, tmp_path):
        files = make_files(tmp_path, ["Infra/setup.mdx"])
        assert render_as_pages(files, []) == 0
        assert files.documentation_pages() == []
