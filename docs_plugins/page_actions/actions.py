import copy
import html
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from mkdocs.utils import log

# Fields whose string values may contain {{ placeholders }}
INTERPOLATED_FIELDS = ("href", "download", "clipboardContent")


class PageActions:
    """
    Resolves the page source actions declared in ``page_actions.json`` and
    renders them as a split-button: the action marked ``primary`` becomes
    the button, every other action an item of its dropdown menu.
    """

    def __init__(self, schema_path: Optional[Path] = None):
        self._actions_schema = None
        self._actions_config_path = schema_path or Path(__file__).parent / "page_actions.json"

    def _load_actions_schema(self):
        try:
            if self._actions_config_path.exists():
                text = self._actions_config_path.read_text(encoding="utf-8")
                self._actions_schema = json.loads(text)
                log.debug(
                    f"[page_actions] Loaded actions schema from {self._actions_config_path}"
                )
            else:
                log.warning(
                    f"[page_actions] Actions schema file not found at {self._actions_config_path}"
                )
                self._actions_schema = {"actions": []}
        except json.JSONDecodeError as e:
            log.error(f"[page_actions] Failed to parse actions schema JSON: {e}")
            self._actions_schema = {"actions": []}

    @property
    def schema(self) -> Dict[str, Any]:
        if not self._actions_schema:
            self._load_actions_schema()
        return self._actions_schema

    def is_page_excluded(self, src_path: str, page_meta: Dict[str, Any]) -> bool:
        """Check whether a page should be left without the widget."""
        config = self.schema.get("pageWidget", {})
        fm_key = config.get("frontMatterKey", "hide_page_actions")

        for pattern in config.get("excludePages", []):
            if src_path == pattern or src_path.endswith(pattern):
                return True
        return bool(page_meta.get(fm_key))

    def resolve_actions(self, page_url: str, filename: str) -> List[Dict[str, Any]]:
        """
        Resolves the list of actions for one source file.

        Args:
            page_url: Site-absolute URL of the published source file.
            filename: The name offered for downloads (e.g., 'setup.md').

        Returns:
            A list of action dictionaries with all placeholders resolved.
        """
        replacements = {
            "{{ page_url }}": page_url,
            "{{ filename }}": filename,
        }

        resolved_actions = []
        for action_def in self.schema.get("actions", []):
            action = copy.deepcopy(action_def)
            for field in INTERPOLATED_FIELDS:
                value = action.get(field)
                if not isinstance(value, str):
                    continue
                for placeholder, replacement in replacements.items():
                    value = value.replace(placeholder, replacement)
                action[field] = value
            resolved_actions.append(action)
        return resolved_actions

    # ------------------------------------------------------------------
    # URL / path resolution
    # ------------------------------------------------------------------

    @staticmethod
    def build_source_path(route: Sequence[str]) -> str:
        """Where a route's source is published, mirroring the page URL.

        ``["Infra", "setup"]`` -> ``Infra/setup/index.md``; the root route is
        ``index.md``. Distinct routes never share a path.
        """
        return "/".join([*route, "index.md"])

    @staticmethod
    def build_filename(route: Sequence[str]) -> str:
        """Name offered when the source is downloaded."""
        return f"{route[-1] if route else 'index'}.md"

    @staticmethod
    def build_source_url(base_path: str, source_dir: str, source_path: str) -> str:
        """Build the ``{base}/{source_dir}/{source_path}`` URL of a published source."""
        base = base_path.rstrip("/")
        return f"{base}/{source_dir.strip('/')}/{source_path}"

    # ------------------------------------------------------------------
    # HTML generation
    # ------------------------------------------------------------------

    def _render_primary_button(self, action: dict, url: str) -> str:
        safe_url = html.escape(url, quote=True)
        label = html.escape(action.get("label", "Copy page"), quote=True)
        icon_svg = action.get("icon", "")
        action_id = html.escape(action.get("id", ""), quote=True)

        return (
            '<button class="page-actions-btn page-actions-copy"'
            f' title="{label}"'
            f' aria-label="{label}"'
            ' role="button"'
            f' data-action="{action_id}"'
            f' data-url="{safe_url}">'
            f"{icon_svg}"
            f'<span class="button-text">{label}</span>'
            "</button>"
        )

    def _render_action_item(self, action: dict, url: str) -> str:
        """Link actions render as ``<a>``, clipboard actions as ``<button>``."""
        action_id = html.escape(action.get("id", ""), quote=True)
        label = html.escape(action.get("label", ""), quote=True)
        inner = f"{action.get('icon', '')}<span>{label}</span>"

        if action.get("type", "link") == "link":
            safe_href = html.escape(action.get("href", ""), quote=True)
            if "download" in action:
                extra = f' download="{html.escape(action["download"], quote=True)}"'
            else:
                extra = ' target="_blank" rel="noopener noreferrer"'
            return (
                f'<a class="page-actions-item" href="{safe_href}"{extra}'
                f' data-action-id="{action_id}" role="menuitem" tabindex="-1">'
                f"{inner}</a>"
            )

        safe_url = html.escape(url, quote=True)
        return (
            '<button class="page-actions-item" data-action-type="clipboard"'
            f' data-action-id="{action_id}" data-url="{safe_url}"'
            ' role="menuitem" tabindex="-1">'
            f"{inner}</button>"
        )

    def generate_dropdown_html(self, url: str, filename: str) -> str:
        """
        Generate the HTML for the page actions split-button.

        Args:
            url: The URL of the published source file.
            filename: The filename for the download action.

        Returns:
            The HTML string for the component.
        """
        actions = self.resolve_actions(page_url=url, filename=filename)

        primary_action = None
        dropdown_actions = []
        for action in actions:
            if action.get("primary"):
                primary_action = action
            else:
                dropdown_actions.append(action)

        copy_btn = self._render_primary_button(primary_action or {}, url)
        dropdown_btn = (
            '<button class="page-actions-btn page-actions-trigger"'
            ' title="More options" type="button" aria-label="More options"'
            ' aria-haspopup="true" aria-expanded="false" role="button">'
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"'
            ' class="page-actions-icon page-actions-chevron" aria-hidden="true">'
            '<path d="M7 10l5 5 5-5z"/></svg>'
            "</button>"
        )
        menu_items = "".join(
            self._render_action_item(action, url) for action in dropdown_actions
        )

        return (
            '<div class="page-actions-container">'
            f"{copy_btn}"
            f"{dropdown_btn}"
            f'<div class="page-actions-menu" role="menu">{menu_items}</div>'
            "</div>"
        )
