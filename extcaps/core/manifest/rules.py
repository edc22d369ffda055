from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Tuple

from .presence import (
    any_non_empty_string,
    get_path,
    has_keys,
    has_non_empty_string,
    is_non_empty_list,
    is_non_empty_string,
    is_truthy,
)

Trigger = Callable[[Any], bool]


@dataclass(frozen=True)
class CapabilityRule:
    """Declarative descriptor mapping manifest fields to one capability.

    - capability: stable short key (dedup key)
    - capability_id: normalized id used for sorting and compatibility lookup
    - fields: every path inspected by the trigger, reported verbatim
    - trigger: pure predicate over the parsed manifest
    """

    capability: str
    description: str
    capability_id: str
    fields: Tuple[str, ...]
    trigger: Trigger

    def matches(self, manifest: Any) -> bool:
        return bool(self.trigger(manifest))


def _any_string(*paths: str) -> Trigger:
    return lambda manifest: any_non_empty_string(manifest, paths)


def _check(path: str, predicate: Callable[[Any], bool]) -> Trigger:
    return lambda manifest: predicate(get_path(manifest, path))


def _has_background(manifest: Any) -> bool:
    return any_non_empty_string(
        manifest, ("background.page", "background.service_worker")
    ) or has_non_empty_string(get_path(manifest, "background.scripts"))


def _war_entry_present(item: Any) -> bool:
    # MV2 lists bare paths; MV3 lists {resources: [...], matches: [...]} objects.
    if isinstance(item, str):
        return is_non_empty_string(item)
    if isinstance(item, Mapping):
        return has_non_empty_string(item.get("resources"))
    return False


def _has_web_accessible_resources(manifest: Any) -> bool:
    war = get_path(manifest, "web_accessible_resources")
    return is_non_empty_list(war) and any(_war_entry_present(item) for item in war)


def _rule(capability: str, description: str, capability_id: str, fields, trigger: Trigger) -> CapabilityRule:
    return CapabilityRule(
        capability=capability,
        description=description,
        capability_id=capability_id,
        fields=tuple(fields),
        trigger=trigger,
    )


CAPABILITY_RULES: Tuple[CapabilityRule, ...] = (
    _rule(
        "background",
        "Background service worker or page for persistent functionality",
        "background",
        ("background.page", "background.scripts", "background.service_worker"),
        _has_background,
    ),
    _rule(
        "content_scripts",
        "Content scripts that run on web pages to interact with page content",
        "content_scripts",
        ("content_scripts",),
        _check("content_scripts", is_non_empty_list),
    ),
    _rule(
        "popup",
        "Toolbar popup UI",
        "action_popup",
        ("action.default_popup", "browser_action.default_popup", "page_action.default_popup"),
        _any_string("action.default_popup", "browser_action.default_popup", "page_action.default_popup"),
    ),
    _rule(
        "sidebar",
        "Side panel UI",
        "sidebar",
        ("side_panel.default_path", "sidebar_action.default_panel"),
        _any_string("side_panel.default_path", "sidebar_action.default_panel"),
    ),
    _rule(
        "devtools",
        "Developer tools panel",
        "devtools_page",
        ("devtools_page",),
        _any_string("devtools_page"),
    ),
    _rule(
        "options",
        "Options page for user configuration",
        "options",
        ("options_ui.page", "options_page"),
        _any_string("options_ui.page", "options_page"),
    ),
    _rule(
        "newtab",
        "New tab page override",
        "chrome_url_overrides.newtab",
        ("chrome_url_overrides.newtab",),
        _any_string("chrome_url_overrides.newtab"),
    ),
    _rule(
        "bookmarks",
        "Bookmarks page override",
        "chrome_url_overrides.bookmarks",
        ("chrome_url_overrides.bookmarks",),
        _any_string("chrome_url_overrides.bookmarks"),
    ),
    _rule(
        "history",
        "History page override",
        "chrome_url_overrides.history",
        ("chrome_url_overrides.history",),
        _any_string("chrome_url_overrides.history"),
    ),
    _rule(
        "sandbox",
        "Sandboxed pages for isolated execution",
        "sandbox",
        ("sandbox.pages",),
        _check("sandbox.pages", has_non_empty_string),
    ),
    _rule(
        "web_resources",
        "Web-accessible resources exposed to web pages",
        "web_accessible_resources",
        ("web_accessible_resources",),
        _has_web_accessible_resources,
    ),
    _rule(
        "omnibox",
        "Omnibox keyword integration",
        "omnibox",
        ("omnibox.keyword",),
        _check("omnibox.keyword", is_truthy),
    ),
    _rule(
        "commands",
        "Keyboard shortcuts and command actions",
        "commands",
        ("commands",),
        _check("commands", has_keys),
    ),
    _rule(
        "settings_homepage",
        "Browser settings override: homepage",
        "chrome_settings_overrides.homepage",
        ("chrome_settings_overrides.homepage",),
        _check("chrome_settings_overrides.homepage", is_truthy),
    ),
    _rule(
        "settings_search_provider",
        "Browser settings override: search provider",
        "chrome_settings_overrides.search_provider",
        ("chrome_settings_overrides.search_provider",),
        _check("chrome_settings_overrides.search_provider", is_truthy),
    ),
    _rule(
        "settings_startup_pages",
        "Browser settings override: startup pages",
        "chrome_settings_overrides.startup_pages",
        ("chrome_settings_overrides.startup_pages",),
        _check("chrome_settings_overrides.startup_pages", is_non_empty_list),
    ),
    _rule(
        "declarative_net_request",
        "Declarative network request rules",
        "declarative_net_request",
        ("declarative_net_request.rule_resources",),
        _check("declarative_net_request.rule_resources", is_non_empty_list),
    ),
    _rule(
        "tts_engine",
        "Text-to-speech engine",
        "tts_engine",
        ("tts_engine.voices",),
        _check("tts_engine.voices", is_non_empty_list),
    ),
)

_RULES_BY_KEY: Dict[str, CapabilityRule] = {r.capability: r for r in CAPABILITY_RULES}


def get_rule(capability: str) -> CapabilityRule:
    """Return the built-in rule for a capability key (KeyError if unknown)."""
    return _RULES_BY_KEY[capability]
