from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from .models import CapabilityCompatibility

_MDN_UI = "https://developer.mozilla.org/docs/Mozilla/Add-ons/WebExtensions/user_interface"
_MDN_MANIFEST = "https://developer.mozilla.org/docs/Mozilla/Add-ons/WebExtensions/manifest.json"
_URL_OVERRIDES_DOCS = f"{_MDN_MANIFEST}/chrome_url_overrides"
_PAGE_OVERRIDE_NOTES = "Safari does not support bookmarks/history overrides via chrome_url_overrides."

# Keyed by normalized id (or capability key when the two coincide).
SAFARI_COMPATIBILITY: Mapping[str, CapabilityCompatibility] = MappingProxyType(
    {
        "background": CapabilityCompatibility(safari=True),
        "content_scripts": CapabilityCompatibility(safari=True),
        "popup": CapabilityCompatibility(safari=True),
        "action_popup": CapabilityCompatibility(safari=True),
        "sidebar": CapabilityCompatibility(
            safari=False,
            notes=(
                "Chromium uses side_panel; Firefox uses sidebar_action. "
                "Safari does not provide an equivalent sidebar UI API."
            ),
            docs=_MDN_UI,
        ),
        "devtools_page": CapabilityCompatibility(safari=True),
        "options": CapabilityCompatibility(safari=True),
        "web_accessible_resources": CapabilityCompatibility(safari=True),
        "commands": CapabilityCompatibility(safari=True),
        "omnibox": CapabilityCompatibility(
            safari=False,
            notes="Safari does not support Omnibox keyword for WebExtensions.",
            docs=f"{_MDN_MANIFEST}/omnibox",
        ),
        "chrome_url_overrides.newtab": CapabilityCompatibility(
            safari=False,
            notes="Safari does not support chrome_url_overrides.",
            docs=_URL_OVERRIDES_DOCS,
        ),
        "chrome_url_overrides.bookmarks": CapabilityCompatibility(
            safari=False,
            notes=_PAGE_OVERRIDE_NOTES,
            docs=_URL_OVERRIDES_DOCS,
        ),
        "chrome_url_overrides.history": CapabilityCompatibility(
            safari=False,
            notes=_PAGE_OVERRIDE_NOTES,
            docs=_URL_OVERRIDES_DOCS,
        ),
        "declarative_net_request": CapabilityCompatibility(
            safari=False,
            notes="Safari uses a different content blocking model; DNR is not supported.",
            docs="https://developer.chrome.com/docs/extensions/reference/declarativeNetRequest/",
        ),
        "tts_engine": CapabilityCompatibility(
            safari=False,
            notes="Speech engine APIs are not available for Safari WebExtensions.",
            docs=f"{_MDN_MANIFEST}/tts_engine",
        ),
    }
)


def lookup_compatibility(key: str) -> Optional[CapabilityCompatibility]:
    """Return the compatibility entry for a capability id, or None."""
    return SAFARI_COMPATIBILITY.get(key)
