"""Browser-extension manifest capability detection.

Maps a manifest.json (MV2, MV3, and Firefox dialects) to a sorted,
deduplicated list of capability records such as background execution,
content scripts, or a toolbar popup.

Security notes:
- Manifests are untrusted input; detection only inspects field presence.
- Nothing in a manifest is executed, fetched, or mutated.
"""

from .analyzer import (
    FALLBACK_CAPABILITY,
    FALLBACK_DESCRIPTION,
    analyze_manifest,
    build_record,
    fallback_capabilities,
)
from .compatibility import SAFARI_COMPATIBILITY, lookup_compatibility
from .exceptions import InvalidManifestError, ManifestError, ManifestNotFoundError
from .loader import (
    get_extension_capabilities,
    get_extension_capabilities_async,
    resolve_manifest_path,
)
from .models import CapabilityCompatibility, CapabilityOptions, CapabilityRecord
from .rules import CAPABILITY_RULES, CapabilityRule, get_rule

__all__ = [
    "FALLBACK_CAPABILITY",
    "FALLBACK_DESCRIPTION",
    "analyze_manifest",
    "build_record",
    "fallback_capabilities",
    "SAFARI_COMPATIBILITY",
    "lookup_compatibility",
    "ManifestError",
    "ManifestNotFoundError",
    "InvalidManifestError",
    "get_extension_capabilities",
    "get_extension_capabilities_async",
    "resolve_manifest_path",
    "CapabilityOptions",
    "CapabilityRecord",
    "CapabilityCompatibility",
    "CAPABILITY_RULES",
    "CapabilityRule",
    "get_rule",
]
