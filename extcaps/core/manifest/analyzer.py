from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .compatibility import lookup_compatibility
from .models import CapabilityOptions, CapabilityRecord
from .rules import CAPABILITY_RULES, CapabilityRule

FALLBACK_CAPABILITY = "manifest"
FALLBACK_DESCRIPTION = "Basic extension manifest configuration"

OptionsLike = Union[CapabilityOptions, Mapping[str, Any], None]


def fallback_capabilities(options: OptionsLike = None) -> List[CapabilityRecord]:
    """Return the single-record list used when nothing was detected.

    Carries id/fields (empty) when requested, never compatibility.
    """

    opts = CapabilityOptions.coerce(options)
    return [
        CapabilityRecord(
            capability=FALLBACK_CAPABILITY,
            description=FALLBACK_DESCRIPTION,
            id=FALLBACK_CAPABILITY if opts.normalize_names else None,
            fields=() if opts.include_fields else None,
        )
    ]


def build_record(rule: CapabilityRule, opts: CapabilityOptions) -> CapabilityRecord:
    """Shape a record for a matched rule according to the requested options."""

    fields = rule.fields if (opts.include_fields and rule.fields) else None
    record_id = rule.capability_id if (opts.normalize_names and rule.capability_id) else None

    compatibility = None
    if opts.include_compatibility:
        # Looked up by normalized id even when the id itself is not attached.
        compatibility = lookup_compatibility(rule.capability_id or rule.capability)

    return CapabilityRecord(
        capability=rule.capability,
        description=rule.description,
        id=record_id,
        fields=fields,
        compatibility=compatibility,
    )


def analyze_manifest(
    manifest: Any,
    options: OptionsLike = None,
    *,
    rules: Optional[Sequence[CapabilityRule]] = None,
) -> List[CapabilityRecord]:
    """Detect the capabilities declared by a parsed extension manifest.

    Each rule is evaluated independently; records are keyed by capability
    (later rules overwrite earlier ones with the same key) and returned sorted
    case-insensitively by id when present, else capability. Never returns an
    empty list and never raises for malformed manifests: a non-object value is
    treated as an empty manifest.

    Time:  O(r * d) for r rules of path depth d, plus O(r log r) to sort
    Space: O(r)
    """

    opts = CapabilityOptions.coerce(options)
    if not isinstance(manifest, Mapping):
        return fallback_capabilities(opts)

    table: Dict[str, CapabilityRecord] = {}
    for rule in CAPABILITY_RULES if rules is None else rules:
        if rule.matches(manifest):
            table[rule.capability] = build_record(rule, opts)

    if not table:
        return fallback_capabilities(opts)
    return sorted(table.values(), key=lambda r: r.sort_key)
