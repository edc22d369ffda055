from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

# camelCase spellings accepted from JSON callers.
_OPTION_ALIASES = {
    "strict": "strict",
    "include_fields": "include_fields",
    "includeFields": "include_fields",
    "normalize_names": "normalize_names",
    "normalizeNames": "normalize_names",
    "include_compatibility": "include_compatibility",
    "includeCompatibility": "include_compatibility",
}


@dataclass(frozen=True, slots=True)
class CapabilityOptions:
    """Per-call flags controlling loader policy and record shaping.

    - strict: raise instead of returning the fallback list
    - include_fields: attach the inspected manifest field paths
    - normalize_names: attach the normalized capability id
    - include_compatibility: attach Safari compatibility metadata
    """

    strict: bool = False
    include_fields: bool = False
    normalize_names: bool = False
    include_compatibility: bool = False

    @classmethod
    def coerce(cls, value: "CapabilityOptions | Mapping[str, Any] | None") -> "CapabilityOptions":
        """Build options from None, an instance, or a (snake/camel case) mapping.

        Unknown keys are ignored.

        Time:  O(k) for k mapping keys
        Space: O(1)
        """

        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            kwargs: Dict[str, bool] = {}
            for key, raw in value.items():
                name = _OPTION_ALIASES.get(str(key))
                if name is not None:
                    kwargs[name] = bool(raw)
            return cls(**kwargs)
        raise TypeError("options must be CapabilityOptions, a mapping, or None")

    def to_dict(self) -> Dict[str, bool]:
        return {
            "strict": self.strict,
            "include_fields": self.include_fields,
            "normalize_names": self.normalize_names,
            "include_compatibility": self.include_compatibility,
        }


@dataclass(frozen=True, slots=True)
class CapabilityCompatibility:
    """Static Safari compatibility entry for one capability id."""

    safari: bool
    notes: Optional[str] = None
    docs: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"safari": self.safari}
        if self.notes is not None:
            out["notes"] = self.notes
        if self.docs is not None:
            out["docs"] = self.docs
        return out


@dataclass(frozen=True, slots=True)
class CapabilityRecord:
    """One detected capability.

    Optional attributes stay None unless the matching option was requested
    and data exists; to_dict() omits them so the serialized shape only grows
    when asked to.
    """

    capability: str
    description: str
    id: Optional[str] = None
    fields: Optional[Tuple[str, ...]] = None
    compatibility: Optional[CapabilityCompatibility] = None

    @property
    def sort_key(self) -> str:
        return (self.id if self.id is not None else self.capability).lower()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "capability": self.capability,
            "description": self.description,
        }
        if self.id is not None:
            out["id"] = self.id
        if self.fields is not None:
            out["fields"] = list(self.fields)
        if self.compatibility is not None:
            out["compatibility"] = self.compatibility.to_dict()
        return out
