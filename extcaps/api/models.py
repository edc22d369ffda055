from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from extcaps.core.manifest import CapabilityOptions


class ApiError(BaseModel):
    """Standard API error payload."""

    error: str
    detail: Optional[str] = None


class OptionsIn(BaseModel):
    """Capability options; accepts snake_case or the camelCase JSON spelling."""

    model_config = ConfigDict(populate_by_name=True)

    strict: bool = False
    include_fields: bool = Field(default=False, alias="includeFields")
    normalize_names: bool = Field(default=False, alias="normalizeNames")
    include_compatibility: bool = Field(default=False, alias="includeCompatibility")

    def to_options(self) -> CapabilityOptions:
        return CapabilityOptions(
            strict=self.strict,
            include_fields=self.include_fields,
            normalize_names=self.normalize_names,
            include_compatibility=self.include_compatibility,
        )


class AnalyzeRequest(BaseModel):
    """A pre-parsed manifest plus options."""

    manifest: Dict[str, Any]
    options: OptionsIn = Field(default_factory=OptionsIn)


class AnalyzeOut(BaseModel):
    """Detection result.

    Capability objects are CapabilityRecord.to_dict() payloads, so optional
    keys are absent (not null) when they were not requested.
    """

    capabilities: List[Dict[str, Any]] = Field(default_factory=list)


class CapabilityRuleOut(BaseModel):
    """One entry of the built-in rule catalog."""

    capability: str
    id: str
    description: str
    fields: List[str] = Field(default_factory=list)
