from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from extcaps.api.middleware import RequestLogMiddleware
from extcaps.api.models import AnalyzeOut, AnalyzeRequest, ApiError, CapabilityRuleOut
from extcaps.core.manifest import (
    CAPABILITY_RULES,
    CapabilityOptions,
    ManifestError,
    analyze_manifest,
    get_extension_capabilities_async,
)
from extcaps.utils.json_safe import to_jsonable

log = logging.getLogger("extcaps.api")

DEFAULT_MAX_UPLOAD_BYTES = 1024 * 1024


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Configuration for the API service, read from the environment once."""

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        return cls(
            max_upload_bytes=_env_int("EXTCAPS_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            log_level=(os.environ.get("EXTCAPS_LOG_LEVEL", "").strip() or "INFO").upper(),
        )


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def create_app(cfg: ServiceConfig | None = None) -> FastAPI:
    """Create the FastAPI app."""

    cfg = cfg or ServiceConfig.from_env()
    log.setLevel(cfg.log_level)

    app = FastAPI(title="extcaps API", version="0.1")
    app.state.cfg = cfg
    app.add_middleware(RequestLogMiddleware)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True, "rules": len(CAPABILITY_RULES)}

    @app.get("/capabilities", response_model=List[CapabilityRuleOut])
    def list_capabilities() -> List[CapabilityRuleOut]:
        return [
            CapabilityRuleOut(
                capability=r.capability,
                id=r.capability_id,
                description=r.description,
                fields=list(r.fields),
            )
            for r in CAPABILITY_RULES
        ]

    @app.post("/analyze", response_model=AnalyzeOut)
    def analyze_endpoint(req: AnalyzeRequest) -> AnalyzeOut:
        """Detect capabilities of a manifest sent as a JSON object."""

        records = analyze_manifest(req.manifest, req.options.to_options())
        return AnalyzeOut(capabilities=to_jsonable(records))

    async def _save_upload_to_temp(upload: UploadFile) -> Path:
        """Persist an upload into a fresh temp directory.

        Security notes:
        - The client filename is never used; the file is always manifest.json.
        - Reads in chunks and enforces max_upload_bytes.
        """

        tmpdir = Path(tempfile.mkdtemp(prefix="extcaps_api_"))
        out = tmpdir / "manifest.json"
        total = 0
        try:
            with out.open("wb") as f:
                while True:
                    chunk = await upload.read(64 * 1024)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > cfg.max_upload_bytes:
                        raise HTTPException(
                            status_code=413, detail=ApiError(error="upload_too_large").model_dump()
                        )
                    f.write(chunk)
        except BaseException:
            shutil.rmtree(tmpdir, ignore_errors=True)
            raise
        return out

    @app.post("/analyze-file", response_model=AnalyzeOut)
    async def analyze_file_endpoint(
        file: UploadFile = File(...),
        include_fields: bool = Form(default=False),
        normalize_names: bool = Form(default=False),
        include_compatibility: bool = Form(default=False),
        strict: bool = Form(default=False),
    ) -> AnalyzeOut:
        """Detect capabilities of an uploaded manifest.json.

        Non-strict uploads that are not valid JSON objects yield the fallback
        capability; strict uploads are rejected with 400.
        """

        opts = CapabilityOptions(
            strict=strict,
            include_fields=include_fields,
            normalize_names=normalize_names,
            include_compatibility=include_compatibility,
        )
        path = await _save_upload_to_temp(file)
        try:
            records = await get_extension_capabilities_async(path, opts)
        except (ManifestError, ValueError, RecursionError) as e:
            raise HTTPException(
                status_code=400,
                detail=ApiError(error="invalid_manifest", detail=str(e)).model_dump(),
            ) from e
        finally:
            shutil.rmtree(path.parent, ignore_errors=True)
        return AnalyzeOut(capabilities=to_jsonable(records))

    return app
