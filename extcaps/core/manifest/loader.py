from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, List, Union

from .analyzer import OptionsLike, analyze_manifest, fallback_capabilities
from .exceptions import InvalidManifestError, ManifestNotFoundError
from .models import CapabilityOptions, CapabilityRecord

log = logging.getLogger("extcaps.loader")

MANIFEST_FILENAME = "manifest.json"

PathLike = Union[str, "os.PathLike[str]"]


def resolve_manifest_path(path: PathLike) -> str:
    """Map an unpacked extension directory to its manifest.json.

    Any other path is returned unchanged (as str).
    """

    p = os.fspath(path)
    if os.path.isdir(p):
        return os.path.join(p, MANIFEST_FILENAME)
    return p


def _read_manifest_text(path: str) -> str:
    # utf-8-sig tolerates a leading BOM, which some packers emit.
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def _parse_manifest(text: str) -> Any:
    """Parse manifest text; reject JSON values that are not objects."""

    manifest = json.loads(text)
    if not isinstance(manifest, dict):
        raise InvalidManifestError(
            f"Manifest must be a JSON object, got {type(manifest).__name__}"
        )
    return manifest


def _not_found(path: str, opts: CapabilityOptions) -> List[CapabilityRecord]:
    if opts.strict:
        raise ManifestNotFoundError(path)
    log.warning("Manifest file not found at: %s", path)
    return fallback_capabilities(opts)


def _unreadable(path: str, exc: Exception, opts: CapabilityOptions) -> List[CapabilityRecord]:
    log.error("Error analyzing extension manifest %s: %s", path, exc, exc_info=exc)
    return fallback_capabilities(opts)


def get_extension_capabilities(
    manifest_path: PathLike, options: OptionsLike = None
) -> List[CapabilityRecord]:
    """Load a manifest file and detect its capabilities.

    Missing files and read/parse failures produce the fallback list (with a
    logged warning/error) unless ``strict`` is set, in which case a missing
    file raises ManifestNotFoundError and other failures propagate unchanged.

    Security notes:
    - The manifest is parsed with the stdlib json parser; nothing is executed.
    """

    opts = CapabilityOptions.coerce(options)
    path = resolve_manifest_path(manifest_path)

    if not os.path.isfile(path):
        return _not_found(path, opts)

    try:
        manifest = _parse_manifest(_read_manifest_text(path))
    except (OSError, UnicodeDecodeError, ValueError, RecursionError) as exc:
        if opts.strict:
            raise
        return _unreadable(path, exc, opts)

    return analyze_manifest(manifest, opts)


async def get_extension_capabilities_async(
    manifest_path: PathLike, options: OptionsLike = None
) -> List[CapabilityRecord]:
    """Async variant of get_extension_capabilities with the same contract.

    The existence check and the file read each run once in a worker thread;
    there is no retry, timeout, or cancellation handling.
    """

    opts = CapabilityOptions.coerce(options)
    path = await asyncio.to_thread(resolve_manifest_path, manifest_path)

    if not await asyncio.to_thread(os.path.isfile, path):
        return _not_found(path, opts)

    try:
        text = await asyncio.to_thread(_read_manifest_text, path)
        manifest = _parse_manifest(text)
    except (OSError, UnicodeDecodeError, ValueError, RecursionError) as exc:
        if opts.strict:
            raise
        return _unreadable(path, exc, opts)

    return analyze_manifest(manifest, opts)
