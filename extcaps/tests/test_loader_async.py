import asyncio
import json
import logging
from pathlib import Path

import pytest

from extcaps.core.manifest import (
    ManifestNotFoundError,
    get_extension_capabilities,
    get_extension_capabilities_async,
)

FALLBACK = {"capability": "manifest", "description": "Basic extension manifest configuration"}

MANIFEST = {
    "manifest_version": 2,
    "name": "MV2 Extension",
    "version": "1.0",
    "background": {"scripts": ["bg.js"]},
    "browser_action": {"default_popup": "popup.html"},
    "web_accessible_resources": ["x.js"],
}


def test_async_matches_sync_result(tmp_path: Path) -> None:
    p = tmp_path / "manifest.json"
    p.write_text(json.dumps(MANIFEST), encoding="utf-8")
    opts = {"includeFields": True, "normalizeNames": True, "includeCompatibility": True}

    records = asyncio.run(get_extension_capabilities_async(str(p), opts))
    assert records == get_extension_capabilities(str(p), opts)
    assert [r.id for r in records] == ["action_popup", "background", "web_accessible_resources"]


def test_async_missing_file_falls_back_with_warning(tmp_path: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="extcaps.loader"):
        records = asyncio.run(get_extension_capabilities_async(tmp_path / "missing.json"))
    assert [r.to_dict() for r in records] == [FALLBACK]
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_async_missing_file_strict(tmp_path: Path) -> None:
    with pytest.raises(ManifestNotFoundError):
        asyncio.run(get_extension_capabilities_async(tmp_path / "missing.json", {"strict": True}))


def test_async_invalid_json(tmp_path: Path, caplog) -> None:
    p = tmp_path / "manifest.json"
    p.write_text("not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="extcaps.loader"):
        records = asyncio.run(get_extension_capabilities_async(p))
    assert [r.to_dict() for r in records] == [FALLBACK]
    assert any(r.levelno == logging.ERROR for r in caplog.records)

    with pytest.raises(json.JSONDecodeError):
        asyncio.run(get_extension_capabilities_async(p, {"strict": True}))


def test_concurrent_calls_are_independent(tmp_path: Path) -> None:
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.mkdir()
    b.mkdir()
    (a / "manifest.json").write_text(json.dumps({"devtools_page": "d.html"}), encoding="utf-8")
    (b / "manifest.json").write_text(json.dumps({"omnibox": {"keyword": "k"}}), encoding="utf-8")

    async def run_all():
        return await asyncio.gather(
            get_extension_capabilities_async(a),
            get_extension_capabilities_async(b),
            get_extension_capabilities_async(tmp_path / "c"),
        )

    ra, rb, rc = asyncio.run(run_all())
    assert [r.capability for r in ra] == ["devtools"]
    assert [r.capability for r in rb] == ["omnibox"]
    assert [r.capability for r in rc] == ["manifest"]


def test_async_deeply_nested_json_falls_back(tmp_path: Path) -> None:
    p = tmp_path / "manifest.json"
    p.write_text("[" * 200000 + "]" * 200000, encoding="utf-8")

    records = asyncio.run(get_extension_capabilities_async(p))
    assert [r.to_dict() for r in records] == [FALLBACK]

    with pytest.raises(RecursionError):
        asyncio.run(get_extension_capabilities_async(p, {"strict": True}))
