from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from extcaps.core.manifest import (
    CAPABILITY_RULES,
    CapabilityOptions,
    ManifestError,
    get_extension_capabilities,
)
from extcaps.utils.json_safe import to_jsonable


def _options_from_args(args: argparse.Namespace) -> CapabilityOptions:
    return CapabilityOptions(
        strict=bool(args.strict),
        include_fields=bool(args.fields),
        normalize_names=bool(args.normalize),
        include_compatibility=bool(args.compat),
    )


def _print_records(path: str, records) -> None:
    print(path)
    for r in records:
        line = f"  {r.capability:<26} {r.description}"
        if r.id is not None and r.id != r.capability:
            line += f"  id={r.id}"
        print(line)
        if r.fields:
            print(f"    fields: {', '.join(r.fields)}")
        if r.compatibility is not None:
            safari = "yes" if r.compatibility.safari else "no"
            note = f" ({r.compatibility.notes})" if r.compatibility.notes else ""
            print(f"    safari: {safari}{note}")


def cmd_analyze(args: argparse.Namespace) -> int:
    """Detect capabilities for one or more manifest files.

    Non-strict runs always succeed (missing or broken manifests report the
    fallback capability). In strict mode the first failure aborts with exit 2.
    """

    opts = _options_from_args(args)
    results: Dict[str, Any] = {}

    for path in args.paths:
        try:
            records = get_extension_capabilities(path, opts)
        except (ManifestError, OSError, ValueError, RecursionError) as e:
            print(f"error: {path}: {e}", file=sys.stderr)
            return 2

        if args.json:
            results[path] = to_jsonable(records)
        else:
            _print_records(path, records)

    if args.json:
        print(json.dumps(results, indent=2))
    return 0


def cmd_list_capabilities(args: argparse.Namespace) -> int:
    """List the built-in detection rules."""

    if args.json:
        out: List[Dict[str, Any]] = [
            {
                "capability": r.capability,
                "id": r.capability_id,
                "description": r.description,
                "fields": list(r.fields),
            }
            for r in CAPABILITY_RULES
        ]
        print(json.dumps(out, indent=2))
        return 0

    for r in CAPABILITY_RULES:
        print(f"{r.capability}  id={r.capability_id}  fields=[{','.join(r.fields)}]  {r.description}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the extcaps API server.

    Security notes:
    - Bind to 127.0.0.1 by default (safer than 0.0.0.0).
    """

    try:
        import uvicorn
    except ImportError as e:
        print(f"error: uvicorn is required to serve the API: {e}", file=sys.stderr)
        return 2

    from extcaps.api.server import create_app

    uvicorn.run(create_app(), host=args.host, port=int(args.port), log_level=args.log_level)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    p = argparse.ArgumentParser(prog="extcaps", description="Browser extension capability analyzer")
    p.add_argument(
        "--log-level",
        dest="root_log_level",
        default="WARNING",
        help="Logging level for manifest loader diagnostics (default: WARNING)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    an = sub.add_parser("analyze", help="Detect capabilities declared by manifest files")
    an.add_argument("paths", nargs="+", help="manifest.json files or unpacked extension directories")
    an.add_argument("--fields", action="store_true", help="Include inspected manifest field paths")
    an.add_argument("--normalize", action="store_true", help="Include normalized capability ids")
    an.add_argument("--compat", action="store_true", help="Include Safari compatibility metadata")
    an.add_argument("--strict", action="store_true", help="Fail on missing or invalid manifests")
    an.add_argument("--json", action="store_true", help="Print JSON")
    an.set_defaults(func=cmd_analyze)

    lc = sub.add_parser("list-capabilities", help="List built-in capability rules")
    lc.add_argument("--json", action="store_true", help="Print JSON")
    lc.set_defaults(func=cmd_list_capabilities)

    sv = sub.add_parser("serve", help="Run the extcaps FastAPI server")
    sv.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    sv.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    sv.add_argument("--log-level", dest="log_level", default="info", help="Uvicorn log level")
    sv.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    """CLI entry."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=str(args.root_log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
