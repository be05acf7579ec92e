"""Command line interface for p3dkit."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

from .api import inspect_file, load_from_config
from .config import LoaderConfig, apply_env, load_config
from .errors import P3DError
from .logging import configure_logging, section, step
from .reporting import (
    FileStatus,
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)
from .resources.manager import CATEGORIES
from .utils.io import FileReadError


def _print_tree(
    node: Dict[str, Any], depth: int, max_depth: int | None
) -> None:
    pad = "  " * depth
    print(
        f"{pad}{node['name']} @{node['offset']} "
        f"payload={node['payload_size']} total={node['total_size']}"
    )
    if max_depth is not None and depth >= max_depth:
        if node["children"]:
            print(f"{pad}  ... {len(node['children'])} children")
        return
    for child in node["children"]:
        _print_tree(child, depth + 1, max_depth)


def _tree_cmd(args: argparse.Namespace) -> int:
    rep = get_reporter()
    try:
        info = inspect_file(args.file)
    except (P3DError, FileReadError, OSError) as e:
        rep.error(f"{args.file.name}: {e}")
        return 1
    rep.flush()
    if args.json:
        print(json.dumps(info, indent=2, sort_keys=True))
        return 0
    _print_tree(info["tree"], 0, args.depth)
    decoded = " ".join(f"{k}={v}" for k, v in sorted(info["decoded"].items()))
    rep.status(f"Decode summary: file={info['file']} {decoded}")
    for failure in info["failures"]:
        rep.warning(
            f"{failure['chunk']} @{failure['offset']}: {failure['message']}"
        )
    return 0


def _load_cmd(args: argparse.Namespace) -> int:
    if args.config is not None:
        config = load_config(args.config)
    else:
        config = LoaderConfig()
    if args.files:
        config = replace(config, files=config.files + list(args.files))
    if args.strict:
        config = replace(config, strict=True)
    config = apply_env(config)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    if not config.files:
        get_reporter().error("No input files (pass files or --config)")
        return 2
    step(f"loading {len(config.files)} file(s)")
    manager, records = load_from_config(config)
    rep = get_reporter()
    rep.flush()
    counts = manager.counts()
    rep.status(
        "Resources summary: "
        + " ".join(f"{c}={counts[c]}" for c in CATEGORIES)
    )
    if args.list:
        with section("Resources"):
            for category in CATEGORIES:
                for name in manager.names(category):
                    print(f"{category}\t{name}")
    if args.json:
        out = {
            "files": [
                {
                    "file": r.label,
                    "status": r.status.name.lower(),
                    "size": r.size,
                    "decoded": r.counts,
                    "failures": r.failures,
                    "error": r.error,
                }
                for r in records
            ],
            "resources": manager.describe(),
        }
        print(json.dumps(out, indent=2, sort_keys=True))
    failed = [r for r in records if r.status is FileStatus.FAILED]
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="p3dkit", description="Pure3D (P3D) asset file loader"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Reporter backend: plain (default), rich, json (JSONL), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    t = sub.add_parser("tree", help="Print the chunk tree of a P3D file")
    t.add_argument("file", type=Path)
    t.add_argument("--json", action="store_true", help="Emit JSON")
    t.add_argument(
        "--depth", type=int, default=None, help="Limit printed nesting depth"
    )
    t.set_defaults(func=_tree_cmd)

    ld = sub.add_parser("load", help="Load P3D files into a resource manager")
    ld.add_argument("files", nargs="*", type=Path)
    ld.add_argument(
        "--config", type=Path, help="JSON/YAML loader configuration"
    )
    ld.add_argument(
        "--strict",
        action="store_true",
        help="Reject a whole file when any chunk fails to decode",
    )
    ld.add_argument(
        "--seed", type=int, default=None, help="Seed for texture set picks"
    )
    ld.add_argument(
        "--list", action="store_true", help="List loaded resource names"
    )
    ld.add_argument("--json", action="store_true", help="Emit JSON summary")
    ld.set_defaults(func=_load_cmd)

    return p


def main(argv: List[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    requested = args.reporter
    if requested == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except (P3DError, OSError) as e:
        get_reporter().error(str(e))
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
