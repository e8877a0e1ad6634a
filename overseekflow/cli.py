"""Command-line interface for the OverSeek flow builder.

Commands:
- validate: check a saved flow JSON file
- preview: print the condition preview of every condition node in a flow
- recipes: list recipes, or write one out as a flow JSON file
- serve: run the flow builder backend (FastAPI)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .visual.conditions import preview_for_config
from .visual.models import FlowDefinition, NodeKind
from .visual.recipes import AUTOMATION_CATEGORIES, get_recipe, instantiate_recipe, list_recipes
from .visual.validation import has_errors, validate_flow


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="overseekflow", add_help=True)
    sub = p.add_subparsers(dest="command")

    val = sub.add_parser("validate", help="Validate a flow JSON file ({nodes, edges})")
    val.add_argument("flow", help="Path to flow JSON")
    val.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    prev = sub.add_parser("preview", help="Print condition previews for a flow JSON file")
    prev.add_argument("flow", help="Path to flow JSON")

    rec = sub.add_parser("recipes", help="List automation recipes")
    rec.add_argument("--category", default=None, choices=list(AUTOMATION_CATEGORIES))
    rec.add_argument("--export", default=None, metavar="RECIPE_ID", help="Write a recipe as flow JSON")
    rec.add_argument("--out", default=None, help="Output path for --export (default: stdout)")

    serve = sub.add_parser("serve", help="Run the flow builder backend (FastAPI)")
    serve.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload (dev)")
    serve.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "info"))
    serve.add_argument(
        "--flows-dir",
        default=os.getenv("OVERSEEKFLOW_FLOWS_DIR") or "",
        help="Directory holding saved flow JSON files",
    )

    return p


def _load_flow(path: str) -> FlowDefinition:
    return FlowDefinition.from_json(Path(path).read_bytes())


def _cmd_validate(ns: argparse.Namespace) -> int:
    flow = _load_flow(ns.flow)
    issues = validate_flow(flow)
    for issue in issues:
        where = issue.node_id or issue.edge_id or "-"
        sys.stdout.write(f"{issue.level}\t{where}\t{issue.message}\n")
    if has_errors(issues) or (ns.strict and issues):
        return 1
    sys.stdout.write(f"ok ({len(flow.nodes)} nodes, {len(flow.edges)} edges)\n")
    return 0


def _cmd_preview(ns: argparse.Namespace) -> int:
    flow = _load_flow(ns.flow)
    for node in flow.nodes:
        if node.type is not NodeKind.CONDITION:
            continue
        text = preview_for_config(node.data.config) or "(no complete conditions)"
        sys.stdout.write(f"{node.id}\t{node.data.label}\t{text}\n")
    return 0


def _cmd_recipes(ns: argparse.Namespace) -> int:
    if ns.export:
        recipe = get_recipe(ns.export)
        if recipe is None:
            sys.stderr.write(f"Unknown recipe: {ns.export}\n")
            return 2
        payload = instantiate_recipe(recipe).to_json(indent=2)
        if ns.out:
            Path(ns.out).write_text(payload + "\n", encoding="utf-8")
            sys.stdout.write(str(ns.out) + "\n")
        else:
            sys.stdout.write(payload + "\n")
        return 0

    for recipe in list_recipes(ns.category):
        sys.stdout.write(f"{recipe.id}\t{recipe.category}\t{recipe.name}\n")
    return 0


def _cmd_serve(ns: argparse.Namespace) -> int:
    try:
        import uvicorn  # type: ignore
    except ImportError:
        sys.stderr.write(
            "Server dependencies are not installed.\n"
            "Install with: pip install \"overseekflow[server]\"\n"
        )
        return 2

    flows_dir = str(getattr(ns, "flows_dir", "") or "").strip()
    if flows_dir:
        os.environ["OVERSEEKFLOW_FLOWS_DIR"] = flows_dir

    uvicorn.run(
        "web.backend.main:app",
        host=str(ns.host),
        port=int(ns.port),
        reload=bool(ns.reload),
        log_level=str(ns.log_level),
    )
    return 0


def main(args: Optional[List[str]] = None) -> int:
    if args is None:
        args = sys.argv[1:]

    parser = _build_parser()
    ns = parser.parse_args(args)
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

    handlers = {
        "validate": _cmd_validate,
        "preview": _cmd_preview,
        "recipes": _cmd_recipes,
        "serve": _cmd_serve,
    }
    handler = handlers.get(ns.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(ns)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        sys.stderr.write(f"Failed to read flow: {e}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
