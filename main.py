"""MCP server exposing the LeanSpec compliance engine."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from leanspec.checker import SpecChecker
from leanspec.config_parser import parse
from leanspec.leanspec_logging import setup_logging
from leanspec.workspace import Workspace, resolve_root

mcp = FastMCP("lean-spec")


def _checker(root: Optional[str]) -> SpecChecker:
    return SpecChecker(Workspace(resolve_root(root)))


def _workspace_optional(root: Optional[str]) -> Optional[Workspace]:
    try:
        return Workspace(resolve_root(root))
    except ValueError:
        return None


@mcp.tool()
def validate(spec_path: Optional[str] = None, root: Optional[str] = None) -> Dict[str, Any]:
    """Validate spec frontmatter, structure, size, sub-specs and dependency links.

    Checks one spec when spec_path is given (relative path, name or number),
    otherwise every spec in the project. Errors fail the spec; warnings are
    suggestions."""

    checker = _checker(root)
    if spec_path:
        return checker.check_path(spec_path)
    return checker.check_all()


@mcp.tool()
def tokens(spec_path: Optional[str] = None, root: Optional[str] = None) -> Dict[str, Any]:
    """Estimate token counts for one spec and its sub-specs, or summarize all specs."""

    return _checker(root).token_report(spec_path)


@mcp.tool()
def list_specs(root: Optional[str] = None, include_archived: bool = False) -> Dict[str, Any]:
    """Enumerate the specs in the project along with the effective config."""

    workspace = Workspace(resolve_root(root))
    return {
        "config": workspace.config.to_dict(),
        "specs": [spec.to_dict() for spec in workspace.list_specs(include_archived)],
    }


@mcp.tool()
def parse_config(source: str) -> Dict[str, Any]:
    """Parse a LeanSpec config document and return its value tree."""

    return {"value": parse(source)}


@mcp.resource("lean-spec://specs")
def resource_specs() -> str:
    """Resource view listing the specs of the detected project."""

    workspace = _workspace_optional(None)
    if not workspace:
        return "No project root detected. Launch tools with a 'root' argument or set LEANSPEC_PROJECT_ROOT."

    specs = workspace.list_specs()
    if not specs:
        return "No specs found."

    lines = ["LeanSpec Specs"]
    for spec in specs:
        status = spec.frontmatter.get("status", "unknown")
        lines.append(f"- {spec.path} [{status}]")
    return "\n".join(lines)


def run() -> None:
    setup_logging(os.getenv("LEANSPEC_LOG_LEVEL", "WARNING").upper())
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run()
