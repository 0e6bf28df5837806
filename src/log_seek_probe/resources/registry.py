"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from log_seek_probe.core.seek_store import SEEK_DIR_ENV, SEEK_SUFFIX, SeekStore, default_seek_dir


def _resolve_seek_file(name: str) -> Path:
    """Resolve a seek file name inside the scratch directory."""
    base = default_seek_dir().resolve()
    if not name.endswith(SEEK_SUFFIX):
        name = f"{name}{SEEK_SUFFIX}"
    p = (base / name).resolve()
    if p.parent != base:
        raise ValueError("Path escapes seek dir")
    if not p.is_file():
        raise FileNotFoundError(f"Seek file not found: {p}")
    return p


def read_seek_record(name: str) -> dict[str, Any]:
    """Return the persisted offset record for a seek file name."""
    p = _resolve_seek_file(name)
    record = SeekStore(p).load()
    if record is None:
        return {"seek_file": str(p), "path": None, "offset": 0}
    return {"seek_file": str(p), "path": record.path, "offset": record.offset}


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://log-probe/help")
    def help_resource() -> str:
        """Return a short description of the tool and resources."""
        return (
            "Tools:\n"
            "- check_log: scan a log incrementally and return a verdict\n"
            "Resources:\n"
            "- app://log-probe/help\n"
            f"- seek://{{name}} (seek files in {SEEK_DIR_ENV}; name without {SEEK_SUFFIX} is fine)\n"
            f"\nSeek directory: {default_seek_dir()}\n"
        )

    @mcp.resource("seek://{name}")
    def seek_record(name: str) -> dict[str, Any]:
        """Return the stored offset for one seek file."""
        return read_seek_record(name)
