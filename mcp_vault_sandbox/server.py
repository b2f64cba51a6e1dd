from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence

from mcp.server.fastmcp import FastMCP

from . import operations
from .config import init_root, load_settings
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

server = FastMCP("vault-sandbox")


@server.tool()
def get_all_filenames() -> str:
    """
    Get a list of all filenames in the vault, most recently modified first.
    Useful for retrieving their contents later.
    """
    return operations.list_vault_files().text


@server.tool()
def read_multiple_files(filenames: List[str]) -> str:
    """
    Retrieve the contents of files from the vault (at most 50 names per call).

    Names may be exact relative paths, case-insensitive paths or partial
    filenames. A partial name returns at most 5 files; refine it if more match.
    Each file is prefixed with '# File: <path>'. Missing names are reported
    inline rather than failing the whole call.
    """
    return operations.read_files(filenames).text


@server.tool()
def get_open_todos() -> str:
    """Retrieve all open '- [ ]' TODO items in the vault's markdown files with their locations."""
    return operations.open_todos().text


@server.tool()
def update_file_content(file_path: str, content: str) -> str:
    """
    Create or overwrite a file in the vault.

    file_path is relative to the vault root and must end in .md, .txt, .csv,
    .json, .yaml, .yml or .canvas; dot-prefixed segments are refused. The
    content replaces the whole file, so include the old text when updating.
    """
    return operations.write_file(file_path, content).text


def _configure_logging(level: str) -> None:
    # stdout carries the MCP stdio protocol
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entrypoint for the MCP server."""
    try:
        settings = load_settings(argv)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        raise SystemExit(1) from exc

    _configure_logging(settings.log_level)
    init_root(settings.root)
    LOGGER.info("Vault sandbox MCP server running on stdio (vault path: %s)", settings.root)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
