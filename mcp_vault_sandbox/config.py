"""Runtime configuration and the process-wide vault root."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .errors import ConfigError
from .security import resolve_root

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RootSlot:
    """Holds the vault root. It can be installed once and is read-only afterwards."""

    __slots__ = ("_root",)

    def install(self, root: Path) -> Path:
        if hasattr(self, "_root"):
            raise ConfigError("Vault path is already configured.")
        object.__setattr__(self, "_root", root)
        return root

    def get(self) -> Path:
        try:
            return self._root
        except AttributeError:
            raise ConfigError("Vault path is not configured.") from None

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("the vault root can only be set through install()")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("the vault root cannot be removed")


ROOT = RootSlot()


@dataclass(frozen=True)
class Settings:
    root: Path
    log_level: str = "INFO"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-vault-sandbox",
        description="Sandboxed notes vault MCP server (stdio).",
    )
    parser.add_argument(
        "vault_path",
        nargs="?",
        default=os.getenv("VAULT_SANDBOX_ROOT"),
        help="Directory to expose (falls back to VAULT_SANDBOX_ROOT).",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("VAULT_SANDBOX_LOG_LEVEL", "INFO").upper(),
        choices=LOG_LEVELS,
        type=str.upper,
    )
    return parser


def load_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Read .env, parse CLI args and resolve the vault root."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    # argparse does not check env-provided defaults against choices
    if args.log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level: {args.log_level}")
    return Settings(root=resolve_root(args.vault_path), log_level=args.log_level)


def init_root(root: Path) -> Path:
    """Install the vault root for the lifetime of the process. Only allowed once."""
    return ROOT.install(root)


def get_root() -> Path:
    return ROOT.get()
