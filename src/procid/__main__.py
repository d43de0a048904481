"""CLI entry point for procid."""

from __future__ import annotations

from procid.cli import cli

if __name__ == "__main__":
    cli()
