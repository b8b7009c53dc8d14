"""Support ``python -m animesh``; runs the same entry point as the script."""

from __future__ import annotations

from animesh.cli.app import cli

if __name__ == "__main__":
    cli()
