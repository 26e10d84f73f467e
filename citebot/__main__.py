"""Entry point for running citebot as a module or installed script.

Usage:
    citebot / python -m citebot                → web view (uvicorn)
    citebot <command> ... / python -m citebot <command> ... → CLI
"""

import sys


def run() -> None:
    """Entry point: no args → web view, else → CLI."""
    from citebot.cli import run_cli

    if len(sys.argv) == 1:
        sys.argv.append("serve")
    run_cli()


if __name__ == "__main__":
    run()
