"""Allow ``python -m mirari`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m mirari`` behaves identically to the ``mirari``
console script.
"""

from __future__ import annotations

from mirari.cli.app import cli

if __name__ == "__main__":
    cli()
