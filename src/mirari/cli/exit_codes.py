"""Process exit codes returned by :func:`mirari.cli.app.cli`.

Every code is produced in exactly one place: the error boundary in
:mod:`mirari.cli.app`.  Commands themselves only ever return
:data:`SUCCESS` or raise.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The command ran, a help page or the usage summary was shown, or
``--unix --xen`` redirected ``configure``/``run`` to their help page."""

GENERAL_ERROR: int = 1
"""A MirariError reached the boundary: bad arguments, an unknown help
topic, conflicting backend flags, a builder failure, or no usable
builder installed."""

UNEXPECTED_ERROR: int = 2
"""Any other exception; reported as a bug."""

KEYBOARD_INTERRUPT: int = 130
"""SIGINT arrived while a command was running (128 + SIGINT)."""
