"""Domain models for mirari.

All models are **frozen** dataclasses or enums, immutable values created
fresh for every invocation.  They carry zero I/O and no dependency on
the builder implementation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


# ---------------------------------------------------------------------------
# Backend selection
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BackendFlags:
    """The three backend switches exactly as given on the command line."""

    unix: bool = False
    """``--unix``: Unix process with the direct networking stack."""

    xen: bool = False
    """``--xen``: Xen unikernel."""

    socket: bool = False
    """``--socket``: Unix process using host sockets for networking."""


class BackendMode(enum.Enum):
    """Target execution environment for the built application."""

    XEN = "xen"
    UNIX_DIRECT = "unix-direct"
    UNIX_SOCKET = "unix-socket"


# ---------------------------------------------------------------------------
# Builder options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Options threaded into the builder's ``configure`` and ``clean``."""

    manage_packages: bool = True
    """Whether the builder may install or pin OPAM packages."""


# ---------------------------------------------------------------------------
# Command outcome
# ---------------------------------------------------------------------------

class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    HELP = "help"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Non-error result of evaluating one command.

    Errors are never represented here; they are raised as
    :class:`~mirari.exceptions.MirariError` subclasses.
    """

    kind: OutcomeKind
    topic: str | None = None
    """Help page to render when :attr:`kind` is ``HELP``; ``None`` is
    the program page."""

    value: Any = None
    """Whatever the builder returned for a successful command."""

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(OutcomeKind.SUCCESS, value=value)

    @classmethod
    def help(cls, topic: str | None = None) -> Outcome:
        return cls(OutcomeKind.HELP, topic=topic)

    @property
    def is_help(self) -> bool:
        return self.kind is OutcomeKind.HELP
