"""Custom exception hierarchy for mirari.

All exceptions that cross layer boundaries must inherit from
:class:`MirariError`.  Foreign exceptions raised by a builder
implementation are wrapped in :class:`BuilderError` by the dispatcher
so that the CLI error boundary only ever sees typed errors.

Hierarchy
---------
MirariError
├── UsageError
│   └── UnknownTopicError
├── ModeConflictError
├── BuilderError
└── EnvironmentError
"""

from __future__ import annotations


class MirariError(Exception):
    """Base exception for all mirari errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    and exit with :data:`~mirari.cli.exit_codes.GENERAL_ERROR`.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ------------------------------------------------------------

class UsageError(MirariError):
    """Raised for unknown flags, unknown commands or wrong arity.

    The hint carries the usage line of the offending command.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.command: str | None = command


class UnknownTopicError(UsageError):
    """Raised when ``mirari help`` is given a topic it does not know."""


# --- Backend selection -------------------------------------------------------

class ModeConflictError(MirariError):
    """Raised when the backend flags describe no valid backend mode."""


# --- Builder -----------------------------------------------------------------

class BuilderError(MirariError):
    """Raised when a builder operation fails with a foreign exception."""


# --- Environment -------------------------------------------------------------

class EnvironmentError(MirariError):
    """Raised when a required runtime dependency is not available."""
