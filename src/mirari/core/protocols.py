"""Protocols (interfaces) consumed by the core layer.

These define the contract a builder implementation must satisfy.  Core
code depends ONLY on this protocol, never on a concrete builder,
preserving the dependency inversion principle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from mirari.core.models import BackendMode, BuildOptions


class Builder(Protocol):
    """Contract for Mirage application builders.

    Any object that implements these methods with compatible signatures
    satisfies the protocol structurally (no explicit inheritance
    required).  Project and entry-point values are opaque to mirari:
    they are produced by the builder and handed back to it unexamined.
    """

    def load(self, path: Path | None) -> Any:
        """Load the project described by the configuration file at *path*.

        When *path* is ``None`` the current directory is scanned; a
        single ``config.ml`` is used.  Zero or several candidate files
        must be reported as an error.
        """
        ...  # pragma: no cover

    def entry_point(self, project: Any) -> Any:
        """Return the descriptor of the application's generated main."""
        ...  # pragma: no cover

    def configure(
        self,
        project: Any,
        mode: BackendMode,
        entry: Any,
        *,
        options: BuildOptions,
    ) -> Any:
        """Generate the build files for *project* targeting *mode*."""
        ...  # pragma: no cover

    def run(self, project: Any, mode: BackendMode) -> Any:
        """Build and start *project* on the *mode* backend."""
        ...  # pragma: no cover

    def clean(self, project: Any, *, options: BuildOptions) -> Any:
        """Remove every file the builder produced for *project*."""
        ...  # pragma: no cover
