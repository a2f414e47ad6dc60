"""Command dispatcher: the decisions made before delegating to a builder.

This is the central service consumed by the CLI layer.  It depends on a
:class:`~mirari.core.protocols.Builder` injected at construction time,
keeping the core free of any builder imports.

Guarantees
----------
* No ``print()``, no filesystem access; all effects are the builder's.
* Backend flags are resolved before the first builder call, so a mode
  conflict never reaches the builder.
* Only :class:`~mirari.exceptions.MirariError` subclasses escape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mirari.core.mode import resolve_mode
from mirari.core.models import BackendFlags, BuildOptions, Outcome
from mirari.core.protocols import Builder
from mirari.exceptions import BuilderError, MirariError

logger = logging.getLogger(__name__)


class Dispatcher:
    """Dispatcher for the ``configure``, ``run`` and ``clean`` verbs.

    Parameters
    ----------
    builder:
        Any object satisfying the :class:`Builder` protocol.
    builder_factory:
        Zero-argument callable returning a builder, used instead of
        *builder*.  It is called on the first builder operation, after
        the backend flags have been checked.
    """

    def __init__(
        self,
        builder: Builder | None = None,
        *,
        builder_factory: Callable[[], Builder] | None = None,
    ) -> None:
        if (builder is None) == (builder_factory is None):
            raise TypeError("pass exactly one of builder or builder_factory")
        self._builder: Builder | None = builder
        self._builder_factory = builder_factory

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def configure(
        self,
        flags: BackendFlags,
        *,
        no_opam: bool = False,
        file: Path | None = None,
    ) -> Outcome:
        """Configure a Mirage application.

        ``--unix --xen`` redirects to the ``configure`` help page instead
        of failing; every other conflict is left to
        :func:`~mirari.core.mode.resolve_mode`.

        Raises
        ------
        ModeConflictError
            For ``--xen --socket``.
        BuilderError
            If any builder call fails.
        """
        if flags.unix and flags.xen:
            logger.info("--unix and --xen given together, showing help")
            return Outcome.help("configure")

        mode = resolve_mode(flags)
        project = self._call("load", file)
        entry = self._call("entry_point", project)
        options = BuildOptions(manage_packages=not no_opam)
        result = self._call("configure", project, mode, entry, options=options)
        return Outcome.success(result)

    def run(self, flags: BackendFlags, *, file: Path | None = None) -> Outcome:
        """Run a Mirage application on the selected backend.

        Same ``--unix --xen`` help redirect as :meth:`configure`.
        """
        if flags.unix and flags.xen:
            logger.info("--unix and --xen given together, showing help")
            return Outcome.help("run")

        mode = resolve_mode(flags)
        project = self._call("load", file)
        result = self._call("run", project, mode)
        return Outcome.success(result)

    def clean(self, *, file: Path | None = None, no_opam: bool = False) -> Outcome:
        """Clean the files produced for an application.

        Backend-agnostic: no mode is resolved.
        """
        project = self._call("load", file)
        options = BuildOptions(manage_packages=not no_opam)
        result = self._call("clean", project, options=options)
        return Outcome.success(result)

    # ------------------------------------------------------------------
    # Builder delegation (safe boundary)
    # ------------------------------------------------------------------

    def _get_builder(self) -> Builder:
        if self._builder is None:
            assert self._builder_factory is not None
            self._builder = self._builder_factory()
        return self._builder

    def _call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call a builder operation and ensure only our exceptions escape."""
        builder = self._get_builder()
        logger.debug("calling builder.%s", name)
        try:
            return getattr(builder, name)(*args, **kwargs)
        except MirariError:
            # Already one of ours.
            raise
        except Exception as exc:
            raise BuilderError(str(exc) or type(exc).__name__) from exc
