"""CLI application entry point and command routing for mirari.

This module is the **sole error boundary** for the entire application.
It catches :class:`~mirari.exceptions.MirariError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No decision logic lives here — backend resolution and the builder call
  sequence belong to :class:`~mirari.core.dispatcher.Dispatcher`.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Any

from mirari.cli import exit_codes
from mirari.cli.console import configure_logging, console
from mirari.cli.flags import backend_flags, build_parser, parse_args
from mirari.cli.help import print_usage, run_help, show_page
from mirari.core.dispatcher import Dispatcher
from mirari.core.models import Outcome
from mirari.core.protocols import Builder
from mirari.exceptions import MirariError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _installed_builder() -> Builder:
    """Discover the installed builder; only called once flags are checked."""
    from mirari.infra.builder_loader import load_builder

    loaded: Any = load_builder()
    return loaded


def _dispatch(args: argparse.Namespace, builder: Builder | None) -> Outcome:
    """Route a builder verb to the dispatcher."""
    if builder is None:
        dispatcher = Dispatcher(builder_factory=_installed_builder)
    else:
        dispatcher = Dispatcher(builder)

    if args.command == "configure":
        return dispatcher.configure(
            backend_flags(args), no_opam=args.no_opam, file=args.file,
        )
    if args.command == "run":
        return dispatcher.run(backend_flags(args), file=args.file)
    return dispatcher.clean(file=args.file, no_opam=args.no_opam)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, *, builder: Builder | None = None) -> int:
    """Run the mirari CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    builder:
        Builder to dispatch to.  When ``None`` the installed builder is
        discovered, and only for ``configure``, ``run`` and ``clean``.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    MirariError
        Usage errors, mode conflicts, unknown help topics and builder
        failures; :func:`cli` maps them to an exit code.
    """
    parser = build_parser()
    args = parse_args(parser, sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    logger.debug("parsed arguments: %s", vars(args))

    if args.help:
        show_page(args.command, args.man_format)
        return exit_codes.SUCCESS

    if args.command is None:
        print_usage()
        return exit_codes.SUCCESS

    if args.command == "help":
        run_help(args.topic, args.man_format)
        return exit_codes.SUCCESS

    outcome = _dispatch(args, builder)
    if outcome.is_help:
        show_page(outcome.topic, args.man_format)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _install_interrupt_handler() -> None:
    """Make SIGINT raise ``KeyboardInterrupt`` inside the running command.

    The builder may need to tear down a running kernel when interrupted,
    so the signal must unwind through its cleanup instead of killing the
    process outright, even when the parent shell left SIGINT ignored or
    reset to the default action.
    """
    signal.signal(signal.SIGINT, signal.default_int_handler)


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    _install_interrupt_handler()
    try:
        code = main()
        sys.exit(code)
    except MirariError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
