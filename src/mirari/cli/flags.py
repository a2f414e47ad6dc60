"""Command and flag declarations, and the argument parser built from them.

Every command's flags, positional argument and documentation live in
the :class:`CommandSpec` table below.  The same table drives the
``argparse`` parser and the man-style help pages in
:mod:`mirari.cli.help`, so the two never disagree.

Parsing never exits the process: ``argparse`` errors are turned into
:class:`~mirari.exceptions.UsageError` carrying the offending command's
usage line.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from mirari.core.models import BackendFlags
from mirari.core.topics import match_choice
from mirari.exceptions import UsageError
from mirari.version import __version__

PROGRAM: str = "mirari"

MAN_FORMATS: tuple[str, ...] = ("pager", "plain", "groff")


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Flag:
    """A boolean ``--name`` switch."""

    name: str
    doc: str

    @property
    def option(self) -> str:
        return f"--{self.name}"

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")


@dataclass(frozen=True, slots=True)
class Positional:
    """An optional single positional argument."""

    metavar: str
    dest: str
    doc: str


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Everything mirari knows about one command."""

    name: str
    summary: str
    description: tuple[str, ...]
    flags: tuple[Flag, ...]
    positional: Positional


NO_OPAM = Flag("no-opam", "Do not manage the OPAM configuration.")
XEN = Flag(
    "xen", "Generate a Xen unikernel. Do not use in conjunction with --unix-*.",
)
UNIX = Flag(
    "unix", "Use unix-direct backend. Do not use in conjunction with --xen.",
)
SOCKET = Flag(
    "socket",
    "Use networking socket backend. Do not use in conjunction with --xen.",
)

FILE = Positional(
    "FILE",
    "file",
    "Configuration file for Mirari. If not specified, the current directory "
    "will be scanned. If one file named config.ml is found, that file will be "
    "used. If no files or multiple configuration files are found, this will "
    "result in an error unless one is explicitly specified on the command line.",
)

TOPIC = Positional("TOPIC", "topic", "The topic to get help on.")

CONFIGURE = CommandSpec(
    name="configure",
    summary="Configure a Mirage application.",
    description=("The configure command initializes a fresh Mirage application.",),
    flags=(UNIX, XEN, SOCKET, NO_OPAM),
    positional=FILE,
)

RUN = CommandSpec(
    name="run",
    summary="Run a Mirage application.",
    description=("Run a Mirage application on the selected backend.",),
    flags=(UNIX, XEN, SOCKET),
    positional=FILE,
)

CLEAN = CommandSpec(
    name="clean",
    summary="Clean the files produced by Mirage for a given application.",
    description=("Clean the files produced by Mirage for a given application.",),
    flags=(NO_OPAM,),
    positional=FILE,
)

HELP = CommandSpec(
    name="help",
    summary="Display help about Mirari and Mirari commands.",
    description=(
        "Prints help about Mirari commands.",
        f"Use '{PROGRAM} help topics' to get the full list of help topics.",
    ),
    flags=(),
    positional=TOPIC,
)

COMMANDS: tuple[CommandSpec, ...] = (CONFIGURE, RUN, CLEAN)
"""Registered commands, in the order they are listed as help topics."""

ALL_COMMANDS: dict[str, CommandSpec] = {
    cmd.name: cmd for cmd in (*COMMANDS, HELP)
}


def command_names() -> list[str]:
    """Names of the registered commands (``help`` excluded)."""
    return [cmd.name for cmd in COMMANDS]


# ---------------------------------------------------------------------------
# Parser construction
# ---------------------------------------------------------------------------

class MirariParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises :class:`UsageError` instead of exiting."""

    commands: dict[str, argparse.ArgumentParser]
    """Sub-parser per command name; only set on the top-level parser."""

    def error(self, message: str) -> NoReturn:
        _, _, command = self.prog.partition(" ")
        raise UsageError(
            message,
            command=command or None,
            hint=_usage_hint(self, command or None),
        )


def _usage_hint(parser: argparse.ArgumentParser, command: str | None) -> str:
    target = f"{PROGRAM} {command}" if command else PROGRAM
    return f"{parser.format_usage().strip()}\nTry '{target} --help' for more information."


def _add_common_options(parser: argparse.ArgumentParser, *, nested: bool) -> None:
    """Add the options every command accepts.

    Sub-command copies use ``SUPPRESS`` defaults so they do not overwrite
    values already parsed at the program level.
    """
    group = parser.add_argument_group("common options")
    default_flag: object = argparse.SUPPRESS if nested else False
    group.add_argument(
        "--help",
        action="store_true",
        default=default_flag,
        help="Show this help in format FMT (see --man-format).",
    )
    group.add_argument(
        "--man-format",
        choices=MAN_FORMATS,
        default=argparse.SUPPRESS if nested else "pager",
        metavar="FMT",
        help="Format of help pages: pager, plain or groff.",
    )
    group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=argparse.SUPPRESS if nested else 0,
        help="Increase log verbosity (repeatable).",
    )


def build_parser() -> MirariParser:
    """Construct the top-level parser with one sub-parser per command."""
    parser = MirariParser(prog=PROGRAM, add_help=False)
    parser.commands = {}
    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
    )
    _add_common_options(parser, nested=False)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for cmd in ALL_COMMANDS.values():
        sub = subparsers.add_parser(
            cmd.name,
            prog=f"{PROGRAM} {cmd.name}",
            add_help=False,
            help=cmd.summary,
        )
        for flag in cmd.flags:
            sub.add_argument(
                flag.option, dest=flag.dest, action="store_true", help=flag.doc,
            )
        positional_type = Path if cmd.positional is FILE else str
        sub.add_argument(
            cmd.positional.dest,
            metavar=cmd.positional.metavar,
            nargs="?",
            default=None,
            type=positional_type,
            help=cmd.positional.doc,
        )
        _add_common_options(sub, nested=True)
        parser.commands[cmd.name] = sub
    return parser


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _expand_command(argv: list[str]) -> list[str]:
    """Replace an abbreviated command name with the full name."""
    expanded = list(argv)
    skip_next = False
    for index, token in enumerate(expanded):
        if skip_next:
            skip_next = False
            continue
        if token == "--":
            break
        if len(token) > 2 and "--man-format".startswith(token):
            skip_next = True
            continue
        if token.startswith("-"):
            continue
        try:
            name = match_choice(token, list(ALL_COMMANDS))
        except UsageError as exc:
            raise UsageError(str(exc), hint=f"Try '{PROGRAM} --help'.") from exc
        if name is not None:
            expanded[index] = name
        break
    return expanded


def parse_args(parser: MirariParser, argv: Sequence[str]) -> argparse.Namespace:
    """Parse *argv* into a namespace or raise :class:`UsageError`.

    The namespace always has ``command``, ``help``, ``man_format`` and
    ``verbose``; per-command attributes follow the declarations above.
    """
    args, extras = parser.parse_known_args(_expand_command(list(argv)))
    if extras:
        message = f"unrecognized arguments: {' '.join(extras)}"
        parser.commands.get(args.command, parser).error(message)
    return args


def backend_flags(args: argparse.Namespace) -> BackendFlags:
    """Collect the backend switches of a parsed ``configure``/``run``."""
    return BackendFlags(unix=args.unix, xen=args.xen, socket=args.socket)
