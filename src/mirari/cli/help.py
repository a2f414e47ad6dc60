"""Man-style help pages, the ``help`` command, and the usage summary.

Pages are built from the declarations in :mod:`mirari.cli.flags` into a
small :class:`HelpPage` model and rendered in one of three formats:

* ``plain`` — text on stdout.
* ``groff`` — man(7) source on stdout, suitable for ``man -l -``.
* ``pager`` — Rich rendering through the system pager when stdout is a
  terminal, otherwise the ``plain`` rendering.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any

from mirari.cli.console import get_rich_console
from mirari.cli.flags import (
    ALL_COMMANDS,
    COMMANDS,
    PROGRAM,
    CommandSpec,
    command_names,
)
from mirari.core.topics import TOPICS_TOPIC, resolve_topic
from mirari.exceptions import EnvironmentError
from mirari.version import __version__

COMMON_OPTIONS_SECTION: str = "COMMON OPTIONS"

PROGRAM_SUMMARY: str = "Mirage application builder"


# ---------------------------------------------------------------------------
# Page model
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    title: str
    paragraphs: tuple[str, ...] = ()
    items: tuple[tuple[str, str], ...] = ()
    """``(label, text)`` definition-list entries."""


@dataclass(frozen=True, slots=True)
class HelpPage:
    name: str
    summary: str
    synopsis: str
    sections: tuple[Section, ...] = field(default_factory=tuple)

    @property
    def title(self) -> str:
        return self.name.replace(" ", "-")


def _common_options(*, program: bool) -> Section:
    items = [
        ("--help", "Show this help in format FMT (see --man-format)."),
        ("--man-format=FMT", "Format of help pages: pager, plain or groff."),
        ("-v, --verbose", "Increase log verbosity (repeatable)."),
    ]
    if program:
        items.append(("--version", "Show version information."))
    return Section(
        COMMON_OPTIONS_SECTION,
        paragraphs=("These options are common to all commands.",),
        items=tuple(items),
    )


def program_page() -> HelpPage:
    """The page shown by ``mirari help`` and ``mirari --help``."""
    return HelpPage(
        name=PROGRAM,
        summary=PROGRAM_SUMMARY,
        synopsis=f"{PROGRAM} COMMAND ...",
        sections=(
            Section(
                "DESCRIPTION",
                paragraphs=(
                    "Mirari is a Mirage application builder. It glues together "
                    "a set of libraries and configuration (e.g. network and "
                    "storage) into a standalone microkernel or UNIX binary.",
                    f"Use either {PROGRAM} <command> --help or "
                    f"{PROGRAM} help <command> for more information on a "
                    "specific command.",
                ),
            ),
            Section(
                "COMMANDS",
                items=tuple(
                    (cmd.name, cmd.summary)
                    for cmd in (*COMMANDS, ALL_COMMANDS["help"])
                ),
            ),
            _common_options(program=True),
        ),
    )


def command_page(cmd: CommandSpec) -> HelpPage:
    """The page shown by ``mirari help <command>``."""
    positional = cmd.positional
    synopsis = f"{PROGRAM} {cmd.name} [OPTION]... [{positional.metavar}]"
    sections = [
        Section("DESCRIPTION", paragraphs=cmd.description),
        Section("ARGUMENTS", items=((positional.metavar, positional.doc),)),
    ]
    if cmd.flags:
        sections.append(
            Section(
                "OPTIONS",
                items=tuple((flag.option, flag.doc) for flag in cmd.flags),
            ),
        )
    sections.append(_common_options(program=False))
    return HelpPage(
        name=f"{PROGRAM} {cmd.name}",
        summary=cmd.summary,
        synopsis=synopsis,
        sections=tuple(sections),
    )


def page_for(topic: str | None) -> HelpPage:
    """Page for a command name, or the program page for ``None``."""
    if topic is None:
        return program_page()
    return command_page(ALL_COMMANDS[topic])


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_plain(page: HelpPage) -> str:
    lines = [
        "NAME",
        f"       {page.title} - {page.summary}",
        "",
        "SYNOPSIS",
        f"       {page.synopsis}",
    ]
    for section in page.sections:
        lines += ["", section.title]
        for paragraph in section.paragraphs:
            lines.append(f"       {paragraph}")
        for label, text in section.items:
            lines.append(f"       {label}")
            lines.append(f"           {text}")
    return "\n".join(lines) + "\n"


def _groff_escape(text: str) -> str:
    return text.replace("\\", "\\e").replace("-", "\\-")


def render_groff(page: HelpPage) -> str:
    lines = [
        f'.TH "{page.title.upper()}" 1 "" "Mirari {__version__}" "Mirari Manual"',
        ".SH NAME",
        f"{_groff_escape(page.title)} \\- {_groff_escape(page.summary)}",
        ".SH SYNOPSIS",
        _groff_escape(page.synopsis),
    ]
    for section in page.sections:
        lines.append(f'.SH "{section.title}"')
        for paragraph in section.paragraphs:
            lines += [".P", _groff_escape(paragraph)]
        for label, text in section.items:
            lines += [".TP 4", f"\\fB{_groff_escape(label)}\\fR", _groff_escape(text)]
    return "\n".join(lines) + "\n"


def _rich_renderables(page: HelpPage) -> list[Any]:
    from rich.table import Table
    from rich.text import Text

    blocks: list[Any] = [
        Text("NAME", style="bold"),
        Text(f"    {page.title} - {page.summary}\n"),
        Text("SYNOPSIS", style="bold"),
        Text(f"    {page.synopsis}\n"),
    ]
    for section in page.sections:
        blocks.append(Text(section.title, style="bold"))
        for paragraph in section.paragraphs:
            blocks.append(Text(f"    {paragraph}"))
        if section.items:
            table = Table.grid(padding=(0, 4))
            table.add_column(style="bold cyan", no_wrap=True)
            table.add_column()
            for label, text in section.items:
                table.add_row(f"    {label}", text)
            blocks.append(table)
        blocks.append(Text(""))
    return blocks


def _render_pager(page: HelpPage) -> None:
    if not sys.stdout.isatty():
        sys.stdout.write(render_plain(page))
        return
    try:
        rich_console = get_rich_console(stderr=False)
    except EnvironmentError:
        sys.stdout.write(render_plain(page))
        return
    with rich_console.pager(styles=True):
        for block in _rich_renderables(page):
            rich_console.print(block)


def show_page(topic: str | None, man_format: str = "pager") -> None:
    """Render the help page for *topic* on stdout in *man_format*."""
    page = page_for(topic)
    if man_format == "groff":
        sys.stdout.write(render_groff(page))
    elif man_format == "plain":
        sys.stdout.write(render_plain(page))
    else:
        _render_pager(page)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def run_help(topic: str | None, man_format: str = "pager") -> None:
    """Serve ``mirari help [TOPIC]``.

    Raises
    ------
    UnknownTopicError
        If *topic* is neither ``topics`` nor a registered command.
    """
    if topic is None:
        show_page(None, man_format)
        return

    resolved = resolve_topic(topic, command_names())
    if resolved == TOPICS_TOPIC:
        for name in command_names():
            print(name)
        return
    show_page(resolved, man_format)


def print_usage() -> None:
    """Usage summary printed when no command is given."""
    width = max(len(cmd.name) for cmd in COMMANDS)
    table = "\n".join(
        f"    {cmd.name:<{width}}   {cmd.summary}" for cmd in COMMANDS
    )
    print(
        f"usage: {PROGRAM} [--version]\n"
        f"              [--help]\n"
        f"              <command> [<args>]\n"
        f"\n"
        f"The most commonly used {PROGRAM} commands are:\n"
        f"{table}\n"
        f"\n"
        f"See '{PROGRAM} help <command>' for more information on a specific command."
    )
