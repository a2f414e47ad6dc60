"""Core / service layer — backend resolution and command dispatch.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
"""

from mirari.core.dispatcher import Dispatcher
from mirari.core.mode import resolve_mode
from mirari.core.models import BackendFlags, BackendMode, BuildOptions, Outcome, OutcomeKind
from mirari.core.protocols import Builder
from mirari.core.topics import TOPICS_TOPIC, match_choice, resolve_topic

__all__: list[str] = [
    "TOPICS_TOPIC",
    "BackendFlags",
    "BackendMode",
    "BuildOptions",
    "Builder",
    "Dispatcher",
    "Outcome",
    "OutcomeKind",
    "match_choice",
    "resolve_mode",
    "resolve_topic",
]
