"""Backend mode resolution.

Maps the three backend switches to exactly one :class:`BackendMode`.
Every one of the eight flag combinations is classified; the two
invalid ones raise :class:`~mirari.exceptions.ModeConflictError` and
never yield a mode.
"""

from __future__ import annotations

from mirari.core.models import BackendFlags, BackendMode
from mirari.exceptions import ModeConflictError


def resolve_mode(flags: BackendFlags) -> BackendMode:
    """Return the backend mode selected by *flags*.

    Rules are checked in order and the first match wins, so
    ``--unix --xen --socket`` reports the unix/xen clash.  Once xen is
    absent, ``--socket`` takes over and ``--unix`` has no effect.

    Raises
    ------
    ModeConflictError
        For ``--unix --xen`` and ``--xen --socket``.
    """
    if flags.xen and flags.unix:
        raise ModeConflictError("Cannot specify --unix and --xen together.")
    if flags.xen and flags.socket:
        raise ModeConflictError("Cannot specify --xen and --socket together.")
    if flags.xen:
        return BackendMode.XEN
    if flags.socket:
        return BackendMode.UNIX_SOCKET
    return BackendMode.UNIX_DIRECT
