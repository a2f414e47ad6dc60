"""Infrastructure: discovery of the installed builder implementation.

Builders register themselves under the ``mirari.builders`` entry-point
group.  This module is the **only** place that imports builder code.
Import failures are caught here and re-raised as
:class:`~mirari.exceptions.EnvironmentError`, so nothing raw escapes the
infrastructure boundary.

Rules
-----
* Exactly one registered builder is used; zero or several is an error.
* No user-facing output; callers render the error.
"""

from __future__ import annotations

import logging
from importlib.metadata import EntryPoint, entry_points
from typing import Any

from mirari.exceptions import EnvironmentError

logger = logging.getLogger(__name__)

BUILDER_GROUP: str = "mirari.builders"


def _registered_builders() -> list[EntryPoint]:
    """Return the builder entry points, sorted by name."""
    return sorted(entry_points(group=BUILDER_GROUP), key=lambda ep: ep.name)


def load_builder() -> Any:
    """Locate, import and instantiate the installed builder.

    A class or factory registered as the entry point is called with no
    arguments; any other object is used as is.

    Raises
    ------
    EnvironmentError
        When no builder is installed, when several are, or when the
        registered builder cannot be imported.
    """
    found = _registered_builders()

    if not found:
        raise EnvironmentError(
            "No Mirage builder is installed.",
            hint=(
                "Install a package that registers a builder under the "
                f"'{BUILDER_GROUP}' entry-point group."
            ),
        )
    if len(found) > 1:
        names = ", ".join(ep.name for ep in found)
        raise EnvironmentError(
            f"Several Mirage builders are installed: {names}.",
            hint="Uninstall all but one of them.",
        )

    (entry,) = found
    logger.debug("loading builder %r from %s", entry.name, entry.value)
    try:
        target = entry.load()
    except Exception as exc:
        raise EnvironmentError(
            f"Cannot load builder '{entry.name}' ({entry.value}): {exc}",
        ) from exc

    return target() if callable(target) else target
