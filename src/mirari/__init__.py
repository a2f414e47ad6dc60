"""mirari — command-line front end for the Mirage unikernel builder.

Validates backend flags and dispatches ``configure``, ``run`` and
``clean`` to an installed builder implementation.
"""

from mirari.version import __version__

__all__: list[str] = ["__version__"]
