"""Infrastructure layer — integration with the installed builder.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from mirari.infra.builder_loader import BUILDER_GROUP, load_builder

__all__: list[str] = [
    "BUILDER_GROUP",
    "load_builder",
]
