"""Single source of truth for the mirari version string."""

__version__: str = "1.0.0"
