"""Translation hub backend: session authentication, translation history and AI proxy services."""

__version__ = "0.1.0"
