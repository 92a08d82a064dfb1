"""AI Outfit Generator backend."""

__version__ = "0.1.0"
