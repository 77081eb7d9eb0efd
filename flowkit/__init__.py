"""Durable workflow authoring, worker and client toolkit, with a linter version checker."""

__version__ = "1.0.0"

__all__ = ["__version__"]