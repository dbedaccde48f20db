"""Records service HTTP client."""

from .client import APIClient

__all__ = ["APIClient"]
