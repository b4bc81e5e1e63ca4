"""Content-delivery management API client."""

from .client import DynamicContentClient
from .operations import DirectoryOperations

__all__ = ["DynamicContentClient", "DirectoryOperations"]
