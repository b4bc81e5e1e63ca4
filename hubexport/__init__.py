"""
hubexport: export a hub's search-index configuration

Core modules:
- rest: management API client and hub-scoped operations
- export: aggregation of settings, replicas and webhook payloads into one document
- core: configuration, models and interfaces
"""

__version__ = "1.0.0"

__all__ = []
