"""
hubexport core module
Interfaces, models and configuration shared by the transport and export layers
"""

from .config import ExportConfig, get_config
from .interfaces import IndexDirectory, WebhookResolver, ProgressReporter
from .models import (
    Hub,
    IndexSummary,
    ContentTypeAssignment,
    ReplicaSettingsEntry,
    IndexEntry,
)

__all__ = [
    # Config
    'ExportConfig',
    'get_config',

    # Interfaces
    'IndexDirectory',
    'WebhookResolver',
    'ProgressReporter',

    # Models
    'Hub',
    'IndexSummary',
    'ContentTypeAssignment',
    'ReplicaSettingsEntry',
    'IndexEntry',
]
