"""Index export pipeline."""

from .aggregator import ExportAggregator
from .replicas import ReplicaResolver
from .webhooks import HubWebhookResolver
from .progress import LoggingProgressReporter, NullProgressReporter
from .service import ExportGate, ExportWriter, ExportOutcome, export_file_path, export_indexes

__all__ = [
    "ExportAggregator",
    "ReplicaResolver",
    "HubWebhookResolver",
    "LoggingProgressReporter",
    "NullProgressReporter",
    "ExportGate",
    "ExportWriter",
    "ExportOutcome",
    "export_file_path",
    "export_indexes",
]
