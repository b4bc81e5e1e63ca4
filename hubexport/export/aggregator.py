"""Assembly of the index export document.

Settings, content-type assignments and webhook payloads are fetched for
every index concurrently; replica expansion runs one index at a time.
Every stage correlates results to the listing by position, and the first
failure in any stage aborts the export.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from .gather import ordered_gather
from .progress import NullProgressReporter
from .replicas import ReplicaResolver
from ..core.interfaces import IndexDirectory, ProgressReporter, WebhookResolver
from ..core.models import (
    ACTIVE_CONTENT_WEBHOOK,
    ARCHIVED_CONTENT_WEBHOOK,
    ContentTypeAssignment,
    IndexEntry,
    IndexSummary,
)
from ..utils.error_handler import ErrorCode, StructuredError

logger = logging.getLogger(__name__)

# Webhooks are resolved from this many leading assignments of an index; later ones are listed but not resolved
ASSIGNMENTS_PER_INDEX = 1

# A missing webhook link exports as null instead of failing the run
NULL_ON_MISSING_WEBHOOK_LINK = True


class MissingWebhookLinkError(StructuredError):
    def __init__(self, relation: str) -> None:
        super().__init__(ErrorCode.NOT_FOUND, f"Assigned content type has no '{relation}' link", {"relation": relation})


class ExportAggregator:
    """Builds ``IndexEntry`` records for every top-level index of a hub."""

    def __init__(
        self,
        directory: IndexDirectory,
        webhooks: WebhookResolver,
        replicas: Optional[ReplicaResolver] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        self.directory = directory
        self.webhooks = webhooks
        self.progress = progress or NullProgressReporter()
        self.replicas = replicas or ReplicaResolver(directory, self.progress)

    async def export(self) -> List[IndexEntry]:
        """List the hub's indexes and aggregate them."""
        self.progress.stage("Retrieve list of indexes with details")
        indexes = await self.directory.list_indexes_with_details()
        self.progress.detail("\n".join(f"{index.id}: {index.name}" for index in indexes))
        return await self.aggregate(indexes)

    async def aggregate(self, indexes: Sequence[IndexSummary]) -> List[IndexEntry]:
        """Aggregate an index listing into export entries.

        Args:
            indexes: Listing in the order it should be exported

        Returns:
            One entry per index without a parent, in listing order
        """
        if not indexes:
            return []

        self.progress.stage("Retrieve all index settings")
        settings_list = await ordered_gather(indexes, lambda index: self.directory.get_index_settings(index.id))
        self.progress.detail(",".join(str(i) for i in range(len(settings_list))))

        self.progress.stage("Retrieve all assigned content types")
        assignments_list = await ordered_gather(
            indexes, lambda index: self._assignments(index.id)
        )
        self.progress.detail(
            "\n".join(
                (assignments[0].content_type_uri if assignments else None) or "none"
                for assignments in assignments_list
            )
        )

        active_refs = [self._webhook_ref(a, ACTIVE_CONTENT_WEBHOOK) for a in assignments_list]
        archived_refs = [self._webhook_ref(a, ARCHIVED_CONTENT_WEBHOOK) for a in assignments_list]
        active_payloads = await ordered_gather(active_refs, self._resolve_payload)
        archived_payloads = await ordered_gather(archived_refs, self._resolve_payload)

        self.progress.stage("Retrieve list of replicas")
        replica_names = [list(settings.get("replicas") or []) for settings in settings_list]
        self.progress.detail("\n".join(json.dumps(names) for names in replica_names))

        # Sequential on purpose: one index's replicas are in flight at a time
        self.replicas.start_run()
        replicas_settings = []
        for names in replica_names:
            replicas_settings.append(await self.replicas.resolve(names))

        entries = []
        for i, index in enumerate(indexes):
            if index.is_replica:
                continue
            entries.append(
                self._entry(
                    index,
                    settings_list[i],
                    assignments_list[i],
                    replicas_settings[i],
                    active_payloads[i],
                    archived_payloads[i],
                )
            )

        logger.info(f"Aggregated {len(entries)} of {len(indexes)} indexes (replicas are nested)")
        return entries

    async def _assignments(self, index_id: str) -> List[ContentTypeAssignment]:
        assignments = await self.directory.get_assigned_content_types(index_id)
        if len(assignments) > ASSIGNMENTS_PER_INDEX:
            logger.warning(
                f"Index {index_id} has {len(assignments)} assigned content types; "
                f"webhooks are taken from the first {ASSIGNMENTS_PER_INDEX} only"
            )
        return assignments

    @staticmethod
    def _webhook_ref(assignments: List[ContentTypeAssignment], relation: str) -> Optional[str]:
        """Webhook id for one relation of the index's assignment, None when there is nothing to resolve."""
        if not assignments:
            return None
        webhook_id = assignments[0].webhook_id(relation)
        if webhook_id is None and not NULL_ON_MISSING_WEBHOOK_LINK:
            raise MissingWebhookLinkError(relation)
        return webhook_id

    async def _resolve_payload(self, webhook_id: Optional[str]) -> Optional[Any]:
        if webhook_id is None:
            return None
        return await self.webhooks.resolve(webhook_id)

    @staticmethod
    def _entry(
        index: IndexSummary,
        settings: Dict[str, Any],
        assignments: List[ContentTypeAssignment],
        replicas_settings,
        active_payload: Optional[Any],
        archived_payload: Optional[Any],
    ) -> IndexEntry:
        details = index.details()
        if assignments:
            details["assignedContentTypes"] = [a.record() for a in assignments]
        return IndexEntry(
            id=index.id,
            index_details=details,
            settings=settings,
            replicas_settings=replicas_settings,
            active_content_webhook=active_payload,
            archived_content_webhook=archived_payload,
        )
