"""Expansion of replica names into full replica settings records."""

import json
import logging
from typing import List, Optional, Sequence, Set

from .gather import ordered_gather
from .progress import NullProgressReporter
from ..core.interfaces import IndexDirectory, ProgressReporter
from ..core.models import ReplicaSettingsEntry

logger = logging.getLogger(__name__)

DETAILS_STAGE = "Retrieve list of replicas details by names"
SETTINGS_STAGE = "Retrieve all replica index settings"


class ReplicaResolver:
    """Resolves the replicas declared by one index, keeping their declared order."""

    def __init__(self, directory: IndexDirectory, progress: Optional[ProgressReporter] = None):
        self.directory = directory
        self.progress = progress or NullProgressReporter()
        self._reported: Set[str] = set()

    def start_run(self) -> None:
        """Forget reported stages so the next resolve opens them again."""
        self._reported = set()

    def _stage(self, title: str) -> None:
        if title not in self._reported:
            self._reported.add(title)
            self.progress.stage(title)

    async def resolve(self, replica_names: Sequence[str]) -> List[ReplicaSettingsEntry]:
        """Look each replica up by name, then fetch its settings.

        Args:
            replica_names: Names from the primary's ``settings.replicas``

        Returns:
            One entry per name, in the same order; empty for no names
        """
        self._stage(DETAILS_STAGE)
        self.progress.detail(f"Getting replica details for: {json.dumps(list(replica_names))}")
        replicas = await ordered_gather(replica_names, self.directory.get_index_by_name)

        self._stage(SETTINGS_STAGE)
        self.progress.detail(f"Getting replica settings for: {json.dumps([r.id for r in replicas])}")
        settings = await ordered_gather(replicas, lambda replica: self.directory.get_index_settings(replica.id))

        return [
            ReplicaSettingsEntry(id=replica.id, name=name, settings=replica_settings)
            for name, replica, replica_settings in zip(replica_names, replicas, settings)
        ]
