"""
Core interfaces for hubexport
Abstract collaborators the export pipeline is written against
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import ContentTypeAssignment, IndexSummary


class IndexDirectory(ABC):
    """Hub-scoped raw fetches against the index directory"""

    @abstractmethod
    async def list_indexes_with_details(self) -> List[IndexSummary]:
        """Every index of the hub, in listing order"""
        pass

    @abstractmethod
    async def get_index_settings(self, index_id: str) -> Dict[str, Any]:
        """Settings bag of one index"""
        pass

    @abstractmethod
    async def get_index_by_name(self, name: str) -> IndexSummary:
        """Look an index up by its name"""
        pass

    @abstractmethod
    async def get_assigned_content_types(self, index_id: str) -> List[ContentTypeAssignment]:
        """Content-type assignments of one index"""
        pass


class WebhookResolver(ABC):
    """Turns a webhook id into its custom payload"""

    @abstractmethod
    async def resolve(self, webhook_id: str) -> Optional[Any]:
        pass


class ProgressReporter(ABC):
    """Receives human-readable progress from the export pipeline"""

    @abstractmethod
    def stage(self, title: str) -> None:
        """A new pipeline stage has started"""
        pass

    @abstractmethod
    def detail(self, message: str) -> None:
        """Supplementary output for the current stage"""
        pass
