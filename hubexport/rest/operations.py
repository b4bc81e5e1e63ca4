"""Hub-scoped operations against the content-delivery management API."""

from typing import Dict, Any, List, Optional
import logging

from .client import DynamicContentClient
from ..core.interfaces import IndexDirectory
from ..core.models import Hub, IndexSummary, ContentTypeAssignment
from ..utils.error_handler import IndexNotFoundError

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class DirectoryOperations(IndexDirectory):
    """Index directory, webhook and schema lookups for a single hub."""

    def __init__(self, client: DynamicContentClient, hub_id: str):
        """Initialize operations with a REST client and the hub they are scoped to."""
        self.client = client
        self.hub_id = hub_id

    @property
    def _indexes_path(self) -> str:
        return f"/algolia-search/{self.hub_id}/indexes"

    async def _list_embedded(
        self,
        path: str,
        key: str,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Walk every page of a HAL collection and return its items in order.

        Args:
            path: Collection path
            key: Name of the list under ``_embedded``
            params: Extra query parameters

        Returns:
            Items of all pages, concatenated
        """
        items: List[Dict[str, Any]] = []
        page = 0
        while True:
            query = {**(params or {}), "page": page, "size": PAGE_SIZE}
            result = await self.client.request("GET", path, params=query)
            items.extend((result.get("_embedded") or {}).get(key, []))

            page_info = result.get("page") or {}
            total_pages = page_info.get("totalPages", 1)
            page += 1
            if page >= total_pages:
                return items

    # ========== Hub Operations ==========

    async def get_hub(self) -> Hub:
        """Get the hub these operations are scoped to."""
        return Hub.model_validate(await self.client.request("GET", f"/hubs/{self.hub_id}"))

    async def get_webhook(self, webhook_id: str) -> Dict[str, Any]:
        """Get a webhook definition.

        Args:
            webhook_id: Webhook id

        Returns:
            Webhook definition, including its ``customPayload``
        """
        return await self.client.request("GET", f"/hubs/{self.hub_id}/webhooks/{webhook_id}")

    async def get_content_type_schema(self, schema_id: str) -> Dict[str, Any]:
        """Get a content type schema by id."""
        return await self.client.request("GET", f"/content-type-schemas/{schema_id}")

    # ========== Index Operations ==========

    async def list_indexes_with_details(self) -> List[IndexSummary]:
        """List all indexes of the hub, including their details.

        Returns:
            Index summaries in listing order
        """
        records = await self._list_embedded(
            self._indexes_path, "indexes", params={"projection": "withDetails"}
        )
        return [IndexSummary.from_api(r) for r in records]

    async def get_index_settings(self, index_id: str) -> Dict[str, Any]:
        """Get the settings of an index.

        Args:
            index_id: Index id

        Returns:
            Settings bag, including the ``replicas`` name list
        """
        return await self.client.request("GET", f"{self._indexes_path}/{index_id}/settings")

    async def get_index_by_name(self, name: str) -> IndexSummary:
        """Find an index by name.

        Args:
            name: Index name

        Returns:
            First matching index

        Raises:
            IndexNotFoundError: If no index carries that name
        """
        result = await self.client.request("GET", self._indexes_path, params={"name": name})
        matches = (result.get("_embedded") or {}).get("indexes", [])
        if not matches:
            raise IndexNotFoundError(name)
        return IndexSummary.from_api(matches[0])

    async def get_assigned_content_types(self, index_id: str) -> List[ContentTypeAssignment]:
        """List the content types assigned to an index.

        Args:
            index_id: Index id

        Returns:
            Assignments, each carrying its webhook links
        """
        records = await self._list_embedded(
            f"{self._indexes_path}/{index_id}/assigned-content-types", "assigned-content-types"
        )
        return [ContentTypeAssignment.from_api(r) for r in records]
