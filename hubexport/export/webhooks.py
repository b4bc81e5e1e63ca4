"""Webhook payload lookup for a hub."""

import logging
from typing import Any, Optional

from ..core.interfaces import WebhookResolver
from ..rest.operations import DirectoryOperations

logger = logging.getLogger(__name__)


class HubWebhookResolver(WebhookResolver):
    """Resolves webhook ids to the value of their custom payload."""

    def __init__(self, operations: DirectoryOperations):
        self.ops = operations

    async def resolve(self, webhook_id: str) -> Optional[Any]:
        webhook = await self.ops.get_webhook(webhook_id)
        payload = webhook.get("customPayload")
        if not payload:
            logger.debug(f"Webhook {webhook_id} has no custom payload")
            return None
        return payload.get("value")
