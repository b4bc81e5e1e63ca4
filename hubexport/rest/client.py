"""Simple REST client for the content-delivery management API."""

import time
import httpx
from typing import Dict, Any, Optional
import logging
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..utils.error_handler import is_retriable

logger = logging.getLogger(__name__)

# Refresh a little before the server-side expiry
_TOKEN_EXPIRY_MARGIN = 30.0


class DynamicContentClient:
    """Simple REST client for the content-delivery management API."""

    def __init__(
        self,
        api_url: str,
        auth_url: str,
        client_id: str,
        client_secret: str,
        timeout: float = 30.0,
        max_attempts: int = 3,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_wait=None,
    ):
        """Initialize the REST client.

        Args:
            api_url: Management API base URL
            auth_url: OAuth token endpoint
            client_id: OAuth client id
            client_secret: OAuth client secret
            timeout: Request timeout in seconds
            max_attempts: Attempts per request for transient failures
            http_client: Pre-built httpx client (tests inject a mock transport here)
            retry_wait: tenacity wait strategy between attempts
        """
        self.api_url = api_url.rstrip('/')
        self.auth_url = auth_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=10)
        self.client = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json"
            }
        )
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    async def _access_token(self) -> str:
        """Fetch (or reuse) a client-credentials bearer token."""
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        logger.debug(f"POST {self.auth_url}")
        response = await self.client.post(
            self.auth_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        response.raise_for_status()
        body = response.json()
        self._token = body["access_token"]
        expires_in = float(body.get("expires_in", 300))
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - _TOKEN_EXPIRY_MARGIN)
        return self._token

    def _drop_token(self) -> None:
        self._token = None
        self._token_expires_at = 0.0

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        token = await self._access_token()
        headers = {**kwargs.pop("headers", {}), "Authorization": f"Bearer {token}"}
        response = await self.client.request(method=method, url=url, headers=headers, **kwargs)
        if response.status_code == 401:
            # Token revoked or expired early; authenticate again once
            self._drop_token()
            headers["Authorization"] = f"Bearer {await self._access_token()}"
            response = await self.client.request(method=method, url=url, headers=headers, **kwargs)
        response.raise_for_status()
        return response

    async def request(
        self,
        method: str,
        path: str,
        **kwargs
    ) -> Dict[str, Any]:
        """Make a REST API request with automatic retry.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path (e.g., /hubs/{id})
            **kwargs: Additional arguments passed to httpx

        Returns:
            JSON response as dictionary

        Raises:
            httpx.HTTPStatusError: If the request fails (after retries for transient statuses)
        """
        url = f"{self.api_url}{path}"

        logger.debug(f"{method} {url}")

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self.retry_wait,
                retry=retry_if_exception(is_retriable),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            f"Retrying {method} {url} (attempt {attempt.retry_state.attempt_number}/{self.max_attempts})"
                        )
                    response = await self._send(method, url, **kwargs)

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code}: {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request failed: {e}")
            raise

        # Return empty dict for 204 No Content responses
        if response.status_code == 204:
            return {}

        return response.json() if response.text else {}

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
