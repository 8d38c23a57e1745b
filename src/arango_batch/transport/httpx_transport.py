"""
httpx adapter for the transport interface.
"""

from typing import Dict, Optional

import httpx
import structlog

from arango_batch.config import BatchConfig, get_config
from arango_batch.transport.interface import Transport, TransportError

logger = structlog.get_logger(__name__)


class HttpxTransport(Transport):
    """
    Transport backed by an httpx.AsyncClient.
    
    Usage:
        ```python
        async with HttpxTransport(config) as transport:
            raw = await transport.post("/_api/batch", body, headers)
        ```
    """
    
    def __init__(
        self,
        config: Optional[BatchConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the transport.
        
        Args:
            config: Batch configuration. Uses global config if not provided.
            client: Preconfigured client (the transport will not close it)
        """
        self.config = config or get_config()
        self.base_url = self.config.base_url
        self._client = client
        self._owns_client = client is None
    
    @property
    def auth(self) -> Optional[httpx.BasicAuth]:
        """Basic auth credentials, if a password is configured."""
        if self.config.password is None:
            return None
        return httpx.BasicAuth(self.config.username, self.config.password)
    
    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return
        
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            timeout=self.config.timeout_seconds,
        )
        self._owns_client = True
        logger.info("transport_connected", base_url=self.base_url)
    
    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info("transport_disconnected")
    
    async def __aenter__(self) -> "HttpxTransport":
        await self.connect()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
    
    async def post(
        self,
        path: str,
        body: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """POST a raw body and return the raw response text."""
        if not self._client:
            await self.connect()
        
        try:
            response = await self._client.post(path, content=body, headers=headers)
        except httpx.RequestError as e:
            logger.error("transport_request_error", path=path, error=str(e))
            raise TransportError(f"request to {path} failed: {e}")
        
        if not response.is_success:
            logger.error(
                "transport_request_failed",
                path=path,
                status=response.status_code,
                error=response.text,
            )
            raise TransportError(
                f"request to {path} failed with HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        
        return response.text
