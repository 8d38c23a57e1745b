"""
Batch targets: a whole server, or one database on it.

A coordinator addresses exactly one target; the target decides where the
physical batch request is routed.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote

from arango_batch.config import BatchConfig, get_config
from arango_batch.transport.interface import Transport

if TYPE_CHECKING:
    from arango_batch.core.coordinator import BatchCoordinator


def _normalize(path: str) -> str:
    return "/" + path.lstrip("/")


class Server:
    """Server-level target."""
    
    def __init__(self, transport: Transport, config: Optional[BatchConfig] = None):
        self.transport = transport
        self.config = config or get_config()
    
    @classmethod
    def from_config(
        cls,
        config: Optional[BatchConfig] = None,
        configure_logging: bool = False,
    ) -> "Server":
        """
        Create a server target with an httpx transport.
        
        Args:
            config: Batch configuration. Uses global config if not provided.
            configure_logging: Also apply config.log_level and config.log_json
        """
        from arango_batch.logging_config import setup_logging
        from arango_batch.transport.httpx_transport import HttpxTransport
        
        config = config or get_config()
        if configure_logging:
            setup_logging(config)
        return cls(HttpxTransport(config), config)
    
    async def post(self, path: str, body: str, headers: Optional[Dict[str, str]] = None) -> str:
        return await self.transport.post(_normalize(path), body, headers)
    
    def database(self, name: Optional[str] = None) -> "Database":
        """Get a database target on this server (configured database by default)."""
        name = name or self.config.database
        if not name:
            raise ValueError("no database name given or configured")
        return Database(name, self)
    
    def batch(self, operations: Any = None) -> "BatchCoordinator":
        """Create a coordinator whose batch runs at server level."""
        from arango_batch.core.coordinator import BatchCoordinator
        
        return BatchCoordinator(server=self, operations=operations, config=self.config)
    
    def __repr__(self) -> str:
        return f"Server(transport={type(self.transport).__name__})"


class Database:
    """Database-level target; paths are routed through /_db/<name>."""
    
    def __init__(self, name: str, server: Server):
        self.name = name
        self.server = server
    
    @property
    def prefix(self) -> str:
        return f"/_db/{quote(self.name, safe='')}"
    
    async def post(self, path: str, body: str, headers: Optional[Dict[str, str]] = None) -> str:
        return await self.server.post(self.prefix + _normalize(path), body, headers)
    
    def batch(self, operations: Any = None) -> "BatchCoordinator":
        """Create a coordinator whose batch runs in this database."""
        from arango_batch.core.coordinator import BatchCoordinator
        
        return BatchCoordinator(database=self, operations=operations, config=self.server.config)
    
    def __repr__(self) -> str:
        return f"Database(name={self.name!r})"
