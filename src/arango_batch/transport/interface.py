"""
Abstract interface for the HTTP transport.

Defines the contract the batch coordinator needs to perform its single
physical request.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class Transport(ABC):
    """
    Abstract interface for HTTP access to an ArangoDB server.
    
    Connection pooling, TLS, authentication and timeouts belong to the
    implementation; the batch layer only posts one body and reads the reply.
    """
    
    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the server.
        
        Raises:
            TransportError: If connection cannot be established
        """
        pass
    
    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the server."""
        pass
    
    @abstractmethod
    async def post(
        self,
        path: str,
        body: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Send a POST request.
        
        Args:
            path: Server-relative path
            body: Raw request body
            headers: Extra request headers
            
        Returns:
            Raw response body
            
        Raises:
            TransportError: On network failure or a non-2xx response
        """
        pass


class TransportError(Exception):
    """Raised when the physical request fails."""
    
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
