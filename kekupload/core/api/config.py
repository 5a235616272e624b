"""
API configuration module.

Provides configuration for the KekUpload API client.
"""
from dataclasses import dataclass, field
from typing import Dict, Any


DEFAULT_BASE_URL = 'https://u.kotw.dev/api/'


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.
    
    Granular control over different timeout types. A chunk upload that
    times out is retried by the engine, so these bound a single attempt.
    """
    total: float = 300.0  # Total request timeout
    connect: float = 30.0  # Connection timeout
    sock_read: float = 60.0  # Socket read timeout
    sock_connect: float = 30.0  # Socket connect timeout
    
    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class APIConfig:
    """
    Complete API configuration.
    
    Centralizes all configuration options for the KekUpload API client.
    """
    # Base address every request path is appended to
    base_url: str = DEFAULT_BASE_URL
    
    # User agent
    user_agent: str = 'kekupload-py/1.0.0'
    
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    
    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)
    
    # Logging
    log_level: int = 20  # logging.INFO
    
    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100
    
    def __post_init__(self):
        if not self.base_url.endswith('/'):
            self.base_url += '/'
    
    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()
    
    @classmethod
    def for_base(cls, base_url: str, **kwargs) -> 'APIConfig':
        """Create configuration for a specific server."""
        return cls(base_url=base_url, **kwargs)
    
    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
        }
    
    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }
        
        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
