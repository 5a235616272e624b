"""KekUpload API errors."""
from typing import Any, Optional

from ...exceptions import TransportError


class APIError(TransportError):
    """
    Raised when the server answers with a non-success status.
    
    The server reports failures as JSON of the form
    ``{"generic": ..., "field": ..., "error": ...}``; whatever body was
    returned is kept on ``body``.
    """
    
    def __init__(self, status: int, body: Any = None, path: Optional[str] = None):
        self.status = status
        self.body = body
        self.path = path
        super().__init__(self._format(status, body, path), error_code=status)
    
    @staticmethod
    def _format(status: int, body: Any, path: Optional[str]) -> str:
        where = f" for {path}" if path else ""
        if isinstance(body, dict):
            detail = body.get('error') or body.get('generic')
            if detail:
                return f"HTTP {status}{where}: {detail}"
        if body:
            return f"HTTP {status}{where}: {body}"
        return f"HTTP {status}{where}"
