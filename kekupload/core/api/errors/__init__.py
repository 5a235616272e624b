"""KekUpload API errors and exceptions."""
from .api_errors import APIError

__all__ = [
    'APIError',
]
