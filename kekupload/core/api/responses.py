"""Typed responses of the KekUpload stream endpoints."""
from dataclasses import dataclass
from typing import Any, Dict

from ..exceptions import TransportError


def _field(data: Any, name: str, path: str) -> Any:
    if not isinstance(data, dict) or name not in data:
        raise TransportError(f"Malformed response for {path}: missing '{name}'")
    return data[name]


@dataclass(frozen=True)
class StreamCreated:
    """Reply to ``c/{ext}``."""
    stream_id: str
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'c') -> 'StreamCreated':
        return cls(stream_id=str(_field(data, 'stream', path)))


@dataclass(frozen=True)
class ChunkAccepted:
    """Reply to ``u/{stream}/{hash}``."""
    success: bool
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'u') -> 'ChunkAccepted':
        return cls(success=bool(_field(data, 'success', path)))


@dataclass(frozen=True)
class StreamFinished:
    """Reply to ``f/{stream}/{hash}``."""
    object_id: str
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'f') -> 'StreamFinished':
        return cls(object_id=str(_field(data, 'id', path)))


@dataclass(frozen=True)
class StreamRemoved:
    """Reply to ``r/{stream}``."""
    success: bool
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: str = 'r') -> 'StreamRemoved':
        return cls(success=bool(_field(data, 'success', path)))
