"""Crypto module."""
from .hashing import Sha1Hasher, sha1_hex

__all__ = ['Sha1Hasher', 'sha1_hex']
