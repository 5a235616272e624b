"""Hashing primitives."""
from .sha1 import Sha1Hasher, sha1_hex

__all__ = ['Sha1Hasher', 'sha1_hex']
