"""SHA-1 content addressing using pycryptodome."""
from Crypto.Hash import SHA1


def sha1_hex(data: bytes) -> str:
    """Returns the lowercase hex SHA-1 of a single buffer."""
    return SHA1.new(data).hexdigest()


class Sha1Hasher:
    """
    Streaming SHA-1 digest.
    
    Feed buffers in order with update(), then call finalize() once.
    Folding chunks one by one yields the same value as hashing the
    concatenated bytes in a single pass.
    """
    
    def __init__(self):
        """Initializes an empty digest."""
        self._hash = SHA1.new()
        self._hexdigest = None
    
    @property
    def finalized(self) -> bool:
        return self._hexdigest is not None
    
    def update(self, data: bytes) -> 'Sha1Hasher':
        """Folds a buffer into the running digest."""
        if self.finalized:
            raise ValueError("Digest already finalized")
        self._hash.update(data)
        return self
    
    def finalize(self) -> str:
        """Returns the lowercase hex digest; no updates are accepted afterwards."""
        if self._hexdigest is None:
            self._hexdigest = self._hash.hexdigest()
        return self._hexdigest
