"""
Custom exceptions for KekUpload operations.

This module defines exception classes specific to chunked uploads.
"""
from typing import Optional


class KekUploadError(Exception):
    """Base exception for all KekUpload errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class StreamNotInitializedError(KekUploadError):
    """Raised when a stream operation is used before 'begin' succeeded."""
    
    def __init__(self, message: str = "Stream not initialized. Have you run 'begin' yet?") -> None:
        super().__init__(message)


class StreamAlreadyOpenError(KekUploadError):
    """Raised when 'begin' is called while a stream is still open."""
    pass


class TransportError(KekUploadError):
    """Raised when a request to the upload server fails or cannot complete."""
    pass


class UploadCancelledError(KekUploadError):
    """Raised when a cooperative cancellation is observed between chunks."""
    
    def __init__(self, message: str = "CANCELLED") -> None:
        super().__init__(message)


class JobNotFoundError(KekUploadError):
    """Raised when a job id is neither active nor queued."""
    
    def __init__(self, job_id: int) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class NotUploadingError(KekUploadError):
    """Raised when 'cancel' is called with no upload in flight."""
    
    def __init__(self, message: str = "Not uploading. Have you run 'upload_file' yet?") -> None:
        super().__init__(message)


class AlreadyUploadingError(KekUploadError):
    """Raised when 'upload_file' is called while another upload is in flight."""
    pass
