"""
Exceptions raised by the ingestion and thumbnail pipelines.
"""

from typing import List, Optional, Sequence


class ImagePipelineError(Exception):
    """Base exception for all pipeline errors."""
    pass


class ImageIOError(ImagePipelineError, OSError):
    """Raised when a source cannot be read or a destination cannot be written."""
    pass


class UnsupportedFormatError(ImagePipelineError):
    """Raised when the sniffed format is not one the pipeline can decode."""
    pass


class CorruptImageError(ImagePipelineError):
    """Raised when the container is recognized but its pixel data is not decodable."""
    pass


class InvalidConfigurationError(ImagePipelineError, ValueError):
    """Raised for invalid configuration values (e.g. a non-positive concurrency cap)."""
    pass


class ResourceExhaustedError(ImagePipelineError):
    """Raised when a batch is aborted because a unit ran out of memory."""
    pass


class BatchFailedError(ImagePipelineError):
    """
    Raised when every unit of a thumbnail batch failed.

    Attributes:
        failures: One ThumbnailFailure per requested unit
    """

    def __init__(self, message: str, failures: Optional[Sequence] = None):
        super().__init__(message)
        self.failures: List = list(failures or [])


class PartialBatchFailure(ImagePipelineError):
    """
    Raised on demand when some, but not all, units of a batch failed.

    Attributes:
        result: The BatchResult holding the successful thumbnails
        failures: The failed units, ordered by request index
    """

    def __init__(self, message: str, result=None, failures: Optional[Sequence] = None):
        super().__init__(message)
        self.result = result
        self.failures: List = list(failures or [])
