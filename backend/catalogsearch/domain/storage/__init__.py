"""Storage domain layer"""

from .ports import ObjectStoragePort, StoredImage

__all__ = [
    "ObjectStoragePort",
    "StoredImage",
]
