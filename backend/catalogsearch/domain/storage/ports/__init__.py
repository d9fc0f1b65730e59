"""Storage Port Interfaces"""

from .object_storage_port import ObjectStoragePort, StoredImage

__all__ = [
    "ObjectStoragePort",
    "StoredImage",
]
