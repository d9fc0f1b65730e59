"""Object Storage Port - Domain interface for product image storage.

Adapters must implement this interface to provide S3, MinIO, or other storage backends.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO


@dataclass
class StoredImage:
    """Metadata for an uploaded image.

    Attributes:
        storage_key: Object key (format: {timestamp_ms}-{filename})
        public_url: URL the storefront loads the image from
        size_bytes: Image size in bytes
        content_type: MIME type (e.g., 'image/png')
    """
    storage_key: str
    public_url: str
    size_bytes: int
    content_type: str


class ObjectStoragePort(ABC):
    """Port interface for uploading product images and resolving public URLs.

    The public URL is stored verbatim as the product's image_url; nothing
    downstream parses it.

    Example Usage:
        storage = S3StorageAdapter(...)
        with open('mug.png', 'rb') as f:
            stored = await storage.upload_image(f, filename='mug.png', content_type='image/png')
        product.image_url = stored.public_url
    """

    @abstractmethod
    async def upload_image(
        self,
        file: BinaryIO,
        filename: str,
        content_type: str,
    ) -> StoredImage:
        """Upload an image under a fresh key.

        Args:
            file: Binary stream (must be readable)
            filename: Original filename (whitespace runs become '-' in the key)
            content_type: MIME type of the image

        Returns:
            StoredImage: Key and public URL of the uploaded object

        Raises:
            ValueError: If the file is empty
            StorageError: If the upload fails or the key already exists
        """
        pass

    @abstractmethod
    def public_url(self, storage_key: str) -> str:
        """Public URL for a stored object key."""
        pass

    @abstractmethod
    async def file_exists(self, storage_key: str) -> bool:
        """Check if an object exists (HEAD request)."""
        pass

    @abstractmethod
    def check_bucket(self) -> None:
        """Verify the bucket is reachable.

        Raises:
            StorageError: If the bucket cannot be accessed
        """
        pass
