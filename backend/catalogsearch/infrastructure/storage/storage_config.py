"""Image storage settings.

The same settings drive MinIO in development (S3_ENDPOINT_URL set, path-style
URLs) and AWS S3 in production (S3_ENDPOINT_URL empty, regional endpoints).
Empty strings from the environment are normalized to None.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from ...config import Settings

_URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class StorageConfig:
    endpoint_url: Optional[str]
    access_key: str
    secret_key: str
    bucket_name: str
    region: str = "us-east-1"
    public_base_url: Optional[str] = None

    def adapter_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for S3StorageAdapter."""
        return asdict(self)


def load_storage_config(settings: Settings) -> StorageConfig:
    """Build the storage config from settings and validate it.

    Raises:
        ValueError: on a missing credential, bucket or region, or a malformed URL
    """
    config = StorageConfig(
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
        public_base_url=settings.S3_PUBLIC_BASE_URL or None,
    )
    validate_storage_config(config)
    return config


def validate_storage_config(config: StorageConfig) -> None:
    for field_name in ("access_key", "secret_key", "bucket_name"):
        if not getattr(config, field_name):
            raise ValueError(f"Storage {field_name} is required")

    for field_name in ("endpoint_url", "public_base_url"):
        url = getattr(config, field_name)
        if url and not url.startswith(_URL_SCHEMES):
            raise ValueError(f"Invalid {field_name}: {url}. Must start with http:// or https://")

    if not config.endpoint_url and not config.region:
        raise ValueError("AWS region is required when S3_ENDPOINT_URL is not set")
