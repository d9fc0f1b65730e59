"""Search Port Interfaces"""

from .vector_store_port import VectorStorePort, VectorStoreError

__all__ = [
    "VectorStorePort",
    "VectorStoreError",
]
