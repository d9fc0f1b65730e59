"""Catalog Search - semantic product search with embeddings and a conversational assistant"""

__version__ = "0.1.0"
