"""Product catalog and semantic search endpoints"""
