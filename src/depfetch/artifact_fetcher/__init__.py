"""
Artifact fetcher.

This package handles:
1. Downloading artifacts from their URLs
2. Verifying their checksums
3. Updating artifact states
"""

from .fetcher import ArtifactFetcher

__all__ = ["ArtifactFetcher"]
