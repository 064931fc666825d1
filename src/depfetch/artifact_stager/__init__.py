"""
Artifact stager.

Unpacks the archives that need unpacking and copies the required files
to their final locations in the build tree.
"""

from .stager import ArtifactStager

__all__ = ["ArtifactStager"]
