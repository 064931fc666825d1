"""
Provides the well-known directory layout used by depfetch
"""

import pathlib
from dataclasses import dataclass


@dataclass(frozen=True)
class DepfetchSettings:
    """
    Directory layout rooted at the repository being prepared
    """

    repo_root: pathlib.Path

    @property
    def downloads_directory(self) -> pathlib.Path:
        """Directory holding the staging files and extracted archives."""
        return self.repo_root / "build" / "downloads"

    @property
    def flat_repo_directory(self) -> pathlib.Path:
        """Flat directory-style repository consumed by the rest of the build."""
        return self.repo_root / "flatRepo"

    def staging_path(self, filename: str) -> pathlib.Path:
        return self.downloads_directory / filename

    def create_directories(self) -> None:
        """
        Creates the directories where the artifacts will be downloaded and stored
        """
        self.downloads_directory.mkdir(parents=True, exist_ok=True)
        self.flat_repo_directory.mkdir(parents=True, exist_ok=True)
