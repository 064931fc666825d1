"""
Artifact stager implementation.
"""

import logging
import pathlib
import shutil
from typing import List

from depfetch.artifact_config.plan_manager import FetchPlanManager
from depfetch.artifact_models import ArtifactsConfig, CopyStep, ExtractStep
from depfetch.depfetch_config import DepfetchConfig
from depfetch.depfetch_exceptions import DepfetchException
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.depfetch_settings import DepfetchSettings
from depfetch.depfetch_utils import FileUtils


class ArtifactStager:
    """
    Extracts archives and copies staged files into the build tree.

    Only runs once every configured artifact is present and verified.
    """

    def __init__(
        self,
        artifacts_config: ArtifactsConfig,
        plan_manager: FetchPlanManager,
        settings: DepfetchSettings,
        config: DepfetchConfig,
        logger: DepfetchLogger,
    ):
        self.artifacts_config = artifacts_config
        self.plan_manager = plan_manager
        self.settings = settings
        self.config = config
        self.logger = logger

    def stage(self) -> List[pathlib.Path]:
        """
        Run every extract step, then every copy step.

        Returns:
            The destination paths written by the copy steps

        Raises:
            DepfetchException: If an artifact is not available
        """
        missing = [
            artifact.name
            for artifact in self.artifacts_config.artifacts
            if not self._is_available(artifact.name)
        ]
        if missing:
            raise DepfetchException(f"Cannot stage, artifacts not available: {', '.join(missing)}")

        for step in self.artifacts_config.extract:
            self.extract(step)

        copied = []
        for step in self.artifacts_config.copy_steps:
            copied.extend(self.copy(step))

        if not self.config.keep_downloads:
            self.cleanup()

        self.logger.log(f"Staged {len(copied)} files", logging.INFO)
        return copied

    def extract(self, step: ExtractStep) -> List[pathlib.Path]:
        artifact = self.artifacts_config.get_artifact(step.artifact)
        archive_path = self.settings.staging_path(artifact.filename)
        target_dir = self.settings.downloads_directory / step.target
        target_dir.mkdir(parents=True, exist_ok=True)
        return FileUtils.unzip(self.logger, archive_path, target_dir)

    def copy(self, step: CopyStep) -> List[pathlib.Path]:
        source = self.settings.downloads_directory / step.source
        destination = self.settings.repo_root / step.destination

        if step.pattern is not None:
            self.logger.log(f"Copying {source}/{step.pattern} to {destination}", logging.INFO)
            return FileUtils.copy_matching(source, destination, step.pattern)

        self.logger.log(f"Copying {source} to {destination}", logging.INFO)
        return [FileUtils.copy_file(source, destination)]

    def cleanup(self) -> None:
        """
        Removes the downloads directory. The next run downloads everything again.
        """
        downloads = self.settings.downloads_directory
        if downloads.exists():
            self.logger.log(f"Removing {downloads}", logging.INFO)
            shutil.rmtree(downloads)

    def _is_available(self, name: str) -> bool:
        state = self.plan_manager.get_artifact_state(name)
        return state is not None and state.is_available()
