"""
Populates the flat repository and the other consumption points of the build
with the third-party artifacts that are not available from standard repositories.
"""

import logging
import pathlib
from typing import Dict, List, Optional

from depfetch.artifact_config import FetchPlanManager
from depfetch.artifact_fetcher import ArtifactFetcher
from depfetch.artifact_models import ArtifactsConfig
from depfetch.artifact_stager import ArtifactStager
from depfetch.depfetch_config import DepfetchConfig
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.depfetch_settings import DepfetchSettings


class FlatRepoPopulator:
    """
    Runs the whole pipeline for one repository:

    1. Creates build/downloads and flatRepo
    2. Probes every artifact and downloads the absent or mismatched ones
    3. Extracts archives and copies the required files into place

    Example usage:
    ```python
    config = DepfetchConfig.load("/path/to/repo")
    FlatRepoPopulator(config, DepfetchLogger()).populate()
    ```
    """

    def __init__(
        self,
        config: DepfetchConfig,
        logger: DepfetchLogger,
        artifacts_config: Optional[ArtifactsConfig] = None,
    ):
        self.config = config
        self.logger = logger
        if artifacts_config is None:
            artifacts_config = ArtifactsConfig.load_default()
        self.artifacts_config = artifacts_config
        self.settings = DepfetchSettings(pathlib.Path(config.repo_root))
        self.plan_manager = FetchPlanManager(self.artifacts_config, self.settings, logger)
        self.fetcher = ArtifactFetcher(self.plan_manager, config, logger)
        self.stager = ArtifactStager(self.artifacts_config, self.plan_manager, self.settings, config, logger)

    def populate(self) -> List[pathlib.Path]:
        """
        Fetch, verify and stage every artifact.

        Returns:
            The destination paths written by the copy steps

        Raises:
            DepfetchException: If an artifact could not be fetched, verified or extracted
        """
        self.settings.create_directories()

        self.plan_manager.create_fetch_plan()
        self.fetcher.fetch_all_pending()

        summary = self.fetcher.get_fetch_summary()
        self.logger.log(
            f"Download summary: {summary['completed']} downloaded, {summary['cached']} already present",
            logging.INFO,
        )

        return self.stager.stage()

    def status(self) -> Dict[str, str]:
        """
        Probe every artifact without downloading anything.

        Returns:
            Mapping of artifact name to "cached" or "pending"
        """
        self.plan_manager.create_fetch_plan()
        return {name: state.status for name, state in self.plan_manager.get_artifact_states().items()}
