"""
Artifact fetcher implementation.

Handles downloading and verifying the staging files of pending artifacts.
"""

import logging
from typing import Dict, List

from depfetch.artifact_config.plan_manager import (
    ArtifactState,
    FetchPlan,
    FetchPlanManager,
    FetchStatus,
)
from depfetch.depfetch_config import DepfetchConfig
from depfetch.depfetch_exceptions import ArtifactFetchErrors, DepfetchException
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.depfetch_utils import FileUtils


class ArtifactFetcher:
    """
    Downloads and verifies artifacts.

    Executes fetch plans and updates artifact states. By default the first
    failure aborts the run; with continue_on_failure every pending artifact
    is attempted and all failures are reported together.
    """

    def __init__(
        self,
        plan_manager: FetchPlanManager,
        config: DepfetchConfig,
        logger: DepfetchLogger,
    ):
        """
        Initialize the artifact fetcher.

        Args:
            plan_manager: The FetchPlanManager with fetch plans
            config: Retry, timeout and failure policy settings
            logger: Logger for progress and error messages
        """
        self.plan_manager = plan_manager
        self.config = config
        self.logger = logger

    def fetch_all_pending(self) -> None:
        """
        Fetch all pending artifacts.

        Raises:
            DepfetchException: The first failure, or ArtifactFetchErrors with every
                failure when continue_on_failure is set
        """
        pending = self.plan_manager.get_pending_fetches()

        if not pending:
            self.logger.log("No pending downloads", logging.INFO)
            return

        self.logger.log(f"Starting download of {len(pending)} artifacts", logging.INFO)

        failures: List[DepfetchException] = []
        for plan in pending:
            try:
                self.fetch_artifact(plan)
            except DepfetchException as e:
                if not self.config.continue_on_failure:
                    raise
                failures.append(e)

        if failures:
            raise ArtifactFetchErrors(failures)

    def fetch_artifact(self, plan: FetchPlan) -> None:
        """
        Download a single artifact and verify its checksum.

        Retries happen only around the connection; a checksum mismatch is reported, not retried.
        """
        artifact = plan.artifact
        self.logger.log(f"File: {artifact.url}", logging.INFO)
        plan.status = FetchStatus.IN_PROGRESS

        try:
            FileUtils.download_file(
                self.logger,
                artifact.url,
                plan.staging_path,
                retries=self.config.retries,
                timeout=self.config.timeout,
                show_progress=self.config.show_progress,
            )
            checksum = FileUtils.compute_sha256(plan.staging_path)
            FileUtils.verify_checksum(checksum, artifact.sha256, artifact.filename)
        except (DepfetchException, OSError) as e:
            plan.error_message = f"Failed to fetch {artifact.name}: {e}"
            self.logger.log(plan.error_message, logging.ERROR)
            self.plan_manager.mark_fetch_completed(plan, success=False)
            raise

        self.plan_manager.mark_fetch_completed(plan, success=True, sha256=checksum)
        self.logger.log(f"Successfully fetched {artifact.name} to {plan.staging_path}", logging.INFO)

    def get_failed_artifacts(self) -> Dict[str, ArtifactState]:
        states = self.plan_manager.get_artifact_states()
        return {
            name: state
            for name, state in states.items()
            if state.status == FetchStatus.FAILED
        }

    def get_fetch_summary(self) -> Dict[str, int]:
        """
        Get a summary of fetch results.

        Returns:
            Dictionary with counts of completed, cached, failed and pending artifacts
        """
        states = self.plan_manager.get_artifact_states().values()
        summary = {
            status: sum(1 for state in states if state.status == status)
            for status in (FetchStatus.COMPLETED, FetchStatus.CACHED, FetchStatus.FAILED, FetchStatus.PENDING)
        }
        summary["total"] = len(states)
        return summary
