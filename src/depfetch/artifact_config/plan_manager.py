"""
Fetch plan manager.

Probes the staging file of each configured artifact and marks which
artifacts have to be downloaded.
"""

import logging
import pathlib
from typing import Dict, List, Optional

from depfetch.artifact_models import ArtifactSpec, ArtifactsConfig
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.depfetch_settings import DepfetchSettings
from depfetch.depfetch_utils import FileUtils


class FetchStatus:
    """Enumeration of fetch statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CACHED = "cached"
    FAILED = "failed"


class FetchPlan:
    """
    A plan to fetch a specific artifact into its staging file.
    """

    def __init__(
            self,
            artifact: ArtifactSpec,
            staging_path: pathlib.Path,
            status: str = FetchStatus.PENDING,
    ):
        """
        Initialize a fetch plan.

        Args:
            artifact: The artifact to fetch
            staging_path: Where the downloaded file is stored
            status: Current fetch status
        """
        self.artifact = artifact
        self.staging_path = staging_path
        self.status = status
        self.error_message: Optional[str] = None

    @property
    def name(self) -> str:
        return self.artifact.name

    def __repr__(self) -> str:
        return (
            f"FetchPlan(name={self.artifact.name}, "
            f"status={self.status}, url={self.artifact.url})"
        )


class ArtifactState:
    """
    Current state of an artifact.

    Tracks whether the staging file is present and valid.
    """

    def __init__(
            self,
            name: str,
            status: str,
            staging_path: pathlib.Path,
            sha256: Optional[str] = None,
            error_message: Optional[str] = None,
    ):
        self.name = name
        self.status = status
        self.staging_path = staging_path
        self.sha256 = sha256
        self.error_message = error_message

    def is_available(self) -> bool:
        """Check if the staging file is present with the expected checksum."""
        return self.status in (FetchStatus.COMPLETED, FetchStatus.CACHED)

    def __repr__(self) -> str:
        return (
            f"ArtifactState(name={self.name}, "
            f"status={self.status}, path={self.staging_path})"
        )


class FetchPlanManager:
    """
    Decides which artifacts need to be fetched.

    An artifact whose staging file already has the expected SHA-256 is not
    fetched again; an absent or mismatched staging file gets a pending plan.
    """

    def __init__(
        self,
        artifacts_config: ArtifactsConfig,
        settings: DepfetchSettings,
        logger: DepfetchLogger,
    ):
        self.artifacts_config = artifacts_config
        self.settings = settings
        self.logger = logger
        self.fetch_plans: Dict[str, FetchPlan] = {}
        self.artifact_states: Dict[str, ArtifactState] = {}

    def create_fetch_plan(self) -> None:
        """
        Probe every configured artifact and create plans for those that need downloading.
        """
        self.fetch_plans = {}
        self.artifact_states = {}

        for artifact in self.artifacts_config.artifacts:
            staging_path = self.settings.staging_path(artifact.filename)
            checksum = FileUtils.compute_sha256(staging_path)

            if checksum == artifact.sha256:
                self.logger.log(f"{artifact.filename} already present with expected checksum", logging.DEBUG)
                self.artifact_states[artifact.name] = ArtifactState(
                    name=artifact.name,
                    status=FetchStatus.CACHED,
                    staging_path=staging_path,
                    sha256=checksum,
                )
                continue

            if checksum is None:
                self.logger.log(f"{artifact.filename} not present, scheduling download", logging.DEBUG)
            else:
                self.logger.log(f"{artifact.filename} has checksum {checksum}, scheduling download", logging.DEBUG)

            self.fetch_plans[artifact.name] = FetchPlan(artifact=artifact, staging_path=staging_path)
            self.artifact_states[artifact.name] = ArtifactState(
                name=artifact.name,
                status=FetchStatus.PENDING,
                staging_path=staging_path,
                sha256=checksum,
            )

    def get_fetch_plans(self) -> Dict[str, FetchPlan]:
        return self.fetch_plans

    def get_pending_fetches(self) -> List[FetchPlan]:
        """
        Get all pending fetches, in table order.
        """
        return [plan for plan in self.fetch_plans.values() if plan.status == FetchStatus.PENDING]

    def mark_fetch_completed(self, plan: FetchPlan, success: bool = True, sha256: Optional[str] = None) -> None:
        """
        Mark a fetch plan as completed or failed.

        Args:
            plan: The fetch plan to mark
            success: Whether the staging file was downloaded and verified
            sha256: The checksum computed after the download
        """
        plan.status = FetchStatus.COMPLETED if success else FetchStatus.FAILED

        self.artifact_states[plan.name] = ArtifactState(
            name=plan.name,
            status=plan.status,
            staging_path=plan.staging_path,
            sha256=sha256,
            error_message=None if success else plan.error_message,
        )

    def get_artifact_states(self) -> Dict[str, ArtifactState]:
        return self.artifact_states

    def get_artifact_state(self, name: str) -> Optional[ArtifactState]:
        return self.artifact_states.get(name)

    def all_available(self) -> bool:
        """Check that every configured artifact is present and verified."""
        return all(
            name in self.artifact_states and self.artifact_states[name].is_available()
            for name in (artifact.name for artifact in self.artifacts_config.artifacts)
        )
