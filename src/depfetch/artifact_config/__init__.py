"""
Artifact fetch planning.

This package handles:
1. Probing the staging files of every configured artifact
2. Marking which artifacts need to be downloaded
3. Tracking artifact states
"""

from .plan_manager import ArtifactState, FetchPlan, FetchPlanManager, FetchStatus

__all__ = ["ArtifactState", "FetchPlan", "FetchPlanManager", "FetchStatus"]
