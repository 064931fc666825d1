"""
depfetch fetches, verifies and stages third-party build artifacts that are not
hosted in standard package repositories.
"""

from depfetch.depfetch_config import DepfetchConfig
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.flat_repo import FlatRepoPopulator

__all__ = ["DepfetchConfig", "DepfetchLogger", "FlatRepoPopulator"]
