"""
Configuration parameters for depfetch.
"""

import os
import pathlib
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from depfetch.depfetch_exceptions import DepfetchException

CONFIG_FILE_NAME = "depfetch.toml"

DEPFETCH_TOML_SCHEMA = """
# depfetch configuration, placed at the repository root

[depfetch]
# Number of times to try and establish a connection before failing
retries = 2

# Connect/read timeout in seconds for each connection attempt
timeout = 60.0

# Attempt every artifact and report all failures at the end instead of
# stopping at the first one
continue_on_failure = false

# Show a byte progress bar while downloading
show_progress = true

# Keep build/downloads after staging (it doubles as the download cache)
keep_downloads = true
"""


@dataclass
class DepfetchConfig:
    """
    Configuration parameters
    """

    repo_root: pathlib.Path = field(default_factory=pathlib.Path.cwd)
    retries: int = 2
    timeout: float = 60.0
    continue_on_failure: bool = False
    show_progress: bool = True
    keep_downloads: bool = True

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            DepfetchException: If a value is out of range
        """
        if isinstance(self.retries, bool) or not isinstance(self.retries, int) or self.retries < 1:
            raise DepfetchException(f"'retries' must be an integer >= 1, got {self.retries!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise DepfetchException(f"'timeout' must be a positive number, got {self.timeout!r}")
        for flag in ("continue_on_failure", "show_progress", "keep_downloads"):
            if not isinstance(getattr(self, flag), bool):
                raise DepfetchException(f"'{flag}' must be a boolean")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], repo_root: Optional[os.PathLike] = None) -> "DepfetchConfig":
        """
        Create a DepfetchConfig from a dictionary (loaded from TOML).

        Args:
            config_dict: Dictionary with the [depfetch] table or its contents
            repo_root: Repository root, defaults to the current directory

        Returns:
            DepfetchConfig instance

        Raises:
            DepfetchException: If configuration is invalid
        """
        section = config_dict.get("depfetch", config_dict)
        if not isinstance(section, dict):
            raise DepfetchException("'depfetch' must be a table")

        known = {"retries", "timeout", "continue_on_failure", "show_progress", "keep_downloads"}
        unknown = set(section) - known
        if unknown:
            raise DepfetchException(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        config = cls(
            repo_root=pathlib.Path(repo_root) if repo_root is not None else pathlib.Path.cwd(),
            **section,
        )
        config.validate()
        return config

    @classmethod
    def load(cls, repo_root: Optional[os.PathLike] = None, path: Optional[os.PathLike] = None) -> "DepfetchConfig":
        """
        Load configuration from depfetch.toml.

        If no path is given, <repo_root>/depfetch.toml is used when it exists,
        otherwise the defaults apply.
        """
        root = pathlib.Path(repo_root) if repo_root is not None else pathlib.Path.cwd()
        config_path = pathlib.Path(path) if path is not None else root / CONFIG_FILE_NAME

        if not config_path.exists():
            if path is not None:
                raise DepfetchException(f"Configuration file not found: {config_path}")
            config = cls(repo_root=root)
            config.validate()
            return config

        try:
            with open(config_path, "rb") as f:
                toml_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise DepfetchException(f"Failed to parse {config_path}: {e}") from e

        return cls.from_dict(toml_dict, repo_root=root)

    def with_overrides(self, **overrides: Any) -> "DepfetchConfig":
        """
        Return a copy with the non-None overrides applied (e.g. from the command line).
        """
        values = asdict(self)
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = DepfetchConfig(**values)
        config.validate()
        return config
