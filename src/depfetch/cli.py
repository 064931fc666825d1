"""
Command line interface for depfetch.
"""

import logging
import pathlib
import sys
from typing import Optional

import click

from depfetch.depfetch_config import DepfetchConfig
from depfetch.depfetch_exceptions import DepfetchException
from depfetch.depfetch_logger import DepfetchLogger
from depfetch.flat_repo import FlatRepoPopulator

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _load_config(repo_root: str, config_path: Optional[str], **overrides) -> DepfetchConfig:
    config = DepfetchConfig.load(repo_root=pathlib.Path(repo_root).resolve(), path=config_path)
    return config.with_overrides(**overrides)


@click.group(help="Fetch third-party build dependencies into build/downloads and flatRepo.")
def cli() -> None:
    pass


@cli.command("fetch")
@click.option("--repo-root", default=".", type=click.Path(file_okay=False), show_default=True,
              help="Repository root to populate.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to depfetch.toml.")
@click.option("--retries", type=click.IntRange(min=1), help="Connection attempts per artifact.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Per-attempt timeout in seconds.")
@click.option("--continue-on-failure", is_flag=True, default=False,
              help="Attempt every artifact and report all failures at the end.")
@click.option("--no-progress", is_flag=True, default=False, help="Do not show download progress bars.")
@click.option("--clean", is_flag=True, default=False, help="Remove build/downloads after staging.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def fetch_cmd(
    repo_root: str,
    config_path: Optional[str],
    retries: Optional[int],
    timeout: Optional[float],
    continue_on_failure: bool,
    no_progress: bool,
    clean: bool,
    verbose: bool,
) -> None:
    """Download, verify and stage every artifact."""
    _configure_logging(verbose)
    try:
        config = _load_config(
            repo_root,
            config_path,
            retries=retries,
            timeout=timeout,
            continue_on_failure=True if continue_on_failure else None,
            show_progress=False if no_progress else None,
            keep_downloads=False if clean else None,
        )
        staged = FlatRepoPopulator(config, DepfetchLogger()).populate()
    except (DepfetchException, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Staged {len(staged)} files into {config.repo_root}")


@cli.command("status")
@click.option("--repo-root", default=".", type=click.Path(file_okay=False), show_default=True,
              help="Repository root to inspect.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to depfetch.toml.")
def status_cmd(repo_root: str, config_path: Optional[str]) -> None:
    """Show which artifacts are already present with the expected checksum."""
    _configure_logging(False)
    try:
        config = _load_config(repo_root, config_path)
        states = FlatRepoPopulator(config, DepfetchLogger()).status()
    except (DepfetchException, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for name, status in states.items():
        click.echo(f"{name}: {status}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
