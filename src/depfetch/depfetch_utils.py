"""
This file contains various utility functions like I/O operations, checksums, downloads and archive extraction
"""

import fnmatch
import hashlib
import logging
import os
import pathlib
import shutil
import zipfile
import zlib
from typing import List, Optional, Tuple

import requests
from tqdm import tqdm

from depfetch.depfetch_exceptions import ArchiveMalformed, ChecksumMismatch, ConnectionFailure
from depfetch.depfetch_logger import DepfetchLogger

CHUNK_SIZE = 64 * 1024


class FileUtils:
    """
    Utility functions for file operations
    """

    @staticmethod
    def compute_sha256(path: os.PathLike) -> Optional[str]:
        """
        Generates the SHA-256 for the given file.

        Returns None if the file does not exist; that is the "never fetched" state, not an error.
        """
        path = pathlib.Path(path)
        if not path.exists():
            return None

        digest = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()

    @staticmethod
    def verify_checksum(actual: Optional[str], expected: str, name: str) -> None:
        """
        Compares two checksums and raises ChecksumMismatch if they do not match
        """
        if actual != expected:
            raise ChecksumMismatch(name, expected, actual)

    @staticmethod
    def open_connection(
        logger: DepfetchLogger, url: str, retries: int, timeout: float
    ) -> Tuple[requests.Response, Optional[int]]:
        """
        Attempts to establish a connection to the given URL.

        Args:
            logger: Logger for progress and error messages
            url: The site to connect to
            retries: The number of connection attempts before failing
            timeout: Connect/read timeout in seconds for each attempt

        Returns:
            The streaming response and the advertised content length (None when unknown)

        Raises:
            ConnectionFailure: If every attempt failed
        """
        if retries < 1:
            raise ValueError(f"retries must be >= 1, got {retries}")

        last_error: Optional[BaseException] = None
        for attempt in range(1, retries + 1):
            logger.log(f"Connect attempt {attempt} of {retries}", logging.INFO)
            response = None
            try:
                response = requests.get(url, stream=True, timeout=timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                if response is not None:
                    response.close()
                logger.log(f"Connection error! {e}", logging.WARNING)
                last_error = e
                continue

            content_length = response.headers.get("Content-Length")
            # Some servers do not advertise the size
            total_size = int(content_length) if content_length and content_length.isdigit() else None
            return response, total_size

        raise ConnectionFailure(url, retries, last_error)

    @staticmethod
    def stream_to_file(
        response: requests.Response,
        target_path: os.PathLike,
        total_size: Optional[int],
        show_progress: bool = True,
    ) -> int:
        """
        Streams the response body to target_path, overwriting it, and returns the number of bytes written.

        The byte count is not checked against total_size; a truncated file fails the checksum check instead.
        A connection dropped mid-stream raises requests.RequestException after the received bytes are written.
        """
        target_path = pathlib.Path(target_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)

        total_read = 0
        with open(target_path, "wb") as f, tqdm(
            total=total_size,
            unit="B",
            unit_scale=True,
            desc=f"   Downloading {target_path.name}",
            disable=not show_progress,
        ) as progress:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                total_read += len(chunk)
                progress.update(len(chunk))
        return total_read

    @staticmethod
    def download_file(
        logger: DepfetchLogger,
        url: str,
        target_path: os.PathLike,
        retries: int,
        timeout: float = 60.0,
        show_progress: bool = True,
    ) -> int:
        """
        Downloads a file from a URL. If there is a problem connecting to the given
        URL the attempt will be retried up to `retries` times before failing.
        """
        response, total_size = FileUtils.open_connection(logger, url, retries, timeout)
        try:
            total_read = FileUtils.stream_to_file(response, target_path, total_size, show_progress)
        except requests.RequestException as e:
            logger.log(f"Download of {url} interrupted: {e}", logging.WARNING)
            # The partial file is left in place and fails the checksum check
            total_read = os.path.getsize(target_path) if os.path.exists(target_path) else 0
        finally:
            response.close()

        logger.log(
            f"Downloaded {total_read} of {total_size if total_size is not None else 'unknown'} bytes to {target_path}",
            logging.INFO,
        )
        return total_read

    @staticmethod
    def unzip(logger: DepfetchLogger, archive_path: os.PathLike, target_dir: os.PathLike) -> List[pathlib.Path]:
        """
        Unzips the regular-file entries of an archive into target_dir, recreating intermediate
        directories and overwriting existing files.

        Returns:
            The paths written, in archive order

        Raises:
            ArchiveMalformed: If the archive cannot be read or an entry escapes target_dir
        """
        archive_path = pathlib.Path(archive_path)
        target_dir = pathlib.Path(target_dir)
        root = target_dir.resolve()
        logger.log(f"Extracting {archive_path} to {target_dir}", logging.INFO)

        written = []
        try:
            with zipfile.ZipFile(archive_path) as zip_ref:
                for entry in zip_ref.infolist():
                    if entry.is_dir():
                        continue

                    destination = target_dir / entry.filename
                    if not destination.resolve().is_relative_to(root):
                        raise ArchiveMalformed(str(archive_path), f"entry {entry.filename!r} escapes {target_dir}")

                    destination.parent.mkdir(parents=True, exist_ok=True)
                    with zip_ref.open(entry) as source, open(destination, "wb") as out:
                        shutil.copyfileobj(source, out)
                    written.append(destination)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as e:
            # NotImplementedError: unsupported compression method, RuntimeError: encrypted entry
            raise ArchiveMalformed(str(archive_path), str(e)) from e

        logger.log(f"Extracted {len(written)} files from {archive_path.name}", logging.DEBUG)
        return written

    @staticmethod
    def copy_file(source: os.PathLike, destination: os.PathLike) -> pathlib.Path:
        """
        Copies a single file, creating any missing parent directories of destination
        """
        source = pathlib.Path(source)
        destination = pathlib.Path(destination)
        if not source.is_file():
            raise FileNotFoundError(f"Source file not found: {source}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        return destination

    @staticmethod
    def copy_matching(source_dir: os.PathLike, destination_dir: os.PathLike, pattern: str) -> List[pathlib.Path]:
        """
        Copies the regular files directly inside source_dir whose names match the wildcard pattern
        """
        source_dir = pathlib.Path(source_dir)
        destination_dir = pathlib.Path(destination_dir)
        if not source_dir.is_dir():
            raise FileNotFoundError(f"Source directory not found: {source_dir}")

        destination_dir.mkdir(parents=True, exist_ok=True)
        copied = []
        for path in sorted(source_dir.iterdir()):
            if path.is_file() and fnmatch.fnmatch(path.name, pattern):
                copied.append(FileUtils.copy_file(path, destination_dir / path.name))
        return copied
