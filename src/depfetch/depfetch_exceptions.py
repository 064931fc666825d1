"""
This file contains various exceptions raised by depfetch
"""

from typing import List, Optional


class DepfetchException(Exception):
    """
    Exceptions raised by depfetch
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConnectionFailure(DepfetchException):
    """
    Raised when every connection attempt to a URL has failed
    """

    def __init__(self, url: str, attempts: int, last_error: Optional[BaseException] = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        message = f"***CONNECTION FAILURE*** {url}: max attempts ({attempts}) exceeded"
        if last_error is not None:
            message += f" (last error: {last_error})"
        super().__init__(message)


class ChecksumMismatch(DepfetchException):
    """
    Raised when a staging file does not have the expected SHA-256
    """

    def __init__(self, name: str, expected: str, actual: Optional[str]):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {name}: expected {expected}, got {actual or 'nothing (file absent)'}"
        )


class ArchiveMalformed(DepfetchException):
    """
    Raised when an archive cannot be read or contains an unsafe entry
    """

    def __init__(self, archive: str, reason: str):
        self.archive = archive
        self.reason = reason
        super().__init__(f"Malformed archive {archive}: {reason}")


class ArtifactFetchErrors(DepfetchException):
    """
    Raised after all pending artifacts were attempted and at least one failed
    """

    def __init__(self, failures: List[DepfetchException]):
        self.failures = failures
        lines = [f"{len(failures)} artifact(s) failed to fetch:"]
        lines.extend(f"  - {failure}" for failure in failures)
        super().__init__("\n".join(lines))
