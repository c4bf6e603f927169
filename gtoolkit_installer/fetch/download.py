"""Artifact download.

This module handles:
- Describing named remote artifacts and their workspace destinations
- Streaming a single artifact to disk
- Downloading a set of artifacts as one all-or-nothing unit
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import httpx

from gtoolkit_installer.errors import ConfigurationError, DownloadError
from gtoolkit_installer.fetch.batch import run_batch

logger = logging.getLogger(__name__)

# Timeout for downloads (seconds)
DOWNLOAD_TIMEOUT = 3600

# Chunk size for downloads (bytes)
DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB


@dataclass(frozen=True)
class FileToDownload:
    """A remote artifact and where it should be stored."""

    url: str
    directory: Path
    file_name: str

    @property
    def path(self) -> Path:
        """Destination path of the downloaded file."""
        return self.directory / self.file_name


@dataclass
class DownloadResult:
    """Result of a single artifact download."""

    path: Path
    checksum: str
    size_bytes: int


def download_file(
    client: httpx.Client,
    url: str,
    dest_path: Path,
    cancel: threading.Event | None = None,
    chunk_size: int = DOWNLOAD_CHUNK_SIZE,
) -> DownloadResult:
    """Download a file, following redirects.

    Args:
        client: HTTPX client instance.
        url: URL to download from.
        dest_path: Destination path for the downloaded file.
        cancel: Event that aborts the download when set.
        chunk_size: Size of chunks to download.

    Returns:
        DownloadResult with path, checksum, and size.

    Raises:
        DownloadError: If the download fails or is cancelled.
    """
    logger.info("Downloading %s to %s", url, dest_path)

    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()

            total_bytes = 0
            sha256 = hashlib.sha256()

            dest_path.parent.mkdir(parents=True, exist_ok=True)

            with dest_path.open("wb") as f:
                for chunk in response.iter_bytes(chunk_size):
                    if cancel is not None and cancel.is_set():
                        break
                    f.write(chunk)
                    sha256.update(chunk)
                    total_bytes += len(chunk)

        if cancel is not None and cancel.is_set():
            dest_path.unlink(missing_ok=True)
            raise DownloadError(f"Download of {url} was cancelled", code="cancelled")

        checksum = sha256.hexdigest()
        logger.info(
            "Downloaded %s (%d bytes, checksum: %s)",
            dest_path.name,
            total_bytes,
            checksum[:16] + "...",
        )
        return DownloadResult(path=dest_path, checksum=checksum, size_bytes=total_bytes)

    except httpx.HTTPStatusError as e:
        raise DownloadError(
            f"HTTP error downloading {url}: {e.response.status_code} {e.response.reason_phrase}",
            code="http_error",
        ) from e
    except httpx.TimeoutException as e:
        raise DownloadError(
            f"Timeout downloading {url}",
            code="timeout",
        ) from e
    except httpx.RequestError as e:
        raise DownloadError(
            f"Network error downloading {url}: {e}",
            code="network_error",
        ) from e
    except OSError as e:
        raise DownloadError(
            f"Failed to write {dest_path}: {e}",
            code="io_error",
        ) from e


async def download_files(
    files: Sequence[FileToDownload],
    timeout: float = DOWNLOAD_TIMEOUT,
    max_concurrency: int = 2,
) -> list[DownloadResult]:
    """Download a set of artifacts; the set fails as soon as one member fails.

    Args:
        files: Artifacts to download. Destination paths must be distinct.
        timeout: Network timeout in seconds.
        max_concurrency: Maximum simultaneous downloads.

    Returns:
        One DownloadResult per artifact, in the given order.

    Raises:
        ConfigurationError: If two artifacts share a destination path.
        DownloadError: On the first failed download.
    """
    paths = [f.path for f in files]
    if len(set(paths)) != len(paths):
        raise ConfigurationError(
            "Downloads must have distinct destinations: "
            + ", ".join(str(p) for p in paths)
        )

    with httpx.Client(follow_redirects=True, timeout=timeout) as client:
        return await run_batch(
            [partial(_download_job, client, f) for f in files],
            max_concurrency=max_concurrency,
        )


def _download_job(
    client: httpx.Client, file: FileToDownload, cancel: threading.Event
) -> DownloadResult:
    return download_file(client, file.url, file.path, cancel=cancel)


__all__ = [
    "DOWNLOAD_TIMEOUT",
    "DownloadResult",
    "FileToDownload",
    "download_file",
    "download_files",
]
