"""Artifact fetching.

This module handles:
- Downloading sets of remote artifacts into the workspace
- Extracting sets of downloaded archives
- Running set members concurrently with all-or-nothing semantics
"""

from gtoolkit_installer.fetch.batch import BatchCancelledError, run_batch
from gtoolkit_installer.fetch.download import (
    DownloadResult,
    FileToDownload,
    download_file,
    download_files,
)
from gtoolkit_installer.fetch.extract import (
    FileToUnzip,
    extract_archive,
    extract_archives,
)

__all__ = [
    "BatchCancelledError",
    "DownloadResult",
    "FileToDownload",
    "FileToUnzip",
    "download_file",
    "download_files",
    "extract_archive",
    "extract_archives",
    "run_batch",
]
