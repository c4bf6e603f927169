"""Archive extraction.

This module handles:
- Extracting one zip archive into a destination directory
- Restoring unix permissions recorded in the archive (VM executables)
- Extracting a set of archives as one all-or-nothing unit
"""

from __future__ import annotations

import logging
import shutil
import threading
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from gtoolkit_installer.errors import ExtractionError
from gtoolkit_installer.fetch.batch import run_batch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileToUnzip:
    """An archive and the directory it is extracted into."""

    archive: Path
    destination: Path


def extract_archive(
    archive_path: Path,
    dest_dir: Path,
    cancel: threading.Event | None = None,
) -> Path:
    """Extract a zip archive fully into ``dest_dir``.

    Args:
        archive_path: Path to the archive file.
        dest_dir: Destination directory, created if absent.
        cancel: Event that aborts the extraction between members when set.

    Returns:
        The destination directory.

    Raises:
        ExtractionError: If the archive is corrupt, unsafe or cannot be written.
    """
    logger.info("Extracting %s to %s", archive_path.name, dest_dir)

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(archive_path) as archive:
            members = archive.infolist()
            for member in members:
                # Security: prevent path traversal
                member_path = Path(member.filename)
                if member_path.is_absolute() or ".." in member_path.parts:
                    raise ExtractionError(
                        f"Refusing to extract {member.filename}: path traversal detected",
                        code="path_traversal",
                    )

            for member in members:
                if cancel is not None and cancel.is_set():
                    raise ExtractionError(
                        f"Extraction of {archive_path} was cancelled",
                        code="cancelled",
                    )
                _extract_member(archive, member, dest_dir)

        logger.info("Extracted %d entries from %s", len(members), archive_path.name)
        return dest_dir

    except zipfile.BadZipFile as e:
        raise ExtractionError(
            f"Failed to extract {archive_path}: {e}",
            code="bad_archive",
        ) from e
    except OSError as e:
        raise ExtractionError(
            f"OS error extracting {archive_path}: {e}",
            code="os_error",
        ) from e


def _extract_member(
    archive: zipfile.ZipFile, member: zipfile.ZipInfo, dest_dir: Path
) -> None:
    """Extract one member, keeping its unix mode and symlinks.

    Every write and every symlink target must stay under ``dest_dir``, even when
    an earlier member was a symlink the current path runs through.
    """
    root = dest_dir.resolve()
    target = dest_dir / member.filename
    mode = member.external_attr >> 16
    is_link = mode & 0o170000 == 0o120000

    landing = target.parent.resolve() / target.name if is_link else target.resolve()
    if not landing.is_relative_to(root):
        raise ExtractionError(
            f"Refusing to extract {member.filename}: path traversal detected",
            code="path_traversal",
        )

    if member.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return

    target.parent.mkdir(parents=True, exist_ok=True)

    # Symlinks inside macOS app bundles are stored with S_IFLNK
    if is_link:
        link = archive.read(member).decode("utf-8")
        escapes = not (landing.parent / link).resolve().is_relative_to(root)
        if Path(link).is_absolute() or escapes:
            raise ExtractionError(
                f"Refusing to extract {member.filename}: symlink points outside {dest_dir}",
                code="path_traversal",
            )
        target.unlink(missing_ok=True)
        target.symlink_to(link)
        return

    with archive.open(member) as source, target.open("wb") as dest:
        shutil.copyfileobj(source, dest)

    if mode & 0o777:
        target.chmod(mode & 0o777)


async def extract_archives(
    files: Sequence[FileToUnzip],
    max_concurrency: int = 2,
) -> list[Path]:
    """Extract a set of archives; the set fails as soon as one member fails.

    Args:
        files: Archives and their destinations.
        max_concurrency: Maximum simultaneous extractions.

    Returns:
        Destination directories, in the given order.

    Raises:
        ExtractionError: On the first failed extraction.
    """
    return await run_batch(
        [partial(_extract_job, f) for f in files],
        max_concurrency=max_concurrency,
    )


def _extract_job(file: FileToUnzip, cancel: threading.Event) -> Path:
    return extract_archive(file.archive, file.destination, cancel=cancel)


__all__ = ["FileToUnzip", "extract_archive", "extract_archives"]
