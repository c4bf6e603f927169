"""File placement and script materialization inside the workspace.

This module handles:
- Locating exactly one file by name pattern within a directory
- Moving it to its canonical workspace location
- Writing script bodies to disk for the Pharo VM to read
"""

from __future__ import annotations

import fnmatch
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from gtoolkit_installer.errors import (
    AmbiguousMatchError,
    FileOperationError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileNamed:
    """A file selected by a glob-style name pattern within one directory.

    Only direct children of ``directory`` are considered; the listing is
    taken when ``find()`` is called, never cached.
    """

    pattern: str
    directory: Path

    def matches(self) -> list[Path]:
        """Return every file in the directory whose name matches the pattern."""
        if not self.directory.is_dir():
            raise NotFoundError(f"Directory does not exist: {self.directory}")
        return sorted(
            entry
            for entry in self.directory.iterdir()
            if entry.is_file() and fnmatch.fnmatchcase(entry.name, self.pattern)
        )

    def find(self) -> Path:
        """Return the single matching file.

        Raises:
            NotFoundError: If nothing matches.
            AmbiguousMatchError: If more than one file matches.
        """
        found = self.matches()
        if not found:
            raise NotFoundError(
                f"No file matching {self.pattern!r} in {self.directory}"
            )
        if len(found) > 1:
            raise AmbiguousMatchError(self.pattern, self.directory, found)
        return found[0]


def named(pattern: str, directory: Path) -> FileNamed:
    """Shorthand for ``FileNamed(pattern, directory)``."""
    return FileNamed(pattern=pattern, directory=directory)


def relocate(source: FileNamed, destination: Path) -> Path:
    """Move the single file matching ``source`` to ``destination``.

    Args:
        source: Pattern and directory selecting exactly one file.
        destination: Target file path, or an existing directory in which case
            the original file name is kept.

    Returns:
        Final path of the moved file.

    Raises:
        NotFoundError: If no file matches.
        AmbiguousMatchError: If several files match; nothing is moved.
        FileOperationError: If the move fails.
    """
    found = source.find()
    target = destination / found.name if destination.is_dir() else destination

    logger.info("Moving %s to %s", found, target)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(found), str(target))
    except OSError as e:
        raise FileOperationError(f"Failed to move {found} to {target}: {e}") from e
    return target


def materialize(destination: Path, body: str) -> Path:
    """Create or overwrite a text file with the given body.

    Args:
        destination: File to write.
        body: Text content.

    Returns:
        The written path.

    Raises:
        FileOperationError: If the file cannot be written.
    """
    logger.info("Creating %s", destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(body, encoding="utf-8")
    except OSError as e:
        raise FileOperationError(f"Failed to write {destination}: {e}") from e
    return destination


__all__ = ["FileNamed", "materialize", "named", "relocate"]
