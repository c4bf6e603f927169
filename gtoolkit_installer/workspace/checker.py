"""Precondition check for a build.

A workspace that already contains anything is treated as an existing
installation. Without overwrite the build stops before touching the network
or the disk; with overwrite the previous installation is removed first.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from gtoolkit_installer.errors import AlreadyInstalledError, FileOperationError

logger = logging.getLogger(__name__)


def is_installed(workspace: Path) -> bool:
    """Return True if the workspace holds a previous installation."""
    if not workspace.exists():
        return False
    if not workspace.is_dir():
        return True
    return any(workspace.iterdir())


def check_installation(workspace: Path, overwrite: bool) -> None:
    """Decide whether a build may proceed in the workspace.

    Args:
        workspace: Workspace directory the build writes into.
        overwrite: Remove an existing installation instead of failing.

    Raises:
        AlreadyInstalledError: If an installation exists and overwrite is False.
        FileOperationError: If the previous installation cannot be removed or
            the workspace cannot be created.
    """
    if is_installed(workspace):
        if not overwrite:
            raise AlreadyInstalledError(workspace)

        logger.info("Removing existing installation in %s", workspace)
        try:
            if workspace.is_dir() and not workspace.is_symlink():
                shutil.rmtree(workspace)
            else:
                workspace.unlink()
        except OSError as e:
            raise FileOperationError(
                f"Failed to remove existing installation {workspace}: {e}"
            ) from e

    try:
        workspace.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileOperationError(
            f"Failed to create workspace {workspace}: {e}"
        ) from e


__all__ = ["check_installation", "is_installed"]
