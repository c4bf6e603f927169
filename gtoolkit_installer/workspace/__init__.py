"""Workspace management.

This module handles:
- Checking for (and optionally removing) a previous installation
- Moving extracted files to their canonical locations
- Writing build scripts into the workspace
"""

from gtoolkit_installer.workspace.checker import check_installation, is_installed
from gtoolkit_installer.workspace.files import (
    FileNamed,
    materialize,
    named,
    relocate,
)

__all__ = [
    "FileNamed",
    "check_installation",
    "is_installed",
    "materialize",
    "named",
    "relocate",
]
