"""Smalltalk scripts written into the workspace before the image is built.

The load script is the only one that depends on the selected loader.
"""

from __future__ import annotations

from gtoolkit_installer.types import Loader

LOAD_PATCHES_SCRIPT = "load-patches.st"
LOAD_TASKIT_SCRIPT = "load-taskit.st"
LOAD_GT_SCRIPT = "load-gt.st"
CONFIGURE_SSH_SCRIPT = "configure-ssh.st"

LOAD_PATCHES = """\
"Prepare a clean Pharo image for loading Glamorous Toolkit"
EpMonitor current disable.
Iceberg enableMetacelloIntegration: true.
Metacello new
	baseline: 'GToolkitPharoPatches';
	repository: 'github://feenkcom/gtoolkit-pharo-patches:main/src';
	load.
EpMonitor current enable.
"""

LOAD_TASKIT = """\
"Load TaskIt, required by the Glamorous Toolkit loaders"
EpMonitor current disable.
Metacello new
	baseline: 'TaskIt';
	repository: 'github://feenkcom/taskit:main/src';
	onConflictUseIncoming;
	load.
EpMonitor current enable.
"""

CLONE_GT = """\
"Clone and load Glamorous Toolkit with the gtoolkit-releaser Cloner"
EpMonitor current disable.
Metacello new
	baseline: 'GToolkitReleaser';
	repository: 'github://feenkcom/gtoolkit-releaser:main/src';
	load.
(Smalltalk at: #GtRlCloner) new
	cloneBaseline: 'GToolkit'
	fromRepository: 'github://feenkcom/gtoolkit:main/src'.
Metacello new
	baseline: 'GToolkit';
	repository: 'github://feenkcom/gtoolkit:main/src';
	load.
EpMonitor current enable.
"""

LOAD_GT = """\
"Load Glamorous Toolkit with Metacello"
EpMonitor current disable.
Metacello new
	githubUser: 'feenkcom' project: 'gtoolkit' commitish: 'main' path: 'src';
	baseline: 'GToolkit';
	onConflictUseIncoming;
	load.
EpMonitor current enable.
"""

_LOADER_SCRIPTS = {
    Loader.CLONER: CLONE_GT,
    Loader.METACELLO: LOAD_GT,
}


def loader_script(loader: Loader) -> str:
    """Return the body of the load script for a loader."""
    return _LOADER_SCRIPTS[loader]


__all__ = [
    "CLONE_GT",
    "CONFIGURE_SSH_SCRIPT",
    "LOAD_GT",
    "LOAD_GT_SCRIPT",
    "LOAD_PATCHES",
    "LOAD_PATCHES_SCRIPT",
    "LOAD_TASKIT",
    "LOAD_TASKIT_SCRIPT",
    "loader_script",
]
