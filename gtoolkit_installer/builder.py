"""Build pipeline for a Glamorous Toolkit image.

The pipeline is strictly linear: check the workspace, download the seed
image and VM, extract them, move the image files into place, write the
build scripts, prepare the seed image and finally load Glamorous Toolkit.
Every stage completes before the next one starts and the first error ends
the build; nothing is rolled back. Re-running with overwrite is the way to
recover from a failed build.
"""

from __future__ import annotations

import asyncio
import logging
import time

from rich.console import Console

from gtoolkit_installer.config import Settings
from gtoolkit_installer.fetch import (
    FileToDownload,
    FileToUnzip,
    download_files,
    extract_archives,
)
from gtoolkit_installer.options import BuildOptions
from gtoolkit_installer.progress import STEP_ICONS, StepIcons
from gtoolkit_installer.smalltalk import (
    InterpreterTarget,
    ScriptBatch,
    loader_script,
    run_scripts,
    ssh_credentials_expression,
)
from gtoolkit_installer.smalltalk.scripts import (
    CONFIGURE_SSH_SCRIPT,
    LOAD_GT_SCRIPT,
    LOAD_PATCHES,
    LOAD_PATCHES_SCRIPT,
    LOAD_TASKIT,
    LOAD_TASKIT_SCRIPT,
)
from gtoolkit_installer.types import (
    BuildReport,
    BuildStage,
    ImageSeed,
    Loader,
    LocalImage,
    RemoteImage,
    SshKeyPair,
)
from gtoolkit_installer.workspace import (
    check_installation,
    materialize,
    named,
    relocate,
)

logger = logging.getLogger(__name__)

PHARO_IMAGE_ARCHIVE = "pharo-image.zip"
PHARO_VM_ARCHIVE = "pharo-vm.zip"
GTOOLKIT_VM_ARCHIVE = "gtoolkit-vm.zip"


def plan_downloads(settings: Settings, seed: ImageSeed | None) -> list[FileToDownload]:
    """Return the artifacts to download for a build.

    A local seed image is extracted from where it is, so only remote seeds
    are downloaded.
    """
    workspace = settings.workspace
    downloads: list[FileToDownload] = []

    if not isinstance(seed, LocalImage):
        url = seed.url if isinstance(seed, RemoteImage) else settings.pharo_image_url
        downloads.append(FileToDownload(url, workspace, PHARO_IMAGE_ARCHIVE))

    downloads.append(FileToDownload(settings.pharo_vm_url, workspace, PHARO_VM_ARCHIVE))

    if settings.gtoolkit_vm_url:
        downloads.append(
            FileToDownload(settings.gtoolkit_vm_url, workspace, GTOOLKIT_VM_ARCHIVE)
        )
    return downloads


def plan_extractions(settings: Settings, seed: ImageSeed | None) -> list[FileToUnzip]:
    """Return the archives to extract and their destinations."""
    workspace = settings.workspace
    image_archive = (
        seed.path if isinstance(seed, LocalImage) else workspace / PHARO_IMAGE_ARCHIVE
    )
    extractions = [
        FileToUnzip(image_archive, settings.pharo_image_dir()),
        FileToUnzip(workspace / PHARO_VM_ARCHIVE, settings.pharo_vm_dir()),
    ]
    if settings.gtoolkit_vm_url:
        extractions.append(
            FileToUnzip(workspace / GTOOLKIT_VM_ARCHIVE, settings.gtoolkit_vm_dir())
        )
    return extractions


def plan_scripts(loader: Loader, ssh_keys: SshKeyPair | None) -> dict[str, str]:
    """Return script file names mapped to their bodies."""
    scripts = {
        LOAD_PATCHES_SCRIPT: LOAD_PATCHES,
        LOAD_TASKIT_SCRIPT: LOAD_TASKIT,
        LOAD_GT_SCRIPT: loader_script(loader),
    }
    if ssh_keys is not None:
        scripts[CONFIGURE_SSH_SCRIPT] = ssh_credentials_expression(ssh_keys)
    return scripts


def preparation_batch() -> ScriptBatch:
    """Scripts preparing the seed image."""
    return ScriptBatch(save=True).add(LOAD_PATCHES_SCRIPT).add(LOAD_TASKIT_SCRIPT)


def loading_batch(ssh_keys: SshKeyPair | None) -> ScriptBatch:
    """Scripts loading Glamorous Toolkit, configuring ssh first if keys are given."""
    batch = ScriptBatch(save=True)
    if ssh_keys is not None:
        batch.add(CONFIGURE_SSH_SCRIPT)
    return batch.add(LOAD_GT_SCRIPT)


class Builder:
    """Builds a Glamorous Toolkit image in the configured workspace."""

    def __init__(
        self,
        console: Console | None = None,
        icons: StepIcons = STEP_ICONS,
    ) -> None:
        self.console = console or Console()
        self.icons = icons

    def _announce(self, icon: str, message: str) -> None:
        self.console.print(f"{icon}{message}")

    async def build(self, settings: Settings, options: BuildOptions) -> BuildReport:
        """Run the whole pipeline.

        Args:
            settings: Workspace layout, artifact URLs and VM handles.
            options: Build options from the command line.

        Returns:
            BuildReport with the produced image and elapsed time.

        Raises:
            InstallerError: The first error of any stage, unchanged.
        """
        started = time.monotonic()
        stages = [BuildStage.START]
        workspace = settings.workspace

        # Resolve options before any side effect
        seed = options.image_seed(workspace)
        ssh_keys = options.ssh_keys()

        self._announce(self.icons.checking, "Checking the installation...")
        await asyncio.to_thread(check_installation, workspace, options.overwrite)
        stages.append(BuildStage.CHECKED)

        self._announce(self.icons.downloading, "Downloading files...")
        await download_files(
            plan_downloads(settings, seed),
            timeout=settings.download_timeout,
            max_concurrency=settings.max_concurrent_downloads,
        )
        stages.append(BuildStage.FETCHED)

        self._announce(self.icons.extracting, "Extracting files...")
        await extract_archives(
            plan_extractions(settings, seed),
            max_concurrency=settings.max_concurrent_downloads,
        )
        stages.append(BuildStage.EXTRACTED)

        self._announce(self.icons.moving, "Moving files...")
        await asyncio.to_thread(self._place_image_files, settings)
        stages.append(BuildStage.PLACED)

        self._announce(self.icons.creating, "Creating build scripts...")
        for name, body in plan_scripts(options.loader, ssh_keys).items():
            await asyncio.to_thread(materialize, workspace / name, body)
        stages.append(BuildStage.SCRIPTS_MATERIALIZED)

        image = settings.gtoolkit_image()

        self._announce(self.icons.building, "Preparing the image...")
        pharo = InterpreterTarget(
            settings.resolved_pharo_executable(), image, workspace
        )
        await asyncio.to_thread(run_scripts, preparation_batch(), pharo)
        stages.append(BuildStage.PATCHES_LOADED)

        self._announce(self.icons.building, "Building Glamorous Toolkit...")
        gtoolkit = InterpreterTarget(
            settings.resolved_gtoolkit_executable(), image, workspace
        )
        await asyncio.to_thread(run_scripts, loading_batch(ssh_keys), gtoolkit)
        stages.append(BuildStage.BUILT_IMAGE)

        stages.append(BuildStage.DONE)
        report = BuildReport(
            workspace=workspace,
            image=image,
            loader=options.loader,
            elapsed=time.monotonic() - started,
            stages=stages,
        )
        logger.info("Built %s in %.1fs", image, report.elapsed)
        self._announce(self.icons.sparkle, f"Done in {report.human_elapsed}")
        return report

    @staticmethod
    def _place_image_files(settings: Settings) -> None:
        image_dir = settings.pharo_image_dir()
        relocate(named("*.image", image_dir), settings.gtoolkit_image())
        relocate(named("*.changes", image_dir), settings.gtoolkit_changes())
        relocate(named("*.sources", image_dir), settings.workspace)


__all__ = [
    "Builder",
    "loading_batch",
    "plan_downloads",
    "plan_extractions",
    "plan_scripts",
    "preparation_batch",
]
