"""Configuration settings for gtoolkit_installer.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

import platform
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PHARO_FILES_BASE = "https://files.pharo.org"


def _default_workspace() -> Path:
    """Return the default workspace directory."""
    return Path.cwd() / "glamoroustoolkit"


def _platform_triple() -> tuple[str, str]:
    """Return the (os, arch) pair used in Pharo VM download paths."""
    system = platform.system()
    machine = platform.machine().lower()
    arch = "arm64" if machine in ("arm64", "aarch64") else "x86_64"
    if system == "Darwin":
        return "Darwin", arch
    if system == "Windows":
        return "Windows", "x86_64"
    return "Linux", arch


def _default_pharo_vm_url() -> str:
    """Return the headless Pharo VM archive URL for the current platform."""
    os_name, arch = _platform_triple()
    return f"{PHARO_FILES_BASE}/vm/pharo-spur64-headless/{os_name}-{arch}/latest10.zip"


def _default_pharo_image_url() -> str:
    """Return the default Pharo seed image archive URL."""
    return f"{PHARO_FILES_BASE}/image/100/latest-64.zip"


def _pharo_executable_in(vm_dir: Path) -> Path:
    """Return the Pharo VM executable inside an extracted VM directory."""
    os_name, _ = _platform_triple()
    if os_name == "Darwin":
        return vm_dir / "Pharo.app" / "Contents" / "MacOS" / "Pharo"
    if os_name == "Windows":
        return vm_dir / "PharoConsole.exe"
    return vm_dir / "pharo"


def _gtoolkit_executable_in(vm_dir: Path) -> Path:
    """Return the Glamorous Toolkit VM executable inside an extracted VM directory."""
    os_name, _ = _platform_triple()
    if os_name == "Darwin":
        return vm_dir / "GlamorousToolkit.app" / "Contents" / "MacOS" / "GlamorousToolkit-cli"
    if os_name == "Windows":
        return vm_dir / "bin" / "GlamorousToolkit-cli.exe"
    return vm_dir / "bin" / "GlamorousToolkit-cli"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the GT_INSTALLER_
    prefix. CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="GT_INSTALLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    workspace: Path = Field(
        default_factory=_default_workspace,
        description="Directory in which Glamorous Toolkit is built",
    )
    app_name: str = Field(
        default="GlamorousToolkit",
        min_length=1,
        description="Base name of the produced .image and .changes files",
    )

    # Artifact URLs
    pharo_image_url: str = Field(
        default_factory=_default_pharo_image_url,
        description="URL of the clean Pharo seed image archive",
    )
    pharo_vm_url: str = Field(
        default_factory=_default_pharo_vm_url,
        description="URL of the Pharo VM archive for this platform",
    )
    gtoolkit_vm_url: str | None = Field(
        default=None,
        description="URL of the Glamorous Toolkit VM archive (optional)",
    )

    # Interpreter handles
    pharo_executable: Path | None = Field(
        default=None,
        description="Pharo VM executable (derived from the workspace if not set)",
    )
    gtoolkit_executable: Path | None = Field(
        default=None,
        description="Glamorous Toolkit VM executable (derived if not set)",
    )

    # Operational
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Concurrency
    max_concurrent_downloads: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Maximum concurrent downloads and extractions",
    )

    # Timeouts (in seconds)
    download_timeout: int = Field(
        default=3600,
        ge=60,
        description="Timeout for artifact downloads",
    )

    def gtoolkit_image(self) -> Path:
        """Path of the image produced by the build."""
        return self.workspace / f"{self.app_name}.image"

    def gtoolkit_changes(self) -> Path:
        """Path of the changes file that accompanies the produced image."""
        return self.workspace / f"{self.app_name}.changes"

    def pharo_image_dir(self) -> Path:
        """Directory the seed image archive is extracted into."""
        return self.workspace / "pharo-image"

    def pharo_vm_dir(self) -> Path:
        """Directory the Pharo VM archive is extracted into."""
        return self.workspace / "pharo-vm"

    def gtoolkit_vm_dir(self) -> Path:
        """Directory the Glamorous Toolkit VM archive is extracted into."""
        return self.workspace / "gtoolkit-vm"

    def resolved_pharo_executable(self) -> Path:
        """Pharo VM used to prepare the seed image."""
        if self.pharo_executable is not None:
            return self.pharo_executable
        return _pharo_executable_in(self.pharo_vm_dir())

    def resolved_gtoolkit_executable(self) -> Path:
        """VM used to load Glamorous Toolkit.

        Falls back to the Pharo VM when no Glamorous Toolkit VM is configured.
        """
        if self.gtoolkit_executable is not None:
            return self.gtoolkit_executable
        if self.gtoolkit_vm_url:
            return _gtoolkit_executable_in(self.gtoolkit_vm_dir())
        return self.resolved_pharo_executable()


def get_settings(**overrides: object) -> Settings:
    """Get the application settings.

    Args:
        **overrides: Values taking precedence over environment and defaults.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings(**overrides)


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
