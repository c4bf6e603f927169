"""Shared type definitions for gtoolkit_installer.

This module contains enums and dataclasses shared across subpackages to
avoid circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from gtoolkit_installer.progress import human_duration


class Loader(str, Enum):
    """Strategy used to load Glamorous Toolkit code into the seed image.

    Cloner is much faster but is not suitable for release builds.
    Metacello is slower but produces a release-safe image.
    """

    CLONER = "cloner"
    METACELLO = "metacello"

    def __str__(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        """Human-readable description of the loader."""
        return _LOADER_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: str | Loader) -> Loader:
        """Parse a loader name, ignoring case.

        Args:
            value: Loader name such as ``"Cloner"`` or an existing Loader.

        Returns:
            Matching Loader.

        Raises:
            ValueError: If the name is not a known loader.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for loader in cls:
            if loader.value == normalized:
                return loader
        valid = ", ".join(loader.value for loader in cls)
        raise ValueError(f"Unknown loader {value!r}. Valid values: {valid}")


_LOADER_DESCRIPTIONS = {
    Loader.CLONER: (
        "Use Cloner from gtoolkit-releaser: much faster loading, "
        "not suitable for release builds"
    ),
    Loader.METACELLO: (
        "Use Pharo's Metacello: much slower than Cloner, suitable for release builds"
    ),
}


@dataclass(frozen=True)
class RemoteImage:
    """Seed image downloaded from a URL."""

    url: str


@dataclass(frozen=True)
class LocalImage:
    """Seed image taken from a zip archive on disk."""

    path: Path


ImageSeed = RemoteImage | LocalImage


@dataclass(frozen=True)
class SshKeyPair:
    """Canonical paths to the ssh keys used when pushing to repositories."""

    private: Path
    public: Path


class BuildStage(str, Enum):
    """Stage reached by the build pipeline."""

    START = "start"
    CHECKED = "checked"
    FETCHED = "fetched"
    EXTRACTED = "extracted"
    PLACED = "placed"
    SCRIPTS_MATERIALIZED = "scripts_materialized"
    PATCHES_LOADED = "patches_loaded"
    BUILT_IMAGE = "built_image"
    DONE = "done"


@dataclass
class BuildReport:
    """Result of a successful build."""

    workspace: Path
    image: Path
    loader: Loader
    elapsed: float
    stages: list[BuildStage] = field(default_factory=list)

    @property
    def human_elapsed(self) -> str:
        """Elapsed time formatted for humans."""
        return human_duration(self.elapsed)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "workspace": str(self.workspace),
            "image": str(self.image),
            "loader": self.loader.value,
            "elapsed_seconds": round(self.elapsed, 3),
            "stages": [stage.value for stage in self.stages],
        }


__all__ = [
    "BuildReport",
    "BuildStage",
    "ImageSeed",
    "Loader",
    "LocalImage",
    "RemoteImage",
    "SshKeyPair",
]
