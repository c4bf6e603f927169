"""Build options accepted by the installer.

``BuildOptions`` is the validated shape of the ``build`` command line. Its
resolution helpers turn loosely specified flags into the tagged types the
pipeline consumes, failing with a ConfigurationError instead of guessing.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from gtoolkit_installer.errors import ConfigurationError, NotFoundError
from gtoolkit_installer.types import (
    ImageSeed,
    Loader,
    LocalImage,
    RemoteImage,
    SshKeyPair,
)

logger = logging.getLogger(__name__)


class BuildOptions(BaseModel):
    """Options for building a Glamorous Toolkit image.

    Attributes:
        overwrite: Delete an existing installation before building.
        loader: Loader used to install Glamorous Toolkit code.
        image_url: URL of a clean seed image archive.
        image_path: Path to a clean seed image archive on disk.
        public_key: Public ssh key used when pushing to repositories.
        private_key: Private ssh key used when pushing to repositories.
    """

    model_config = ConfigDict(extra="forbid")

    overwrite: bool = Field(default=False, description="Replace existing install")
    loader: Loader = Field(default=Loader.CLONER, description="Code loader")
    image_url: HttpUrl | None = Field(default=None, description="Seed image URL")
    image_path: Path | None = Field(default=None, description="Seed image archive")
    public_key: Path | None = Field(default=None, description="Public ssh key")
    private_key: Path | None = Field(default=None, description="Private ssh key")

    @field_validator("loader", mode="before")
    @classmethod
    def parse_loader(cls, v: object) -> Loader:
        """Accept loader names in any case."""
        if isinstance(v, (str, Loader)):
            return Loader.parse(v)
        raise ValueError(f"loader must be a string, got {type(v).__name__}")

    def ssh_keys(self) -> SshKeyPair | None:
        """Resolve the ssh key pair.

        Returns:
            Canonical key pair, or None when neither key is given.

        Raises:
            NotFoundError: If a given key does not exist.
            ConfigurationError: If only one of the two keys is given.
        """
        public = _existing_key(self.public_key, "public")
        private = _existing_key(self.private_key, "private")

        if private is not None and public is not None:
            return SshKeyPair(private=private, public=public)
        if private is None and public is None:
            return None
        raise ConfigurationError("Both private and public key must be set, or none")

    def image_seed(self, workspace: Path | None = None) -> ImageSeed | None:
        """Resolve where the seed image comes from.

        Args:
            workspace: Build workspace. A seed archive may not live inside it,
                since the workspace is cleared before extraction.

        Returns:
            RemoteImage or LocalImage, or None to use the configured default.

        Raises:
            ConfigurationError: If both a URL and a path are given, or the
                path is not a zip archive or lies inside the workspace.
            NotFoundError: If the image path does not exist.
        """
        if self.image_url is not None and self.image_path is not None:
            raise ConfigurationError(
                "Specify either an image URL or an image path, not both"
            )
        if self.image_url is not None:
            return RemoteImage(url=str(self.image_url))
        if self.image_path is not None:
            if not self.image_path.is_file():
                raise NotFoundError(
                    f"Specified seed image does not exist: {self.image_path}",
                    code="image_not_found",
                )
            if not zipfile.is_zipfile(self.image_path):
                raise ConfigurationError(
                    f"Specified seed image is not a zip archive: {self.image_path}"
                )
            path = self.image_path.resolve()
            if workspace is not None and path.is_relative_to(workspace.resolve()):
                raise ConfigurationError(
                    f"Seed image {path} lies inside the workspace {workspace}; "
                    "move it elsewhere before building",
                    code="seed_in_workspace",
                )
            return LocalImage(path=path)
        return None


def _existing_key(key: Path | None, kind: str) -> Path | None:
    """Return the canonical path of an ssh key, checking that it exists."""
    if key is None:
        return None
    if not key.exists():
        raise NotFoundError(
            f"Specified {kind} key does not exist: {key}",
            code="key_not_found",
        )
    resolved = key.resolve()
    logger.debug("Resolved %s key %s to %s", kind, key, resolved)
    return resolved


__all__ = ["BuildOptions"]
