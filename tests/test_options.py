"""Tests for build options resolution."""

import zipfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from gtoolkit_installer.errors import ConfigurationError, NotFoundError
from gtoolkit_installer.options import BuildOptions
from gtoolkit_installer.types import Loader, LocalImage, RemoteImage, SshKeyPair


@pytest.fixture
def key_pair(tmp_path: Path) -> tuple[Path, Path]:
    """Create a private and public key on disk."""
    private = tmp_path / "id_ed25519"
    public = tmp_path / "id_ed25519.pub"
    private.write_text("private")
    public.write_text("public")
    return private, public


class TestDefaults:
    """Test BuildOptions defaults and parsing."""

    def test_defaults(self) -> None:
        """Defaults should match the command line defaults."""
        options = BuildOptions()

        assert options.overwrite is False
        assert options.loader is Loader.CLONER
        assert options.image_url is None
        assert options.image_path is None

    def test_loader_case_insensitive(self) -> None:
        """Loader should be parsed ignoring case."""
        assert BuildOptions(loader="Metacello").loader is Loader.METACELLO

    def test_unknown_loader(self) -> None:
        """Unknown loaders should fail validation."""
        with pytest.raises(ValidationError):
            BuildOptions(loader="git")

    def test_extra_fields_forbidden(self) -> None:
        """Unknown options should be rejected."""
        with pytest.raises(ValidationError):
            BuildOptions(no_gt_world=True)


class TestSshKeys:
    """Test ssh key pair resolution."""

    def test_no_keys(self) -> None:
        """Neither key should resolve to None."""
        assert BuildOptions().ssh_keys() is None

    def test_both_keys(self, key_pair: tuple[Path, Path]) -> None:
        """Both keys should resolve to a canonical pair."""
        private, public = key_pair
        keys = BuildOptions(private_key=private, public_key=public).ssh_keys()

        assert keys == SshKeyPair(private=private.resolve(), public=public.resolve())
        assert keys.private.is_absolute()
        assert keys.public.is_absolute()

    def test_relative_keys_are_canonicalized(
        self, key_pair: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Relative key paths should become absolute."""
        private, public = key_pair
        monkeypatch.chdir(private.parent)

        keys = BuildOptions(
            private_key=Path(private.name), public_key=Path(public.name)
        ).ssh_keys()

        assert keys is not None
        assert keys.private == private.resolve()
        assert keys.public == public.resolve()

    def test_only_private_key(self, key_pair: tuple[Path, Path]) -> None:
        """Only a private key should be a configuration error."""
        private, _ = key_pair
        with pytest.raises(ConfigurationError) as exc_info:
            BuildOptions(private_key=private).ssh_keys()

        assert exc_info.value.code == "configuration_error"

    def test_only_public_key(self, key_pair: tuple[Path, Path]) -> None:
        """Only a public key should be a configuration error."""
        _, public = key_pair
        with pytest.raises(ConfigurationError):
            BuildOptions(public_key=public).ssh_keys()

    def test_missing_key(self, key_pair: tuple[Path, Path], tmp_path: Path) -> None:
        """A key that does not exist should be reported as not found."""
        private, _ = key_pair
        with pytest.raises(NotFoundError) as exc_info:
            BuildOptions(
                private_key=private, public_key=tmp_path / "missing.pub"
            ).ssh_keys()

        assert exc_info.value.code == "key_not_found"
        assert "missing.pub" in str(exc_info.value)


class TestImageSeed:
    """Test seed image resolution."""

    def test_no_seed(self) -> None:
        """No URL and no path should use the configured default."""
        assert BuildOptions().image_seed() is None

    def test_url_seed(self) -> None:
        """A URL should resolve to a remote image."""
        seed = BuildOptions(image_url="https://example.com/seed.zip").image_seed()

        assert seed == RemoteImage(url="https://example.com/seed.zip")

    def test_invalid_url(self) -> None:
        """A malformed URL should fail validation."""
        with pytest.raises(ValidationError):
            BuildOptions(image_url="not a url")

    def test_path_seed(self, tmp_path: Path) -> None:
        """A zip archive on disk should resolve to a local image."""
        archive = tmp_path / "seed.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Pharo.image", b"image")

        seed = BuildOptions(image_path=archive).image_seed()

        assert seed == LocalImage(path=archive.resolve())

    def test_missing_path(self, tmp_path: Path) -> None:
        """A seed archive that does not exist should be reported."""
        with pytest.raises(NotFoundError) as exc_info:
            BuildOptions(image_path=tmp_path / "missing.zip").image_seed()

        assert exc_info.value.code == "image_not_found"

    def test_path_not_zip(self, tmp_path: Path) -> None:
        """A seed file that is not a zip archive should be rejected."""
        image = tmp_path / "Pharo.image"
        image.write_bytes(b"not a zip")

        with pytest.raises(ConfigurationError):
            BuildOptions(image_path=image).image_seed()

    def test_both_url_and_path(self, tmp_path: Path) -> None:
        """Giving both a URL and a path should be rejected, not prioritized."""
        archive = tmp_path / "seed.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Pharo.image", b"image")

        options = BuildOptions(
            image_url="https://example.com/seed.zip", image_path=archive
        )
        with pytest.raises(ConfigurationError):
            options.image_seed()

    def test_path_inside_workspace(self, tmp_path: Path) -> None:
        """A seed archive inside the workspace should be rejected."""
        workspace = tmp_path / "gt"
        workspace.mkdir()
        archive = workspace / "seed.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Pharo.image", b"image")

        with pytest.raises(ConfigurationError) as exc_info:
            BuildOptions(image_path=archive).image_seed(workspace)

        assert exc_info.value.code == "seed_in_workspace"

    def test_path_beside_workspace(self, tmp_path: Path) -> None:
        """A seed archive next to the workspace should be accepted."""
        archive = tmp_path / "seed.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("Pharo.image", b"image")

        seed = BuildOptions(image_path=archive).image_seed(tmp_path / "gt")

        assert seed == LocalImage(path=archive.resolve())
