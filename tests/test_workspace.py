"""Tests for the workspace checker, file placement and script writing."""

from pathlib import Path

import pytest

from gtoolkit_installer.errors import (
    AlreadyInstalledError,
    AmbiguousMatchError,
    NotFoundError,
)
from gtoolkit_installer.workspace import (
    FileNamed,
    check_installation,
    is_installed,
    materialize,
    named,
    relocate,
)


class TestCheckInstallation:
    """Tests for check_installation function."""

    def test_missing_workspace_is_created(self, tmp_path: Path) -> None:
        """A missing workspace should be created."""
        workspace = tmp_path / "gt"

        check_installation(workspace, overwrite=False)

        assert workspace.is_dir()

    def test_empty_workspace_is_not_an_installation(self, tmp_path: Path) -> None:
        """An empty workspace should be accepted as is."""
        workspace = tmp_path / "gt"
        workspace.mkdir()

        assert is_installed(workspace) is False
        check_installation(workspace, overwrite=False)
        assert workspace.is_dir()

    def test_existing_installation_without_overwrite(self, tmp_path: Path) -> None:
        """An existing installation should fail and be left untouched."""
        workspace = tmp_path / "gt"
        workspace.mkdir()
        image = workspace / "GlamorousToolkit.image"
        image.write_text("image")

        with pytest.raises(AlreadyInstalledError) as exc_info:
            check_installation(workspace, overwrite=False)

        assert exc_info.value.code == "already_installed"
        assert exc_info.value.path == workspace
        assert str(workspace) in str(exc_info.value)
        assert image.read_text() == "image"

    def test_existing_installation_with_overwrite(self, tmp_path: Path) -> None:
        """Overwrite should remove the previous installation."""
        workspace = tmp_path / "gt"
        (workspace / "pharo-vm").mkdir(parents=True)
        (workspace / "GlamorousToolkit.image").write_text("image")

        check_installation(workspace, overwrite=True)

        assert workspace.is_dir()
        assert list(workspace.iterdir()) == []


class TestFileNamed:
    """Tests for FileNamed pattern matching."""

    def test_matches_direct_children_only(self, tmp_path: Path) -> None:
        """Only files directly inside the directory should match."""
        (tmp_path / "Pharo.image").write_text("a")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "Other.image").write_text("b")

        assert named("*.image", tmp_path).matches() == [tmp_path / "Pharo.image"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing directory should be reported as not found."""
        with pytest.raises(NotFoundError):
            FileNamed("*.image", tmp_path / "missing").find()

    def test_listing_is_not_cached(self, tmp_path: Path) -> None:
        """Files created after construction should be seen."""
        source = named("*.image", tmp_path)
        (tmp_path / "Pharo.image").write_text("a")

        assert source.find() == tmp_path / "Pharo.image"


class TestRelocate:
    """Tests for relocate function."""

    def test_no_match(self, tmp_path: Path) -> None:
        """Zero matches should raise NotFoundError."""
        (tmp_path / "Pharo.changes").write_text("c")

        with pytest.raises(NotFoundError) as exc_info:
            relocate(named("*.image", tmp_path), tmp_path / "GT.image")

        assert exc_info.value.code == "not_found"

    def test_single_match_is_moved(self, tmp_path: Path) -> None:
        """A single match should be moved to the destination file."""
        source_dir = tmp_path / "pharo-image"
        source_dir.mkdir()
        original = source_dir / "Pharo10-64bit.image"
        original.write_text("image")

        target = relocate(named("*.image", source_dir), tmp_path / "GT.image")

        assert target == tmp_path / "GT.image"
        assert target.read_text() == "image"
        assert not original.exists()

    def test_destination_directory_keeps_name(self, tmp_path: Path) -> None:
        """Moving into a directory should keep the original file name."""
        source_dir = tmp_path / "pharo-image"
        source_dir.mkdir()
        (source_dir / "PharoV60.sources").write_text("sources")

        target = relocate(named("*.sources", source_dir), tmp_path)

        assert target == tmp_path / "PharoV60.sources"
        assert target.read_text() == "sources"

    def test_ambiguous_match(self, tmp_path: Path) -> None:
        """Several matches should fail without moving anything."""
        source_dir = tmp_path / "pharo-image"
        source_dir.mkdir()
        (source_dir / "A.image").write_text("a")
        (source_dir / "B.image").write_text("b")

        with pytest.raises(AmbiguousMatchError) as exc_info:
            relocate(named("*.image", source_dir), tmp_path / "GT.image")

        assert exc_info.value.code == "ambiguous_match"
        assert len(exc_info.value.matches) == 2
        assert (source_dir / "A.image").exists()
        assert (source_dir / "B.image").exists()
        assert not (tmp_path / "GT.image").exists()


class TestMaterialize:
    """Tests for materialize function."""

    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        """The file and its parent directories should be created."""
        target = tmp_path / "a" / "b" / "load-gt.st"

        materialize(target, "Metacello new load.\n")

        assert target.read_text() == "Metacello new load.\n"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        """An existing file should be replaced."""
        target = tmp_path / "load-gt.st"
        target.write_text("old")

        materialize(target, "new")

        assert target.read_text() == "new"
