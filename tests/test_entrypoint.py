"""Tests for header-based entry point detection."""

import tempfile
from pathlib import Path

import pytest
from dotnet_globals import EntryPointNotFoundError
from dotnet_globals import find_entry_artifact
from dotnet_globals import has_entry_point


def test_executable_assembly_has_entry_point(make_assembly):
    """Test that a non-zero EntryPointToken is detected."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = make_assembly(Path(tmpdir), "app.dll", entry=True)

        assert has_entry_point(path)


def test_pe32_plus_assembly(make_assembly):
    """Test detection on a 64-bit image."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = make_assembly(Path(tmpdir), "app.dll", entry=True, pe32_plus=True)

        assert has_entry_point(path)


def test_library_has_no_entry_point(make_assembly):
    """Test that class libraries are not runnable."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = make_assembly(Path(tmpdir), "lib.dll")

        assert not has_entry_point(path)


def test_native_image_and_garbage_ignored(make_assembly):
    """Test that native PE files and non-PE files are skipped, not errors."""
    with tempfile.TemporaryDirectory() as tmpdir:
        native = make_assembly(Path(tmpdir), "native.dll", entry=True, managed=False)
        garbage = Path(tmpdir) / "garbage.dll"
        garbage.write_bytes(b"MZ")
        empty = Path(tmpdir) / "empty.dll"
        empty.write_bytes(b"")

        assert not has_entry_point(native)
        assert not has_entry_point(garbage)
        assert not has_entry_point(empty)


def test_find_entry_artifact(make_assembly):
    """Test that the runnable assembly is found among libraries."""
    with tempfile.TemporaryDirectory() as tmpdir:
        folder = Path(tmpdir)
        make_assembly(folder, "Newtonsoft.Json.dll")
        make_assembly(folder, "dotnet-hello.dll", entry=True)
        (folder / "dotnet-hello.deps.json").write_text("{}")

        assert find_entry_artifact(folder) == "dotnet-hello.dll"


def test_only_top_level_dll_files_considered(make_assembly):
    """Test that other extensions and subdirectories are ignored."""
    with tempfile.TemporaryDirectory() as tmpdir:
        folder = Path(tmpdir)
        make_assembly(folder, "app.exe", entry=True)
        (folder / "sub").mkdir()
        make_assembly(folder / "sub", "nested.dll", entry=True)
        make_assembly(folder, "UPPER.DLL", entry=True)

        assert find_entry_artifact(folder) == "UPPER.DLL"


def test_no_entry_point_raises(make_assembly):
    """Test error when no candidate exposes an entry point."""
    with tempfile.TemporaryDirectory() as tmpdir:
        folder = Path(tmpdir)
        make_assembly(folder, "a.dll")
        make_assembly(folder, "b.dll")

        with pytest.raises(EntryPointNotFoundError, match="Entry point not found") as exc_info:
            find_entry_artifact(folder)

        assert sorted(exc_info.value.context["candidates"]) == ["a.dll", "b.dll"]


def test_empty_directory_raises():
    """Test error for a directory with no assemblies at all."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(EntryPointNotFoundError):
            find_entry_artifact(Path(tmpdir))
