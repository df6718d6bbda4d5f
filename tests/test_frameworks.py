"""Tests for target framework moniker parsing."""

import pytest
from dotnet_globals import NETCOREAPP10
from dotnet_globals import TargetFramework
from dotnet_globals.frameworks import frameworks_match


@pytest.mark.parametrize(
    "moniker",
    ["netcoreapp1.0", "NETCoreApp1.0", ".NETCoreApp1.0", ".NETCoreApp,Version=v1.0", "netcoreapp1.0.0"],
)
def test_netcoreapp10_spellings(moniker):
    """Test that short and full spellings normalize to the same framework."""
    assert TargetFramework.parse(moniker) == NETCOREAPP10
    assert frameworks_match(moniker, NETCOREAPP10)


def test_full_and_short_names():
    """Test rendering of full and short folder names."""
    assert NETCOREAPP10.full_name == ".NETCoreApp,Version=v1.0"
    assert NETCOREAPP10.short_folder_name == "netcoreapp1.0"
    assert str(NETCOREAPP10) == ".NETCoreApp,Version=v1.0"


def test_undotted_framework_versions():
    """Test that net45 style monikers expand digit by digit."""
    framework = TargetFramework.parse("net45")

    assert framework == TargetFramework(identifier=".NETFramework", version="4.5")
    assert framework.short_folder_name == "net45"


def test_other_frameworks_do_not_match():
    """Test that different identifiers or versions do not match."""
    assert not frameworks_match("netstandard1.6", NETCOREAPP10)
    assert not frameworks_match("netcoreapp1.1", NETCOREAPP10)
    assert not frameworks_match("", NETCOREAPP10)


def test_unrecognized_moniker():
    """Test that garbage is not parsed."""
    assert TargetFramework.parse("not a framework!") is None
