"""Shared fixtures: minimal managed assemblies and fake collaborators."""

import struct
from pathlib import Path

import pytest

_SECTION_RVA = 0x2000
_SECTION_RAW = 0x200


def build_assembly(entry_point_token: int = 0, managed: bool = True, pe32_plus: bool = False) -> bytes:
    """Build a minimal PE image with a CLI header.

    Args:
        entry_point_token: EntryPointToken stored in the CLI header (0 = library)
        managed: Whether to populate the CLI header data directory
        pe32_plus: Emit a PE32+ (64-bit) optional header
    """
    pe_offset = 0x80
    optional_size = 240 if pe32_plus else 224
    magic = 0x20B if pe32_plus else 0x10B
    rva_count_offset, directories_offset = (108, 112) if pe32_plus else (92, 96)

    image = bytearray(_SECTION_RAW + 0x200)
    image[0:2] = b"MZ"
    struct.pack_into("<I", image, 0x3C, pe_offset)
    image[pe_offset : pe_offset + 4] = b"PE\0\0"

    coff = pe_offset + 4
    struct.pack_into("<HHIIIHH", image, coff, 0x14C, 1, 0, 0, 0, optional_size, 0x2102)

    optional = coff + 20
    struct.pack_into("<H", image, optional, magic)
    struct.pack_into("<I", image, optional + rva_count_offset, 16)
    if managed:
        struct.pack_into("<II", image, optional + directories_offset + 8 * 14, _SECTION_RVA, 72)

    section = optional + optional_size
    image[section : section + 8] = b".text\0\0\0"
    struct.pack_into("<IIII", image, section + 8, 0x200, _SECTION_RVA, 0x200, _SECTION_RAW)

    cli = _SECTION_RAW
    struct.pack_into("<IHH", image, cli, 72, 2, 5)
    struct.pack_into("<I", image, cli + 20, entry_point_token)
    return bytes(image)


@pytest.fixture
def make_assembly():
    """Write an assembly into a directory: make_assembly(dir, name, entry=True)."""

    def _make(directory: Path, name: str, entry: bool = False, **kwargs) -> Path:
        path = directory / name
        path.write_bytes(build_assembly(entry_point_token=0x06000001 if entry else 0, **kwargs))
        return path

    return _make


class FakeRunner:
    """Process invoker that records calls and delegates to per-subcommand handlers."""

    def __init__(self, handlers: dict | None = None, results: dict | None = None):
        self.calls: list[tuple[str, ...]] = []
        self.handlers = handlers or {}
        self.results = results or {}

    def run(self, command: str, *args: str) -> bool:
        self.calls.append((command, *args))
        subcommand = args[0] if args else ""
        handler = self.handlers.get(subcommand)
        if handler is not None:
            handler(*args[1:])
        return self.results.get(subcommand, True)


@pytest.fixture
def fake_runner():
    return FakeRunner
