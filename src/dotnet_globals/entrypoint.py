"""Entry point detection for managed assemblies.

Assemblies are never loaded. The PE/COFF headers are parsed to reach the CLI
header, whose EntryPointToken is zero for class libraries and non-zero for
runnable programs.
"""

import logging
import struct
from pathlib import Path

from .exceptions import EntryPointNotFoundError

logger = logging.getLogger(__name__)

ASSEMBLY_EXTENSION = ".dll"

_PE32_MAGIC = 0x10B
_PE32_PLUS_MAGIC = 0x20B
_CLI_HEADER_INDEX = 14
_SECTION_HEADER_SIZE = 40


class _InvalidImage(ValueError):
    pass


def _unpack(fmt: str, data: bytes, offset: int) -> tuple:
    try:
        return struct.unpack_from(fmt, data, offset)
    except struct.error as e:
        raise _InvalidImage(f"truncated image at offset {offset}") from e


def _rva_to_offset(rva: int, sections: list[tuple[int, int, int, int]]) -> int:
    for virtual_address, virtual_size, raw_size, raw_pointer in sections:
        if virtual_address <= rva < virtual_address + max(virtual_size, raw_size):
            return rva - virtual_address + raw_pointer
    raise _InvalidImage(f"RVA {rva:#x} is outside every section")


def _read_entry_point_token(data: bytes) -> int:
    if data[:2] != b"MZ":
        raise _InvalidImage("missing MZ signature")

    (pe_offset,) = _unpack("<I", data, 0x3C)
    if data[pe_offset : pe_offset + 4] != b"PE\0\0":
        raise _InvalidImage("missing PE signature")

    coff = pe_offset + 4
    _, section_count, _, _, _, optional_size, _ = _unpack("<HHIIIHH", data, coff)

    optional = coff + 20
    (magic,) = _unpack("<H", data, optional)
    if magic == _PE32_MAGIC:
        rva_count_offset, directories_offset = 92, 96
    elif magic == _PE32_PLUS_MAGIC:
        rva_count_offset, directories_offset = 108, 112
    else:
        raise _InvalidImage(f"unknown optional header magic {magic:#x}")

    (rva_count,) = _unpack("<I", data, optional + rva_count_offset)
    if rva_count <= _CLI_HEADER_INDEX:
        raise _InvalidImage("no CLI header directory")

    cli_rva, cli_size = _unpack("<II", data, optional + directories_offset + 8 * _CLI_HEADER_INDEX)
    if cli_rva == 0 or cli_size == 0:
        raise _InvalidImage("not a managed assembly")

    sections_start = optional + optional_size
    sections = []
    for i in range(section_count):
        header = sections_start + i * _SECTION_HEADER_SIZE
        virtual_size, virtual_address, raw_size, raw_pointer = _unpack("<IIII", data, header + 8)
        sections.append((virtual_address, virtual_size, raw_size, raw_pointer))

    cli = _rva_to_offset(cli_rva, sections)
    # COR20 header: cb, runtime version, metadata directory, flags, entry point
    (entry_point_token,) = _unpack("<I", data, cli + 20)
    return entry_point_token


def has_entry_point(assembly_path: Path) -> bool:
    """Check whether a managed assembly declares a program entry point.

    Non-PE files and native images are reported as having no entry point.
    """
    try:
        data = assembly_path.read_bytes()
        return _read_entry_point_token(data) != 0
    except (OSError, _InvalidImage) as e:
        logger.debug(f"Skipping {assembly_path.name}: {e}")
        return False


def find_entry_artifact(directory: Path) -> str:
    """
    Find the runnable assembly among the top-level files of directory.

    Candidates are checked in directory enumeration order; the first one that
    declares an entry point wins.

    Args:
        directory: Folder holding build or restore output

    Returns:
        File name (not path) of the entry assembly

    Raises:
        EntryPointNotFoundError: If no candidate exposes an entry point
    """
    candidates = [p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ASSEMBLY_EXTENSION]
    logger.debug(f"Inspecting {len(candidates)} assemblies in {directory}")

    for candidate in candidates:
        if has_entry_point(candidate):
            logger.debug(f"Entry assembly: {candidate.name}")
            return candidate.name

    raise EntryPointNotFoundError(
        f"Entry point not found in package at {directory}",
        context={"directory": str(directory), "candidates": [p.name for p in candidates]},
    )
