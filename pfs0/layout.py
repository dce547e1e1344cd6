"""
PFS0 Layout - Compute header, descriptor table and string table up front.

Every descriptor's offset depends on the sizes of all files before it, and the
header carries the full string table size, so the whole layout is planned
before a single byte is written. Planning is pure: no I/O, no file handles.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterable

from pfs0.spec import (
    MAGIC,
    HEADER_FORMAT,
    HEADER_SIZE,
    DESCRIPTOR_FORMAT,
    DESCRIPTOR_SIZE,
    STRING_TERMINATOR,
    FILENAME_ENCODING,
    FILENAME_ERRORS,
    PATH_SEPARATORS,
)


def base_name(path: str) -> str:
    """Strip everything up to the last '/' or '\\'."""
    for sep in PATH_SEPARATORS:
        path = path.rsplit(sep, 1)[-1]
    return path


@dataclass(frozen=True)
class ArchiveHeader:
    file_count: int
    string_table_size: int
    magic: bytes = MAGIC
    reserved: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            HEADER_FORMAT, self.magic, self.file_count, self.string_table_size, self.reserved
        )


@dataclass(frozen=True)
class FileDescriptor:
    file_offset: int
    file_size: int
    string_table_offset: int
    reserved: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            DESCRIPTOR_FORMAT,
            self.file_offset,
            self.file_size,
            self.string_table_offset,
            self.reserved,
        )


@dataclass(frozen=True)
class LayoutPlan:
    """Complete, immutable layout of one archive."""

    header: ArchiveHeader
    descriptors: tuple[FileDescriptor, ...]
    names: tuple[str, ...]
    string_table: bytes

    @property
    def metadata_size(self) -> int:
        """Bytes before the content region (header + descriptors + string table)."""
        return HEADER_SIZE + DESCRIPTOR_SIZE * len(self.descriptors) + len(self.string_table)

    @property
    def content_size(self) -> int:
        return sum(d.file_size for d in self.descriptors)

    @property
    def total_size(self) -> int:
        return self.metadata_size + self.content_size

    def __repr__(self) -> str:
        return (
            f"LayoutPlan(files={self.header.file_count}, "
            f"string_table_size={self.header.string_table_size}, "
            f"total_size={self.total_size})"
        )


def plan_layout(entries: Iterable[tuple[str, int]]) -> LayoutPlan:
    """
    Plan an archive from (filename, byte length) pairs, in the given order.

        plan = plan_layout([("b.bin", 3), ("a.txt", 2)])
        plan.descriptors[1].file_offset        # 3
        plan.descriptors[1].string_table_offset  # 6

    Names are reduced to their base name. Duplicates are kept as-is.
    Names that came from the filesystem undecoded keep their original bytes.
    """
    descriptors: list[FileDescriptor] = []
    names: list[str] = []
    strings = bytearray()
    file_offset = 0

    for name, size in entries:
        name = base_name(name)
        descriptors.append(
            FileDescriptor(
                file_offset=file_offset,
                file_size=size,
                string_table_offset=len(strings),
            )
        )
        names.append(name)
        strings += name.encode(FILENAME_ENCODING, FILENAME_ERRORS) + STRING_TERMINATOR
        file_offset += size

    header = ArchiveHeader(file_count=len(descriptors), string_table_size=len(strings))
    return LayoutPlan(
        header=header,
        descriptors=tuple(descriptors),
        names=tuple(names),
        string_table=bytes(strings),
    )
