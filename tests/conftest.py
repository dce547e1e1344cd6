"""
Shared fixtures. The decoder here exists only to check what the writer emits.
"""

import logging
import shutil
import struct
import tempfile
from pathlib import Path

import pytest

from pfs0.spec import HEADER_FORMAT, HEADER_SIZE, DESCRIPTOR_FORMAT, DESCRIPTOR_SIZE


def decode_archive(data: bytes) -> dict:
    """Split a PFS0 blob into header fields, descriptors, names and file contents."""
    magic, count, strtab_size, reserved = struct.unpack_from(HEADER_FORMAT, data, 0)
    descriptors = [
        struct.unpack_from(DESCRIPTOR_FORMAT, data, HEADER_SIZE + i * DESCRIPTOR_SIZE)
        for i in range(count)
    ]
    strtab_start = HEADER_SIZE + count * DESCRIPTOR_SIZE
    string_table = data[strtab_start:strtab_start + strtab_size]
    content_start = strtab_start + strtab_size

    files = []
    for offset, size, name_offset, _ in descriptors:
        end = string_table.index(b"\x00", name_offset)
        name = string_table[name_offset:end].decode("utf-8", "surrogateescape")
        start = content_start + offset
        files.append((name, data[start:start + size]))

    return {
        "magic": magic,
        "file_count": count,
        "string_table_size": strtab_size,
        "reserved": reserved,
        "descriptors": descriptors,
        "string_table": string_table,
        "content": data[content_start:],
        "files": files,
    }


@pytest.fixture
def decode():
    return decode_archive


@pytest.fixture
def workdir():
    path = Path(tempfile.mkdtemp(prefix="pfs0-"))
    yield path
    shutil.rmtree(path)


@pytest.fixture
def input_dir(workdir):
    d = workdir / "input"
    d.mkdir()
    return d


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI installs root handlers bound to the captured stdout; drop them."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
