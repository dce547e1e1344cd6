"""
PFS0 FileSet - Enumerate and open the files that go into an archive.

Each source is opened exactly once. Its size is taken by seeking to the end,
then the handle is rewound and held until the writer copies it. Content is
never read here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator

from pfs0.layout import base_name

logger = logging.getLogger(__name__)


def _same_file(path: str, other: str | Path) -> bool:
    try:
        return os.path.samefile(path, other)
    except FileNotFoundError:
        return False


class SourceFile:
    """A named, open, rewound byte source with a known length."""

    def __init__(self, path: str | Path, handle: BinaryIO, size: int) -> None:
        self.path = str(path)
        self.name = base_name(self.path)
        self.handle = handle
        self.size = size

    @classmethod
    def open(cls, path: str | Path) -> SourceFile:
        handle = open(path, "rb")
        try:
            handle.seek(0, os.SEEK_END)
            size = handle.tell()
            handle.seek(0)
        except BaseException:
            handle.close()
            raise
        return cls(path, handle, size)

    @property
    def closed(self) -> bool:
        return self.handle.closed

    def close(self) -> None:
        self.handle.close()

    def __repr__(self) -> str:
        return f"SourceFile(name={self.name!r}, size={self.size})"


class FileSet:
    """
    Ordered set of source files, owning their handles.

    Usage:
        with FileSet.from_directory("romfs") as files:
            plan = plan_layout(files.entries())
            ...

    Leaving the with-block closes any handle the writer didn't already close.
    """

    def __init__(self, sources: Iterable[SourceFile] = ()) -> None:
        self.sources: list[SourceFile] = list(sources)

    @classmethod
    def from_directory(cls, path: str | Path, exclude: str | Path | None = None) -> FileSet:
        """
        Open every regular file directly inside `path`, in scandir order.

        Raises FileNotFoundError / NotADirectoryError for a bad input path.
        Subdirectories and special files are skipped, as is `exclude` (the
        archive being written, when it lives inside `path`).
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f'File path "{path}" does not exist!')
        if not os.path.isdir(path):
            raise NotADirectoryError(f'"{path}" is not a directory!')

        fileset = cls()
        try:
            with os.scandir(path) as it:
                for entry in it:
                    if not entry.is_file():
                        logger.debug("Skipping %s: not a regular file", entry.path)
                        continue
                    if exclude is not None and _same_file(entry.path, exclude):
                        logger.debug("Skipping %s: output archive", entry.path)
                        continue
                    fileset.sources.append(SourceFile.open(entry.path))
        except BaseException:
            fileset.close()
            raise
        return fileset

    @classmethod
    def from_paths(cls, paths: Iterable[str | Path]) -> FileSet:
        """Open the given files in the given order."""
        fileset = cls()
        try:
            for path in paths:
                fileset.sources.append(SourceFile.open(path))
        except BaseException:
            fileset.close()
            raise
        return fileset

    def entries(self) -> list[tuple[str, int]]:
        """(name, size) pairs, ready for plan_layout()."""
        return [(s.name, s.size) for s in self.sources]

    def close(self) -> None:
        for source in self.sources:
            source.close()

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    def __enter__(self) -> FileSet:
        return self

    def __exit__(self, *args) -> None:
        self.close()
