"""
PFS0 Writer - Emit header, descriptors, string table, then file contents.

The output is written strictly forward: everything before the content region
comes from the plan, so no seeking back is ever needed. File contents are
streamed through a fixed buffer and never held in memory whole.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Iterable

from pfs0.fileset import FileSet, SourceFile
from pfs0.layout import LayoutPlan, plan_layout
from pfs0.spec import COPY_BUFFER_SIZE

logger = logging.getLogger(__name__)


def copy_stream(src: BinaryIO, dst: BinaryIO, buffer_size: int = COPY_BUFFER_SIZE) -> int:
    """Copy src to dst until EOF through one reusable buffer. Returns bytes copied."""
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")
    buf = bytearray(buffer_size)
    view = memoryview(buf)
    total = 0
    while True:
        n = src.readinto(view)
        if not n:
            break
        dst.write(view[:n])
        total += n
    return total


class PFS0Writer:
    """
    Writes one PFS0 archive to an open binary sink.

    Usage:
        # One call
        plan = PFS0Writer.build(files, "out.nsp")

        # Step by step
        with PFS0Writer.open("out.nsp") as w:
            w.write_metadata(plan)
            for source in files:
                w.append_file(source)
    """

    def __init__(self, handle: BinaryIO, buffer_size: int = COPY_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._handle = handle
        self.buffer_size = buffer_size
        self.bytes_written = 0
        self.files_written = 0
        self._closed = False

    @classmethod
    def open(cls, path: str | Path, buffer_size: int = COPY_BUFFER_SIZE) -> PFS0Writer:
        """Create or truncate `path` and return a writer owning it."""
        return cls(open(path, "wb"), buffer_size=buffer_size)

    def _write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Cannot write to a closed PFS0Writer")
        self._handle.write(data)
        self.bytes_written += len(data)

    def write_metadata(self, plan: LayoutPlan) -> None:
        """Header, descriptor table and string table, in that order."""
        logger.info("> PFS0 Header Generation")
        self._write(plan.header.pack())
        for descriptor in plan.descriptors:
            self._write(descriptor.pack())
        logger.info("> Building string table")
        self._write(plan.string_table)

    def append_file(self, source: SourceFile, expected_size: int | None = None) -> int:
        """
        Stream one source's full content and close it.

        Raises RuntimeError if the number of bytes copied differs from
        expected_size (defaults to the size measured when the source was opened).
        """
        if self._closed:
            raise RuntimeError("Cannot write to a closed PFS0Writer")
        if expected_size is None:
            expected_size = source.size
        try:
            copied = copy_stream(source.handle, self._handle, self.buffer_size)
        finally:
            source.close()
        self.bytes_written += copied
        if copied != expected_size:
            raise RuntimeError(
                f"{source.path} changed size while packing: "
                f"expected {expected_size} bytes, copied {copied}"
            )
        self.files_written += 1
        logger.debug("Copied %d bytes from %s", copied, source.path)
        return copied

    def write(self, plan: LayoutPlan, sources: Iterable[SourceFile]) -> None:
        """Write a whole archive: metadata, then each source in plan order."""
        sources = list(sources)
        if len(sources) != plan.header.file_count:
            raise ValueError(
                f"Plan describes {plan.header.file_count} files, got {len(sources)} sources"
            )
        self.write_metadata(plan)
        logger.info("> Adding file entries:")
        for source, descriptor in zip(sources, plan.descriptors):
            self.append_file(source, expected_size=descriptor.file_size)
            logger.info("      %s ...done", source.name)

    @classmethod
    def build(
        cls,
        files: FileSet,
        output_path: str | Path,
        buffer_size: int = COPY_BUFFER_SIZE,
    ) -> LayoutPlan:
        """Plan and write `files` to `output_path`. Returns the plan written."""
        plan = plan_layout(files.entries())
        with cls.open(output_path, buffer_size=buffer_size) as writer:
            writer.write(plan, files)
        logger.info('PFS0 file "%s" is now built', output_path)
        return plan

    def close(self) -> None:
        if self._closed:
            return
        self._handle.close()
        self._closed = True

    def __enter__(self) -> PFS0Writer:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def build_archive(
    input_dir: str | Path,
    output_path: str | Path,
    buffer_size: int = COPY_BUFFER_SIZE,
) -> LayoutPlan:
    """
    Pack every regular file directly inside `input_dir` into `output_path`.

        plan = build_archive("romfs", "romfs.nsp")
        print(plan.header.file_count, plan.total_size)
    """
    with FileSet.from_directory(input_dir, exclude=output_path) as files:
        return PFS0Writer.build(files, output_path, buffer_size=buffer_size)
