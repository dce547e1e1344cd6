"""pfs0 - Build PFS0 (partition file system v0) archives from a directory."""

from pfs0.fileset import FileSet, SourceFile
from pfs0.layout import ArchiveHeader, FileDescriptor, LayoutPlan, plan_layout
from pfs0.writer import PFS0Writer, build_archive, copy_stream

__version__ = "0.1.0"

__all__ = [
    "ArchiveHeader",
    "FileDescriptor",
    "FileSet",
    "LayoutPlan",
    "PFS0Writer",
    "SourceFile",
    "build_archive",
    "copy_stream",
    "plan_layout",
]
