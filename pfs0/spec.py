"""
PFS0 Format Specification
=========================

Layout (all integers little-endian):
    "PFS0"                       <- Magic (4 bytes)
    file_count          u32      <- Number of file descriptors
    string_table_size   u32      <- Byte length of the string table
    reserved            u32      <- Always zero
    descriptor * file_count      <- 24 bytes each:
        file_offset         u64  <- Offset into the content region
        file_size           u64  <- Byte length of the file
        string_table_offset u32  <- Offset of the name in the string table
        reserved            u32  <- Always zero
    string table                 <- "name\\0name\\0...", string_table_size bytes
    content region               <- Raw file bytes, back-to-back, no padding

Design Decisions:
    - Offsets in descriptors are relative (content region / string table), not
      absolute file positions
    - Descriptor order == string table order == content order
    - No alignment padding anywhere; explicit struct formats, never native layout
    - Names are base names only, no directories
"""

import struct

# Magic bytes - first four bytes of every PFS0 file
MAGIC = b"PFS0"

# magic, file_count, string_table_size, reserved
HEADER_FORMAT = "<4sIII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 16

# file_offset, file_size, string_table_offset, reserved
DESCRIPTOR_FORMAT = "<QQII"
DESCRIPTOR_SIZE = struct.calcsize(DESCRIPTOR_FORMAT)  # 24

STRING_TERMINATOR = b"\x00"
FILENAME_ENCODING = "utf-8"
# Undecodable names (surrogate-escaped by os) are written back as their raw bytes
FILENAME_ERRORS = "surrogateescape"

# Both separators are stripped regardless of host platform
PATH_SEPARATORS = ("/", "\\")

# Intermediate buffer for streaming file contents (1MB)
COPY_BUFFER_SIZE = 1_000_000
