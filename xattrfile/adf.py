from typing import Final

import struct

ADF_MAGIC: Final   = 0x00051607
ADF_VERSION: Final = 0x00020000
ADF_FILLER: Final  = b"Mac OS X        "
ADF_ENTRYNUM_RESOURCEFORK: Final = 2
ADF_ENTRYNUM_FINDERINFO: Final   = 9

# magic, version, filler, entry count, then (id, offset, length) for each of the two entries.
# Finder Info must come first and the resource fork last.
ADF_HEADER_STRUCT: Final = struct.Struct(">LL16sH LLL LLL")
ADF_HEADER_LENGTH: Final = ADF_HEADER_STRUCT.size

assert ADF_HEADER_LENGTH == 26 + 2*12


def pack_adf_header(finder_info_length: int) -> bytes:
    """
    Pack the top-level AppleDouble header for a file whose Finder Info entry
    immediately follows the header and whose (empty) resource fork sits at the very end.
    """
    finder_info_offset = ADF_HEADER_LENGTH
    resource_fork_offset = finder_info_offset + finder_info_length

    return ADF_HEADER_STRUCT.pack(
        ADF_MAGIC,
        ADF_VERSION,
        ADF_FILLER,
        2,
        ADF_ENTRYNUM_FINDERINFO, finder_info_offset, finder_info_length,
        ADF_ENTRYNUM_RESOURCEFORK, resource_fork_offset, 0)
