import struct


def align_padding(length: int, alignment: int = 4) -> int:
    """Number of zero bytes that follow a record of `length` bytes.

    A record that already ends on the boundary still gets `alignment` bytes,
    so there is always at least one trailing zero.
    """
    return alignment - length % alignment


def pack_cstr(bintext: bytes) -> bytes:
    """Length byte (counting the terminator), the text, then a NUL terminator."""
    assert len(bintext) + 1 <= 0xFF
    return struct.pack(">B", len(bintext) + 1) + bintext + b'\0'


def calc_cstr_size(bintext: bytes) -> int:
    return 1 + len(bintext) + 1
