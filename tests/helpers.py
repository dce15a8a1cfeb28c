import struct


def read_key_table(blob: bytes, offset: int = 118) -> list[tuple[bytes, int, int, int]]:
    """Walk the key table of an AppleDouble blob -> [(name, data_offset, data_length, record_length)]."""
    count, = struct.unpack_from(">H", blob, offset)
    offset += 2

    entries = []
    for _ in range(count):
        data_offset, data_length, flags, name_length = struct.unpack_from(">LLHB", blob, offset)
        assert flags == 0
        name = blob[offset + 11 : offset + 11 + name_length - 1]
        assert blob[offset + 11 + name_length - 1] == 0
        unpadded = 11 + name_length
        record_length = unpadded + 4 - unpadded % 4
        entries.append((name, data_offset, data_length, record_length))
        offset += record_length

    return entries
