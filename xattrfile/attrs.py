"""
Extended-attribute directory stored inside the Finder Info entry of an AppleDouble file.

Layout of the Finder Info entry, as written by macOS (see vfs_xattr.c in xnu):

    FINDER INFO        32 zero bytes
    EXT ATTR HDR       magic 'ATTR', total length, data offset, data length
    ATTR ENTRY[0..N]   data offset, data length, flags, name (4-byte aligned)
    ATTR DATA[0..N]    values, packed back to back

All offsets are absolute, i.e. counted from the start of the AppleDouble file.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Final

import struct

from xattrfile.adf import ADF_HEADER_LENGTH
from xattrfile.packutils import align_padding, calc_cstr_size, pack_cstr
from xattrfile.textio import get_global_encoding, sanitize_attr_name

ATTR_MAGIC: Final = b"ATTR"

# Finder info (32), padding (2), magic, debug tag (4), total length, data offset, data length,
# reserved (12), flags (2). The attribute count that completes the on-disk header is written
# at the start of the key table.
ATTR_HEADER_STRUCT: Final = struct.Struct(">32x 2x 4s 4x LLL 12x 2x")
ATTR_HEADER_LENGTH: Final = ATTR_HEADER_STRUCT.size

ATTR_COUNT_STRUCT: Final = struct.Struct(">H")

# data offset, data length, flags; followed by the length-prefixed, NUL-terminated name
ATTR_ENTRY_STRUCT: Final = struct.Struct(">LLH")

ATTR_MAX_NAME_LENGTH: Final = 0xFF - 1   # name length byte includes the terminator
ATTR_MAX_COUNT: Final       = 0xFFFF
ATTR_MAX_FILE_LENGTH: Final = 0xFFFFFFFF

AttributeValue = bytes | bytearray | memoryview | str


class XattrFileError(ValueError):
    pass


class InvalidAttributeName(XattrFileError):
    pass


class AttributeCountOverflow(XattrFileError):
    pass


class AttributeDataOverflow(XattrFileError):
    pass


@dataclass
class Attribute:
    name: bytes
    "Raw attribute name (UTF-8), without the terminator."

    value: bytes
    "Raw attribute value."

    @property
    def record_length(self) -> int:
        """Size of this attribute's key table record, padding included."""
        unpadded = ATTR_ENTRY_STRUCT.size + calc_cstr_size(self.name)
        return unpadded + align_padding(unpadded)


@dataclass
class KeyEntry:
    data_offset: int
    "Absolute offset of the value in the file."

    data_length: int

    name: bytes

    flags: int = 0

    def pack(self) -> bytes:
        record = ATTR_ENTRY_STRUCT.pack(self.data_offset, self.data_length, self.flags) + pack_cstr(self.name)
        return record + b'\0' * align_padding(len(record))


@dataclass(frozen=True)
class Layout:
    key_table_length: int
    data_length: int
    entries: tuple[KeyEntry, ...] = field(default=())
    header_length: int = ADF_HEADER_LENGTH
    attr_header_length: int = ATTR_HEADER_LENGTH

    @property
    def finder_info_offset(self) -> int:
        return self.header_length

    @property
    def finder_info_length(self) -> int:
        return self.attr_header_length + self.key_table_length + self.data_length

    @property
    def key_table_offset(self) -> int:
        return self.header_length + self.attr_header_length

    @property
    def data_offset(self) -> int:
        return self.key_table_offset + self.key_table_length

    @property
    def file_length(self) -> int:
        return self.header_length + self.finder_info_length

    @property
    def resource_fork_offset(self) -> int:
        return self.file_length

    @property
    def resource_fork_length(self) -> int:
        return 0


def encode_attr_name(name: str | bytes) -> bytes:
    if isinstance(name, str):
        bintext = name.encode('utf-8')
    elif isinstance(name, (bytes, bytearray)):
        bintext = bytes(name)
    else:
        raise TypeError(f"attribute name must be str or bytes, not {type(name).__name__}")

    if not bintext:
        raise InvalidAttributeName("attribute name is empty")
    if b'\0' in bintext:
        raise InvalidAttributeName(f"attribute name {sanitize_attr_name(bintext)} contains a NUL byte")
    if len(bintext) > ATTR_MAX_NAME_LENGTH:
        raise InvalidAttributeName(
            f"attribute name {sanitize_attr_name(bintext[:32])}... is {len(bintext)} bytes long "
            f"(max {ATTR_MAX_NAME_LENGTH})")
    return bintext


def encode_attr_value(value: AttributeValue) -> bytes:
    if isinstance(value, str):
        return value.encode(get_global_encoding())
    elif isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    else:
        raise TypeError(f"attribute value must be bytes-like or str, not {type(value).__name__}")


def sorted_attributes(
        attributes: Mapping | Iterable[tuple] | None,
) -> list[Attribute]:
    """
    Validate an attribute set and return it sorted by raw name bytes, which is the order
    macOS writes its key table in.
    """
    if attributes is None:
        return []

    pairs = attributes.items() if isinstance(attributes, Mapping) else attributes

    by_name: dict[bytes, Attribute] = {}
    for name, value in pairs:
        bintext = encode_attr_name(name)
        if bintext in by_name:
            raise InvalidAttributeName(f"duplicate attribute name {sanitize_attr_name(bintext)}")
        by_name[bintext] = Attribute(bintext, encode_attr_value(value))

    if len(by_name) > ATTR_MAX_COUNT:
        raise AttributeCountOverflow(f"{len(by_name)} attributes (max {ATTR_MAX_COUNT})")

    return [by_name[bintext] for bintext in sorted(by_name)]


def calc_key_table_length(attrs: list[Attribute]) -> int:
    """First pass: the table size only depends on the name lengths."""
    return ATTR_COUNT_STRUCT.size + sum(attr.record_length for attr in attrs)


def build_key_entries(attrs: list[Attribute], data_offset: int) -> list[KeyEntry]:
    """Second pass: resolve each value's absolute offset, starting at `data_offset`."""
    entries = []
    cursor = data_offset
    for attr in attrs:
        entries.append(KeyEntry(data_offset=cursor, data_length=len(attr.value), name=attr.name))
        cursor += len(attr.value)
    return entries


def pack_key_table(entries: list[KeyEntry]) -> bytes:
    return ATTR_COUNT_STRUCT.pack(len(entries)) + b''.join(entry.pack() for entry in entries)


def pack_attr_data(attrs: list[Attribute]) -> bytes:
    return b''.join(attr.value for attr in attrs)


def pack_attr_header(layout: Layout) -> bytes:
    return ATTR_HEADER_STRUCT.pack(ATTR_MAGIC, layout.file_length, layout.data_offset, layout.data_length)


def compute_layout(attrs: list[Attribute]) -> Layout:
    key_table_length = calc_key_table_length(attrs)
    data_length = sum(len(attr.value) for attr in attrs)

    layout = Layout(key_table_length=key_table_length, data_length=data_length)

    if layout.file_length > ATTR_MAX_FILE_LENGTH:
        raise AttributeDataOverflow(
            f"attributes need {layout.file_length} bytes, offsets are limited to {ATTR_MAX_FILE_LENGTH}")

    entries = build_key_entries(attrs, layout.data_offset)
    return Layout(key_table_length=key_table_length, data_length=data_length, entries=tuple(entries))
