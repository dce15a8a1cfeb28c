from collections.abc import Iterable, Mapping

from xattrfile.adf import pack_adf_header, ADF_HEADER_LENGTH
from xattrfile.attrs import (
    Attribute, KeyEntry, Layout,
    XattrFileError, InvalidAttributeName, AttributeCountOverflow, AttributeDataOverflow,
    sorted_attributes, compute_layout, pack_attr_header, pack_key_table, pack_attr_data,
    ATTR_HEADER_LENGTH,
)
from xattrfile.jsonio import json_to_attributes
from xattrfile.textio import set_global_encoding, get_global_encoding, sidecar_name


def layout(attributes: Mapping | Iterable[tuple] | None = None) -> Layout:
    return compute_layout(sorted_attributes(attributes))


def create(attributes: Mapping | Iterable[tuple] | None = None) -> bytes:
    """
    Encode extended attributes as an AppleDouble ("._") file.

    Names are sorted by their UTF-8 bytes, so the output only depends on the
    attribute set, not on the order it was given in. Nothing is written to disk.
    """
    attrs = sorted_attributes(attributes)
    plan = compute_layout(attrs)

    blob = b''.join([
        pack_adf_header(plan.finder_info_length),
        pack_attr_header(plan),
        pack_key_table(list(plan.entries)),
        pack_attr_data(attrs),
    ])

    assert len(blob) == plan.file_length
    return blob
