from typing import Any

import base64
import binascii
import json

from xattrfile.textio import get_global_encoding


def json_to_attributes(json_blob: Any) -> dict[str, bytes]:
    """
    Convert a JSON object to an attribute set.

    String values are stored as text in the global encoding. Binary values are
    given as {"data": "<base16>"}.
    """
    if not isinstance(json_blob, dict):
        raise ValueError("attribute JSON must be an object")

    attrs = {}

    for name, wrapper in json_blob.items():
        if isinstance(wrapper, str):
            attrs[name] = wrapper.encode(get_global_encoding())
        elif isinstance(wrapper, dict) and isinstance(wrapper.get("data"), str):
            try:
                attrs[name] = base64.b16decode(wrapper["data"], casefold=True)
            except binascii.Error as exc:
                raise ValueError(f"bad base16 data for attribute {name!r}: {exc}") from exc
        else:
            raise ValueError(f"attribute {name!r} must be a string or {{\"data\": <base16>}}")

    return attrs


def load_attributes_json(path: str) -> dict[str, bytes]:
    with open(path, "rt", encoding="utf-8") as json_file:
        json_blob = json.load(json_file)
    return json_to_attributes(json_blob)
