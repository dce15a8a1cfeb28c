import os

from urllib.parse import quote_from_bytes

GLOBAL_ENCODING = 'utf-8'

SIDECAR_PREFIX = "._"


def get_global_encoding() -> str:
    return GLOBAL_ENCODING


def set_global_encoding(encoding: str) -> None:
    global GLOBAL_ENCODING
    "".encode(encoding)  # raises LookupError for unknown codecs
    GLOBAL_ENCODING = encoding


def sanitize_attr_name(name: bytes) -> str:
    return quote_from_bytes(name, safe=b"./-_:@")


def parse_attr_assignment(text: str) -> tuple[str, str]:
    """Split a NAME=VALUE command-line argument. The value may contain '='."""
    name, sep, value = text.partition("=")
    if not sep:
        raise ValueError(f"expected NAME=VALUE, got {text!r}")
    return name, value


def sidecar_name(path: str) -> str:
    """Conventional AppleDouble companion path: 'dir/file' -> 'dir/._file'."""
    head, tail = os.path.split(path)
    if not tail:
        raise ValueError(f"no file name in {path!r}")
    return os.path.join(head, SIDECAR_PREFIX + tail)
