import base64
import binascii
import os
import sys
import argparse

from xattrfile import create, layout, XattrFileError
from xattrfile.jsonio import load_attributes_json
from xattrfile.textio import set_global_encoding, get_global_encoding, parse_attr_assignment, sidecar_name, sanitize_attr_name

description = (
    "Create an AppleDouble (\"._\") file carrying extended attributes, "
    "for filesystems and archives that cannot store them natively."
)

epilog = (
    "Attribute names are sorted before encoding, as macOS does, so the same "
    "set of attributes always produces the same file. Text values are encoded "
    "with --encoding (UTF-8 by default); use -x for binary values."
)

parser = argparse.ArgumentParser(prog="xattrfile", description=description, epilog=epilog)

parser.add_argument('file', type=str, help="Path of the file the attributes belong to.")

parser.add_argument(
    '-o', metavar='outpath', type=str,
    help="Destination file. If omitted, will create ._<FILENAME> in the current working directory.")

parser.add_argument(
    '-a', '--attr', action='append', metavar='NAME=TEXT', default=[],
    help="Add a text attribute. You may pass this switch several times.")

parser.add_argument(
    '-x', '--hex-attr', action='append', metavar='NAME=BASE16', default=[],
    help="Add a binary attribute given as base-16. You may pass this switch several times.")

parser.add_argument(
    '-j', '--json', type=str, metavar='path',
    help=(
        "JSON file containing an object of attributes. String values are text; "
        "binary values are written as {\"data\": \"<base16>\"}."))

parser.add_argument(
    '-t', "--list", action='store_true',
    help="Print the layout of the AppleDouble file instead of writing it.")

parser.add_argument(
    '--encoding', type=str, default="utf-8",
    help="String encoding for text attribute values (UTF-8 by default).")

args = parser.parse_args()


def gather_attributes() -> dict:
    attrs = {}

    if args.json:
        attrs.update(load_attributes_json(args.json))

    for assignment in args.attr:
        name, text = parse_attr_assignment(assignment)
        attrs[name] = text.encode(get_global_encoding())

    for assignment in args.hex_attr:
        name, hextext = parse_attr_assignment(assignment)
        try:
            attrs[name] = base64.b16decode(hextext, casefold=True)
        except binascii.Error as exc:
            raise ValueError(f"bad base16 value for {name!r}: {exc}") from exc

    return attrs


def do_list():
    plan = layout(gather_attributes())
    print(F"{'Region':16} {'Offset':>8} {'Size':>8}")
    print(F"{'-'*16} {'-'*8} {'-'*8}")
    print(F"{'header':16} {0:8} {plan.header_length:8}")
    print(F"{'attr header':16} {plan.finder_info_offset:8} {plan.attr_header_length:8}")
    print(F"{'key table':16} {plan.key_table_offset:8} {plan.key_table_length:8}")
    print(F"{'attr data':16} {plan.data_offset:8} {plan.data_length:8}")
    print(F"{'resource fork':16} {plan.resource_fork_offset:8} {plan.resource_fork_length:8}")
    print()
    print(F"{'Offset':>8} {'Size':>8}  {'Name'}")
    print(F"{'-'*8} {'-'*8}  {'-'*32}")
    for entry in plan.entries:
        print(F"{entry.data_offset:8} {entry.data_length:8}  {sanitize_attr_name(entry.name)}")
    print()
    print(F"Total: {plan.file_length} bytes")
    return 0


def do_create():
    outpath = args.o

    # Generate an output path if we're not given one
    if not outpath:
        outpath = os.path.join(os.getcwd(), sidecar_name(os.path.basename(args.file)))

    output_blob = create(gather_attributes())

    with open(outpath, "wb") as output_file:
        output_file.write(output_blob)

    print(F"Wrote \"{os.path.relpath(outpath, '.')}\" ({len(output_blob)} bytes)")
    return 0


# Non-zero result causes sys.exit(1)
result = -1

try:
    set_global_encoding(args.encoding)
    if args.list:
        result = do_list()
    else:
        result = do_create()
except XattrFileError as exc:
    print(f"Invalid attributes: {exc}")
except (ValueError, LookupError) as exc:
    print(f"Invalid input: {exc}")

if result:
    sys.exit(1)
